"""pymapstore - In-memory document store for integration tests."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymapstore")
except PackageNotFoundError:
    __version__ = "0+local"
from pymapstore.config import StoreConfig
from pymapstore.exceptions import (
    DoesNotExist,
    KeyExtractionError,
    MapStoreConfigError,
    MapStoreError,
    NotFound,
    PatchError,
    StructuralPatchError,
)
from pymapstore.keys import comparator_for, default_comparator, field_key
from pymapstore.patch import (
    MergePatchEngine,
    OperationKind,
    Patch,
    PatchContext,
    PatchEngine,
    PatchOperation,
    diff,
)
from pymapstore.query import Query, Where
from pymapstore.store import MapStore

__all__ = [
    "__version__",
    "DoesNotExist",
    "KeyExtractionError",
    "MapStore",
    "MapStoreConfigError",
    "MapStoreError",
    "MergePatchEngine",
    "NotFound",
    "OperationKind",
    "Patch",
    "PatchContext",
    "PatchEngine",
    "PatchError",
    "PatchOperation",
    "Query",
    "StoreConfig",
    "StructuralPatchError",
    "Where",
    "comparator_for",
    "default_comparator",
    "diff",
    "field_key",
]
