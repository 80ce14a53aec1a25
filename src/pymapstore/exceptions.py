"""Custom exception hierarchy for pymapstore."""

from __future__ import annotations

from typing import Any


class MapStoreError(Exception):
    """Base exception for all pymapstore errors."""


class MapStoreConfigError(MapStoreError):
    """Invalid or missing configuration."""


class NotFound(MapStoreError):
    """No value is stored under the requested key.

    Raised by :meth:`pymapstore.store.MapStore.find`. Callers decide the
    fallback; the store itself is unaffected.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"{key} does not exist")


DoesNotExist = NotFound


class KeyExtractionError(MapStoreError):
    """The key extractor could not read a key from a value.

    This signals a programming-contract violation (a value of the wrong
    shape reached the store), not a recoverable condition.
    """

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class PatchError(MapStoreError):
    """Base class for bulk patch failures."""


class StructuralPatchError(PatchError):
    """A patch operation is malformed or violates the element type.

    ``index`` is the position of the offending operation in the patch, when
    the failure can be attributed to a single operation.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        operation: Any = None,
    ) -> None:
        self.index = index
        self.operation = operation
        if index is not None:
            message = f"operation {index}: {message}"
        super().__init__(message)
