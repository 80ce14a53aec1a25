"""Typed bulk patches.

A patch is an ordered batch of add/update/remove operations applied to a
store's whole collection in one pass by a :class:`PatchEngine`.
"""

from pymapstore.patch.diff import diff
from pymapstore.patch.engine import MergePatchEngine, PatchEngine
from pymapstore.patch.models import OperationKind, Patch, PatchContext, PatchOperation

__all__ = [
    "MergePatchEngine",
    "OperationKind",
    "Patch",
    "PatchContext",
    "PatchEngine",
    "PatchOperation",
    "diff",
]
