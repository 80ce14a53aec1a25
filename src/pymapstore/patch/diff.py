"""Build a patch from two snapshots of a collection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pymapstore.keys import Key
from pymapstore.patch.models import OperationKind, Patch, PatchOperation


def diff(before: Mapping[Key, Any], after: Mapping[Key, Any]) -> Patch:
    """Return the patch turning ``before`` into ``after``.

    Removes come first, followed by adds and updates in ``after`` order.
    Entries whose values compare equal produce no operation.
    """

    operations = [PatchOperation(op=OperationKind.REMOVE, key=key) for key in before if key not in after]
    for key, value in after.items():
        if key not in before:
            operations.append(PatchOperation(op=OperationKind.ADD, key=key, value=value))
        elif before[key] != value:
            operations.append(PatchOperation(op=OperationKind.UPDATE, key=key, value=value))
    return Patch(operations=tuple(operations))
