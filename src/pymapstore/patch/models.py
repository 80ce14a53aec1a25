"""Patch models.

Operations are validated by pydantic at the boundary, so engines only ever
see well-formed :class:`PatchOperation` instances (raw mappings handed to an
engine are validated there).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from pymapstore.keys import Comparator, Key, KeyExtractor


class OperationKind(StrEnum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


class PatchOperation(BaseModel):
    """A single add/update/remove directive.

    ``add`` and ``update`` carry the new value; their key may be omitted, in
    which case it is extracted from the value. ``remove`` carries only a key.
    """

    model_config = ConfigDict(frozen=True)

    op: OperationKind
    key: Key | None = None
    value: Any = None

    @model_validator(mode="after")
    def _check_payload(self) -> PatchOperation:
        if self.op == OperationKind.REMOVE:
            if self.key is None:
                raise ValueError("remove requires a key")
        elif self.value is None:
            raise ValueError(f"{self.op.value} requires a value")
        return self


class Patch(BaseModel):
    """An ordered batch of operations, consumed once by ``MapStore.bulk``."""

    model_config = ConfigDict(frozen=True)

    operations: tuple[PatchOperation, ...] = ()

    @property
    def count(self) -> int:
        """Number of operations described, including no-ops."""
        return len(self.operations)

    def __len__(self) -> int:
        return self.count

    def _with(self, operation: PatchOperation) -> Patch:
        return self.model_copy(update={"operations": (*self.operations, operation)})

    def add(self, value: Any, key: Key | None = None) -> Patch:
        return self._with(PatchOperation(op=OperationKind.ADD, key=key, value=value))

    def update(self, value: Any, key: Key | None = None) -> Patch:
        return self._with(PatchOperation(op=OperationKind.UPDATE, key=key, value=value))

    def remove(self, key: Key) -> Patch:
        return self._with(PatchOperation(op=OperationKind.REMOVE, key=key))


@dataclasses.dataclass(frozen=True)
class PatchContext:
    """Everything an engine needs besides the collection and the operations.

    Parameters
    ----------
    value_hook : callable
        Maps a collection entry ``(key, value)`` to the stored value.
    element_type : type or None
        Expected class of stored values. ``None`` or ``object`` disables the
        check; any other non-class descriptor is treated as a plain tag.
    sorted : bool
        The store's claim that the collection iterates in comparator order.
        It is trusted, never verified: a false ``True`` yields an
        unspecified order (the contents stay correct), a false ``False``
        only costs a full sort.
    key : callable
        The store's key extractor.
    comparator : callable
        The store's three-way comparator over values.
    """

    value_hook: Callable[[tuple[Key, Any]], Any]
    element_type: Any
    sorted: bool
    key: KeyExtractor
    comparator: Comparator
