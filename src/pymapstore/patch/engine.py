"""Patch engines.

An engine applies a list of operations to a collection and returns the new
collection. The contract every engine honours:

- the input collection is never mutated; the caller swaps in the result,
- the result iterates in comparator order whenever the sorted hint is truthful,
- operations apply strictly in list order, each one seeing the effect of the
  previous ones,
- a malformed operation raises :class:`StructuralPatchError` before anything
  is returned, so a failed patch leaves the caller's state untouched.

``context.sorted`` is a trusted hint about the input. The engine never checks
it: when it is set, untouched entries keep their relative order and only the
touched ones are merged back in.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol

from pydantic import ValidationError

from pymapstore.exceptions import KeyExtractionError, StructuralPatchError
from pymapstore.keys import Key, sort_key
from pymapstore.patch.models import OperationKind, PatchContext, PatchOperation

_logger = logging.getLogger(__name__)


class PatchEngine(Protocol):
    def apply(
        self,
        collection: Mapping[Key, Any],
        operations: Sequence[PatchOperation | Mapping[str, Any]],
        context: PatchContext,
    ) -> Mapping[Key, Any]: ...


class MergePatchEngine:
    """Default engine: ordered application followed by a merge or a sort."""

    def apply(
        self,
        collection: Mapping[Key, Any],
        operations: Sequence[PatchOperation | Mapping[str, Any]],
        context: PatchContext,
    ) -> dict[Key, Any]:
        working: dict[Key, Any] = {entry[0]: context.value_hook(entry) for entry in collection.items()}
        # Keys whose position must be recomputed: added, or updated to a value
        # that no longer compares equal to the one it replaced.
        touched: set[Key] = set()

        for index, raw in enumerate(operations):
            operation = _coerce(index, raw)
            if operation.op == OperationKind.REMOVE:
                self._remove(index, operation, working, touched)
            else:
                self._upsert(index, operation, working, touched, context)

        order = sort_key(context.comparator)
        try:
            if context.sorted:
                _logger.debug("Merging %d touched entries into %d sorted entries", len(touched), len(working) - len(touched))
                entries = list(_merge(working, touched, order))
            else:
                _logger.debug("Sorting %d entries of unsorted collection", len(working))
                entries = sorted(working.items(), key=lambda entry: order(entry[1]))
        except TypeError as exc:
            # Keys or values that cannot be compared with the rest of the collection.
            raise StructuralPatchError(f"patched values cannot be ordered: {exc}") from exc
        return dict(entries)

    @staticmethod
    def _remove(index: int, operation: PatchOperation, working: dict[Key, Any], touched: set[Key]) -> None:
        if operation.key not in working:
            raise StructuralPatchError(f"cannot remove missing key {operation.key!r}", index=index, operation=operation)
        del working[operation.key]
        touched.discard(operation.key)

    @staticmethod
    def _upsert(
        index: int,
        operation: PatchOperation,
        working: dict[Key, Any],
        touched: set[Key],
        context: PatchContext,
    ) -> None:
        value = operation.value
        element_type = context.element_type
        if isinstance(element_type, type) and element_type is not object and not isinstance(value, element_type):
            raise StructuralPatchError(
                f"expected {element_type.__name__}, got {type(value).__name__}",
                index=index,
                operation=operation,
            )

        try:
            key = context.key(value)
            hash(key)
        except (KeyExtractionError, KeyError, IndexError, AttributeError, TypeError) as exc:
            raise StructuralPatchError(
                f"cannot extract key from {type(value).__name__} value: {exc}",
                index=index,
                operation=operation,
            ) from exc
        if operation.key is not None and operation.key != key:
            raise StructuralPatchError(
                f"key {operation.key!r} does not match value key {key!r}",
                index=index,
                operation=operation,
            )

        if operation.op == OperationKind.ADD:
            if key in working:
                raise StructuralPatchError(f"cannot add existing key {key!r}", index=index, operation=operation)
            working[key] = value
            touched.add(key)
            return

        if key not in working:
            raise StructuralPatchError(f"cannot update missing key {key!r}", index=index, operation=operation)
        previous = working[key]
        working[key] = value
        try:
            moved = context.comparator(previous, value) != 0
        except TypeError as exc:
            raise StructuralPatchError(f"cannot order value for key {key!r}: {exc}", index=index, operation=operation) from exc
        if key not in touched and moved:
            touched.add(key)


def _coerce(index: int, raw: PatchOperation | Mapping[str, Any]) -> PatchOperation:
    if isinstance(raw, PatchOperation):
        return raw
    if not isinstance(raw, Mapping):
        raise StructuralPatchError(f"unsupported operation type {type(raw).__name__}", index=index, operation=raw)
    try:
        return PatchOperation.model_validate(raw)
    except ValidationError as exc:
        raise StructuralPatchError(f"malformed operation: {exc.errors()[0]['msg']}", index=index, operation=raw) from exc


def _merge(working: dict[Key, Any], touched: set[Key], order: Callable[[Any], Any]) -> Iterable[tuple[Key, Any]]:
    base = [(key, value) for key, value in working.items() if key not in touched]
    pending = sorted(((key, working[key]) for key in touched), key=lambda entry: order(entry[1]))
    return heapq.merge(base, pending, key=lambda entry: order(entry[1]))
