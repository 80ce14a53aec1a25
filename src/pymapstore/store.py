"""In-memory document store.

Essentially a dict with the calling convention of the networked document
stores it stands in for during tests: every lookup and mutation is a
coroutine, scans are async iterators. Nothing here performs I/O, so none of
the coroutines ever suspend.

This store is the only component allowed to mutate its collection. Bulk
patches are delegated to a :class:`pymapstore.patch.PatchEngine` and swapped
in wholesale once the engine returns.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from pymapstore._trace import summarize_for_log
from pymapstore.config import StoreConfig
from pymapstore.exceptions import NotFound
from pymapstore.keys import Comparator, Key, KeyExtractor, comparator_for, field_key
from pymapstore.patch.engine import MergePatchEngine, PatchEngine
from pymapstore.patch.models import Patch, PatchContext, PatchOperation
from pymapstore.query import Predicate, Query

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def _entry_value(entry: tuple[Key, Any]) -> Any:
    return entry[1]


async def _stream(values: Iterable[T]) -> AsyncIterator[T]:
    for value in values:
        yield value


async def _filtered(source: AsyncIterator[T], predicate: Predicate) -> AsyncIterator[T]:
    async for value in source:
        if predicate(value):
            yield value


class MapStore(Generic[T]):
    """Key-indexed in-memory store.

    Only ``element_type`` is mandatory. By default the key is read from a
    ``uid`` field (see :attr:`StoreConfig.key_field`) and values are ordered
    by comparing their keys, so keys must be mutually comparable.

    The store tracks whether its iteration order is currently sorted under
    the comparator. The flag is bookkeeping, not a guarantee checked on every
    write: inserting a new key through :meth:`update` clears it, and a
    successful :meth:`bulk` sets it since engines always return sorted
    collections.

    A single lock guards the collection and the flag, so a store may be
    shared between threads; within one event loop it is never contended.
    """

    def __init__(
        self,
        element_type: Any,
        key: KeyExtractor | None = None,
        comparator: Comparator | None = None,
        *,
        engine: PatchEngine | None = None,
        config: StoreConfig | None = None,
    ) -> None:
        self._config = config if config is not None else StoreConfig()
        self._element_type = element_type
        self._key = key if key is not None else field_key(self._config.key_field)
        self._comparator = comparator if comparator is not None else comparator_for(self._key)
        self._engine: PatchEngine = engine if engine is not None else MergePatchEngine()
        self._lock = threading.Lock()
        self._values: dict[Key, T] = {}
        self._sorted = True

    @classmethod
    def from_config(
        cls,
        element_type: Any,
        config: StoreConfig,
        *,
        key: KeyExtractor | None = None,
        comparator: Comparator | None = None,
        engine: PatchEngine | None = None,
    ) -> MapStore[T]:
        return cls(element_type, key, comparator, engine=engine, config=config)

    @property
    def is_sorted(self) -> bool:
        """Whether iteration order is currently claimed to follow the comparator."""
        return self._sorted

    @property
    def element_type(self) -> Any:
        return self._element_type

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    async def find(self, key: Key) -> T:
        """Find a value by its unique key.

        Raises
        ------
        NotFound
            No value is stored under ``key``.
        """
        _logger.debug("find key=%r", key)
        with self._lock:
            value = self._values.get(key, _MISSING)
        if value is _MISSING:
            raise NotFound(key)
        return value  # type: ignore[return-value]

    def all(self) -> AsyncIterator[T]:
        """Iterate over every stored value.

        The values are snapshotted when this is called, in current iteration
        order. The returned iterator can only be consumed once.
        """
        _logger.debug("all")
        with self._lock:
            snapshot = list(self._values.values())
        return _stream(snapshot)

    def find_all(self, query: Query, parameters: Mapping[str, Any] | None = None) -> AsyncIterator[T]:
        """Iterate over the values matching ``query`` bound to ``parameters``."""
        _logger.debug("find_all query=%r parameters=%r", query, parameters)
        predicate = query.bind(parameters if parameters is not None else {})
        return _filtered(self.all(), predicate)

    async def update(self, value: T) -> bool:
        """Add or replace a value, keyed by its extracted key. Always returns True."""
        key = self._key(value)
        _logger.debug("update key=%r", key)
        with self._lock:
            if key not in self._values:
                self._sorted = False
            self._values[key] = value
        return True

    async def remove(self, key: Key) -> bool:
        """Remove the value stored under ``key``.

        Returns True if a value was removed, False if the key was absent.
        """
        with self._lock:
            removed = self._values.pop(key, _MISSING) is not _MISSING
        _logger.debug("remove key=%r removed=%s", key, removed)
        return removed

    async def remove_all(self, query: Query, parameters: Mapping[str, Any] | None = None) -> bool:
        """Remove every value matching ``query``.

        Returns True if at least one value was removed.
        """
        matched = [value async for value in self.find_all(query, parameters)]
        removed = 0
        with self._lock:
            for value in matched:
                if self._values.pop(self._key(value), _MISSING) is not _MISSING:
                    removed += 1
        _logger.debug("remove_all matched=%d removed=%d", len(matched), removed)
        return removed > 0

    async def bulk(self, patch: Patch | Sequence[PatchOperation | Mapping[str, Any]]) -> int:
        """Apply a batch of add/update/remove operations in one pass.

        The collection is replaced wholesale by the engine's result, and only
        once the engine has returned: if it raises, the error propagates
        unchanged and the store keeps its previous state.

        Returns the number of operations in the patch, whether or not each of
        them changed anything.
        """
        if isinstance(patch, Patch):
            operations: Sequence[PatchOperation | Mapping[str, Any]] = patch.operations
        else:
            operations = list(patch)
        count = len(operations)

        with self._lock:
            _logger.debug("bulk operations=%d sorted=%s", count, self._sorted)
            self._trace("before", self._values)
            context = PatchContext(
                value_hook=_entry_value,
                element_type=self._element_type,
                sorted=self._sorted,
                key=self._key,
                comparator=self._comparator,
            )
            result = self._engine.apply(MappingProxyType(self._values), operations, context)
            self._values = dict(result)
            self._sorted = True
            self._trace("after", self._values)

        return count

    def _trace(self, label: str, values: Mapping[Key, Any]) -> None:
        if not self._config.trace_enabled or not _logger.isEnabledFor(logging.DEBUG):
            return
        _logger.debug(
            "bulk %s (%d entries): %s",
            label,
            len(values),
            summarize_for_log(dict(values), max_items=self._config.trace_max_items),
        )
