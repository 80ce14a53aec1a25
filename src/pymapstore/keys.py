"""Key extraction and ordering.

A store is configured with two pure functions: a *key extractor* mapping a
stored value to its unique key, and a *comparator* imposing a total order on
stored values. The comparator is only consulted by the patch engine, to keep
bulk patch results sorted.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any

from pymapstore.exceptions import KeyExtractionError

Key = str | int | float
KeyExtractor = Callable[[Any], Key]
Comparator = Callable[[Any, Any], int]

DEFAULT_KEY_FIELD = "uid"


def field_key(name: str = DEFAULT_KEY_FIELD) -> KeyExtractor:
    """Return an extractor reading ``name`` from a value.

    Mappings are read by item, everything else by attribute.
    """

    def extract(value: Any) -> Key:
        try:
            if isinstance(value, Mapping):
                return value[name]
            return getattr(value, name)
        except (KeyError, AttributeError) as exc:
            raise KeyExtractionError(
                f"{type(value).__name__} value has no key field {name!r}",
                field=name,
            ) from exc

    extract.__name__ = f"field_key_{name}"
    return extract


def default_comparator(key: KeyExtractor, a: Any, b: Any) -> int:
    """Compare two values by their extracted keys.

    Returns -1, 1 or 0 depending on whether a < b, b < a, or a == b.
    """
    key_a = key(a)
    key_b = key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def comparator_for(key: KeyExtractor) -> Comparator:
    return functools.partial(default_comparator, key)


def sort_key(comparator: Comparator) -> Callable[[Any], Any]:
    """Adapt a three-way comparator for ``sorted``/``heapq.merge``."""
    return functools.cmp_to_key(comparator)
