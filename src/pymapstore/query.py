"""Query contract consumed by ``findAll``/``removeAll``.

A query is a predicate factory: binding it to a parameter mapping yields a
single-argument test applied to every stored value during a scan. Any object
with a matching ``bind`` method can be used; :class:`Where` is a minimal
implementation for tests and simple callers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

Predicate = Callable[[Any], bool]


class Query(Protocol):
    def bind(self, parameters: Mapping[str, Any]) -> Predicate: ...


class Where:
    """Query built from a plain function of ``(value, parameters)``."""

    def __init__(self, test: Callable[[Any, Mapping[str, Any]], bool]) -> None:
        self._test = test

    def bind(self, parameters: Mapping[str, Any]) -> Predicate:
        bound = dict(parameters)
        return lambda value: bool(self._test(value, bound))

    @classmethod
    def equals(cls, field: str) -> Where:
        """Match values whose ``field`` equals ``parameters[field]``."""

        def test(value: Any, parameters: Mapping[str, Any]) -> bool:
            if isinstance(value, Mapping):
                actual = value.get(field)
            else:
                actual = getattr(value, field, None)
            return actual == parameters[field]

        return cls(test)
