"""Store configuration for pymapstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pymapstore.exceptions import MapStoreConfigError


_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _flag(raw: str | None, *, fallback: bool) -> bool:
    """Parse an on/off environment value, keeping ``fallback`` for anything else."""
    token = (raw or "").strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    return fallback


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Store configuration.

    Parameters
    ----------
    key_field : str
        Name of the field the default key extractor reads. Mapping values
        are read by item, any other value by attribute.
    trace_enabled : bool
        Dump a summary of the whole collection at DEBUG level before and
        after every bulk patch.
    trace_max_items : int
        Maximum number of collection entries included in a trace dump.
    """

    key_field: str = "uid"
    trace_enabled: bool = False
    trace_max_items: int = 20

    def __post_init__(self) -> None:
        if not self.key_field:
            raise MapStoreConfigError("key_field must be non-empty")
        if self.trace_max_items < 0:
            raise MapStoreConfigError("trace_max_items must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads ``MAPSTORE_KEY_FIELD``, ``MAPSTORE_TRACE_ENABLED`` and
        ``MAPSTORE_TRACE_MAX_ITEMS``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StoreConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        key_field = env.get("MAPSTORE_KEY_FIELD")
        if key_field is not None:
            config_kwargs["key_field"] = key_field.strip()

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _flag(env.get("MAPSTORE_TRACE_ENABLED"), fallback=False)

        max_items_env = env.get("MAPSTORE_TRACE_MAX_ITEMS")
        if max_items_env is not None and "trace_max_items" not in overrides:
            try:
                config_kwargs["trace_max_items"] = int(max_items_env)
            except ValueError as exc:
                raise MapStoreConfigError(f"MAPSTORE_TRACE_MAX_ITEMS is not an integer: {max_items_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
