"""Flat key/value configuration store.

The store is seeded from the process environment and can be merged with a
secret bundle fetched at startup. Keys are case-insensitive and normalized to
upper case, so ``db_user`` from a secret bundle overrides ``DB_USER`` from the
environment.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from bookstore.core.exceptions import ConfigError

_SCALAR_TYPES = (str, int, float, bool)


def _normalize_key(key: str) -> str:
    return key.strip().upper()


class ConfigStore(Mapping[str, str]):
    """Read-only view over merged configuration entries."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        normalized = {_normalize_key(k): v for k, v in (entries or {}).items()}
        self._entries = MappingProxyType(normalized)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> ConfigStore:
        """Snapshot the given environment (``os.environ`` by default)."""
        source = os.environ if environ is None else environ
        return cls(dict(source))

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._entries.get(_normalize_key(key), default)

    def merged(self, bundle: Any) -> ConfigStore:
        """Return a new store with ``bundle`` layered on top of this one.

        Raises:
            ConfigError: If the bundle is not a flat mapping of scalar values.
        """
        if not isinstance(bundle, Mapping):
            raise ConfigError(
                f"secret bundle must be a mapping, got {type(bundle).__name__}"
            )

        merged = dict(self._entries)
        for key, value in bundle.items():
            if not isinstance(key, str):
                raise ConfigError(f"secret bundle key {key!r} is not a string")
            if value is None:
                continue
            if not isinstance(value, _SCALAR_TYPES):
                raise ConfigError(
                    f"secret bundle value for {key!r} must be a scalar, "
                    f"got {type(value).__name__}"
                )
            if isinstance(value, bool):
                value = "true" if value else "false"
            merged[_normalize_key(key)] = str(value)

        return ConfigStore(merged)

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)

    def __getitem__(self, key: str) -> str:
        return self._entries[_normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _normalize_key(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        # Values may hold credentials
        return f"ConfigStore(keys={sorted(self._entries)})"
