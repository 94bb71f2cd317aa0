"""Strict reader over one mapping of the `store:` config section.

Every key read is remembered so `assert_consumed` can reject typos, and every
value returned is remembered so the parsed section can be logged as it was
actually applied.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


@dataclass
class ConfigNamespace:
    data: Mapping[str, Any]
    path: str
    _seen: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)
    _effective: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def _key_path(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def _read(self, key: str, default: Any) -> Any:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        key = key.strip()
        self._seen.add(key)
        if key in self.data:
            return self.data[key]
        if default is _MISSING:
            raise ValueError(f"Missing required config key: {self._key_path(key)}")
        return default

    def _keep(self, key: str, value: Any) -> Any:
        self._effective[key.strip()] = value
        return value

    def assert_consumed(self) -> None:
        unknown = sorted(key for key in self.data if key not in self._seen)
        if unknown:
            raise ValueError(f"Unknown config keys under {self.path or '<root>'}: {', '.join(unknown)}")
        for child in self._children.values():
            child.assert_consumed()

    def effective_values(self) -> dict[str, Any]:
        out = dict(self._effective)
        for key, child in self._children.items():
            nested = child.effective_values()
            if nested:
                out[key] = nested
        return out

    def namespace(self, key: str, *, default: Mapping[str, Any] | None | object = _MISSING) -> "ConfigNamespace":
        """Return the nested section `key`; `default=None` yields an empty one."""

        if key in self._children:
            return self._children[key]
        raw = self._read(key, default)
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"{self._key_path(key)} must be a mapping (type={type(raw).__name__})")
        child = ConfigNamespace(dict(raw), path=self._key_path(key))
        self._children[key] = child
        return child

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        value = self._read(key, default)
        if not isinstance(value, bool):
            raise TypeError(f"{self._key_path(key)} must be a boolean (type={type(value).__name__})")
        return self._keep(key, value)

    def get_str(self, key: str, *, default: str | None | object = _MISSING) -> str | None:
        value = self._read(key, default)
        if value is None:
            return self._keep(key, None)
        if not isinstance(value, str):
            raise TypeError(f"{self._key_path(key)} must be a string (type={type(value).__name__})")
        value = value.strip()
        if not value:
            raise ValueError(f"{self._key_path(key)} cannot be empty")
        return self._keep(key, value)

    def get_list_str(
        self,
        key: str,
        *,
        default: list[str] | tuple[str, ...] | object = _MISSING,
        allow_empty: bool = False,
    ) -> list[str]:
        raw = self._read(key, default)
        if not isinstance(raw, (list, tuple)):
            raise TypeError(f"{self._key_path(key)} must be a list[str] (type={type(raw).__name__})")

        items: list[str] = []
        for idx, item in enumerate(raw):
            if not isinstance(item, str) or not item.strip():
                raise TypeError(f"{self._key_path(key)}[{idx}] must be a non-empty string (got {item!r})")
            items.append(item.strip())
        if not items and not allow_empty:
            raise ValueError(f"{self._key_path(key)} cannot be empty")
        return self._keep(key, items)
