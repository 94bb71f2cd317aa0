from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from storekit.entries import Entry


@dataclass(frozen=True)
class StoreInterface:
    """Where one kind of entry lives on a store and how its methods are named."""

    kind: str
    inject_method_name: str
    eject_method_name: str

    def __post_init__(self) -> None:
        for field_name in ("kind", "inject_method_name", "eject_method_name"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"StoreInterface.{field_name} must be a non-empty string")
            object.__setattr__(self, field_name, value.strip())

    def get_entries(self, store: Any) -> tuple[Entry, ...]:
        return tuple(store.entries.get(self.kind, ()))

    def set_entries(self, entries: tuple[Entry, ...] | list[Entry], store: Any) -> None:
        # Copy-on-write: the registry is replaced, never mutated in place.
        store.entries = {**store.entries, self.kind: tuple(entries)}


def make_store_interface(kind: str) -> StoreInterface:
    if not isinstance(kind, str) or not kind.strip():
        raise ValueError("The kind of the injectables must be a non-empty string")
    normalized = kind.strip()
    return StoreInterface(
        kind=normalized,
        inject_method_name=f"inject_{normalized}",
        eject_method_name=f"eject_{normalized}",
    )
