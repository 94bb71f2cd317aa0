"""Generic inject/eject methods for one kind of entry.

Every kind-specific enhancer (reducers, middleware, epics) is built on
`enhance_store`: it owns the registry bookkeeping and the notification actions,
while the caller reacts to `on_injected` / `on_ejected` to rebuild whatever it
derives from the registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from storekit import actions
from storekit.entries import Entry, create_entries, entry_paths, without_all, without_once
from storekit.store import Store
from storekit.store_interface import StoreInterface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InjectionEvent:
    injectables: Any
    props: dict[str, Any]
    entries: tuple[Entry, ...]


InjectionListener = Callable[[InjectionEvent], None]
InjectionValidator = Callable[[tuple[Entry, ...], dict[str, Any]], None]


def _noop(event: InjectionEvent) -> None:
    return None


def _props(namespace: str | None, feature: str | None, version: int | None) -> dict[str, Any]:
    if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
        raise TypeError(f"version must be an int or None (type={type(version).__name__})")
    return {"namespace": namespace or None, "feature": feature or None, "version": version}


class Injector:
    def __init__(
        self,
        store: Store,
        store_interface: StoreInterface,
        *,
        on_injected: InjectionListener | None = None,
        on_ejected: InjectionListener | None = None,
        validate: InjectionValidator | None = None,
    ) -> None:
        self.store = store
        self.store_interface = store_interface
        self._on_injected = on_injected or _noop
        self._on_ejected = on_ejected or _noop
        self._validate = validate

    @property
    def kind(self) -> str:
        return self.store_interface.kind

    def entries(self) -> tuple[Entry, ...]:
        return self.store_interface.get_entries(self.store)

    def inject(
        self,
        injectables: Any,
        *,
        namespace: str | None = None,
        feature: str | None = None,
        version: int | None = None,
    ) -> None:
        props = _props(namespace, feature, version)
        entries = tuple(create_entries(injectables, **props))
        if self._validate is not None:
            self._validate(entries, props)
        if not entries:
            logger.debug("inject_%s: no injectable entries in %r", self.kind, injectables)

        self.store_interface.set_entries(self.entries() + entries, self.store)
        logger.debug("inject_%s: %d entries (props=%s)", self.kind, len(entries), props)
        self._on_injected(InjectionEvent(injectables=injectables, props=props, entries=entries))

        self.store.dispatch(actions.injected(self.kind, entry_paths(entries), props))

    def eject(
        self,
        injectables: Any,
        *,
        namespace: str | None = None,
        feature: str | None = None,
        version: int | None = None,
    ) -> None:
        props = _props(namespace, feature, version)
        entries = tuple(create_entries(injectables, **props))
        self.eject_entries(entries, props, injectables=injectables)

    def eject_entries(
        self,
        entries: tuple[Entry, ...],
        props: dict[str, Any],
        *,
        injectables: Any = None,
        all_occurrences: bool = False,
    ) -> None:
        before = self.entries()
        if all_occurrences:
            remaining = without_all(entries, before)
        else:
            remaining = without_once(entries, before)
        self.store_interface.set_entries(remaining, self.store)
        logger.debug(
            "eject_%s: %d requested, %d removed (props=%s)",
            self.kind,
            len(entries),
            len(before) - len(remaining),
            props,
        )
        self._on_ejected(InjectionEvent(injectables=injectables, props=props, entries=entries))

        self.store.dispatch(actions.ejected(self.kind, entry_paths(entries), props))


def enhance_store(
    store: Store,
    store_interface: StoreInterface,
    *,
    on_injected: InjectionListener | None = None,
    on_ejected: InjectionListener | None = None,
    validate: InjectionValidator | None = None,
) -> Store:
    if store is None or not hasattr(store, "dispatch") or not hasattr(store, "entries"):
        raise TypeError("You must pass a store as the first argument to enhance_store()")
    if not isinstance(store_interface, StoreInterface):
        raise TypeError(
            "You must pass a StoreInterface as the second argument to enhance_store() "
            f"(type={type(store_interface).__name__})"
        )
    if store_interface.kind in store.injectors:
        raise ValueError(f"Store already has an injector for kind: {store_interface.kind}")

    injector = Injector(
        store,
        store_interface,
        on_injected=on_injected,
        on_ejected=on_ejected,
        validate=validate,
    )

    store_interface.set_entries((), store)
    store.injectors = {**store.injectors, store_interface.kind: injector}
    setattr(store, store_interface.inject_method_name, injector.inject)
    setattr(store, store_interface.eject_method_name, injector.eject)
    return store
