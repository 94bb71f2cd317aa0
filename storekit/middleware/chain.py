"""Compile the injected middleware registry into a single interceptor.

The compiled interceptor is cached per registry generation. Every inject or
eject bumps the generation, so the next dispatch recompiles against the new
registry while a dispatch already in flight keeps the chain it started with.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from storekit.entries import Entry
from storekit.namespaces import (
    attach_feature,
    attach_namespace,
    get_state_by_feature_and_namespace,
    is_action_from_namespace,
)
from storekit.store import Dispatch, Middleware, MiddlewareAPI, compose
from storekit.store_interface import StoreInterface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InjectedMiddlewareAPI:
    """Capabilities handed to an injected middleware factory for one action."""

    get_state: Callable[[], Any]
    dispatch: Dispatch
    action: Any
    namespace: str | None
    feature: str | None
    version: int | None
    path: tuple[str, ...]

    def get_namespaced_state(self, feature: str | None = None) -> Any:
        return get_state_by_feature_and_namespace(
            feature or self.feature, self.namespace, self.get_state()
        )


def compose_middleware(*middleware: Middleware) -> Middleware:
    def composed(api: Any) -> Callable[[Dispatch], Dispatch]:
        return compose(*(item(api) for item in middleware))

    return composed


class MiddlewareChain:
    def __init__(self, store_interface: StoreInterface) -> None:
        self.store_interface = store_interface
        self.generation = 0
        self._store: Any = None
        self._cache: tuple[int, Dispatch, Dispatch] | None = None

    def bind(self, store: Any) -> None:
        self._store = store

    def invalidate(self, event: Any = None) -> None:
        self.generation += 1

    def entries(self) -> tuple[Entry, ...]:
        if self._store is None:
            return ()
        return self.store_interface.get_entries(self._store)

    def _layer(self, entry: Entry, api: MiddlewareAPI, downstream: Dispatch) -> Dispatch:
        def dispatch(action: Any) -> Any:
            return api.dispatch(attach_namespace(entry.namespace, action))

        def forward(action: Any) -> Any:
            return downstream(attach_namespace(entry.namespace, attach_feature(entry.feature, action)))

        def handle(action: Any) -> Any:
            if not is_action_from_namespace(entry.namespace, action):
                return downstream(action)

            entry_api = InjectedMiddlewareAPI(
                get_state=api.get_state,
                dispatch=dispatch,
                action=action,
                namespace=entry.namespace,
                feature=entry.feature,
                version=entry.version,
                path=entry.path,
            )
            return entry.value(entry_api)(forward)(action)

        return handle

    def compile(self, api: MiddlewareAPI, next_dispatch: Dispatch) -> Dispatch:
        cached = self._cache
        if cached is not None and cached[0] == self.generation and cached[1] is next_dispatch:
            return cached[2]

        entries = self.entries()
        handler = next_dispatch
        for entry in reversed(entries):
            handler = self._layer(entry, api, handler)

        logger.debug(
            "Compiled middleware chain (generation=%d, entries=%d)", self.generation, len(entries)
        )
        self._cache = (self.generation, next_dispatch, handler)
        return handler

    def middleware(self, api: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def handle(action: Any) -> Any:
                return self.compile(api, next_dispatch)(action)

            return handle

        return wrap
