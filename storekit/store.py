"""Minimal state container: reduce/dispatch loop, middleware installation, composition.

Enhancers follow the `enhancer(create_store) -> create_store` convention, and
middleware the `middleware(api)(next)(action)` convention, so the injector
enhancers in this package can be stacked with `compose`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, TypeAlias

from storekit.actions import ActionTypes

Reducer: TypeAlias = Callable[[Any, Any], Any]
Dispatch: TypeAlias = Callable[[Any], Any]
Middleware: TypeAlias = Callable[["MiddlewareAPI"], Callable[[Dispatch], Dispatch]]
StoreCreator: TypeAlias = Callable[..., "Store"]
StoreEnhancer: TypeAlias = Callable[[StoreCreator], StoreCreator]

logger = logging.getLogger(__name__)


def identity_reducer(state: Any, action: Any) -> Any:
    return state


def compose(*funcs: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Right-to-left composition: compose(f, g)(x) == f(g(x))."""

    if not funcs:
        return lambda arg: arg
    if len(funcs) == 1:
        return funcs[0]

    def composed(arg: Any) -> Any:
        for func in reversed(funcs):
            arg = func(arg)
        return arg

    return composed


@dataclass(frozen=True)
class MiddlewareAPI:
    get_state: Callable[[], Any]
    dispatch: Dispatch


class Store:
    def __init__(self, reducer: Reducer, preloaded_state: Any = None) -> None:
        if not callable(reducer):
            raise TypeError(f"reducer must be callable (type={type(reducer).__name__})")
        self._reducer = reducer
        self._state = preloaded_state
        self._listeners: list[Callable[[], None]] = []
        self._is_dispatching = False
        self.entries: dict[str, tuple[Any, ...]] = {}
        self.injectors: dict[str, Any] = {}

    def get_state(self) -> Any:
        if self._is_dispatching:
            raise RuntimeError("get_state() may not be called while the reducer is executing")
        return self._state

    def dispatch(self, action: Any) -> Any:
        if not isinstance(action, Mapping):
            raise TypeError(
                "Actions must be mappings; use a thunk middleware for callables "
                f"(type={type(action).__name__})"
            )
        if not isinstance(action.get("type"), str):
            raise TypeError(f"Action type must be a string (got {action.get('type')!r})")
        if self._is_dispatching:
            raise RuntimeError("Reducers may not dispatch actions")

        try:
            self._is_dispatching = True
            self._state = self._reducer(self._state, action)
        finally:
            self._is_dispatching = False

        for listener in list(self._listeners):
            listener()
        return action

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError(f"listener must be callable (type={type(listener).__name__})")
        self._listeners.append(listener)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            subscribed = False
            self._listeners.remove(listener)

        return unsubscribe

    def replace_reducer(self, reducer: Reducer) -> None:
        if not callable(reducer):
            raise TypeError(f"reducer must be callable (type={type(reducer).__name__})")
        self._reducer = reducer
        # Bypass installed middleware, like the initial INIT dispatch.
        Store.dispatch(self, {"type": ActionTypes["REPLACE"]})


def create_store(
    reducer: Reducer | None = None,
    preloaded_state: Any = None,
    enhancer: StoreEnhancer | None = None,
) -> Store:
    if enhancer is not None:
        if not callable(enhancer):
            raise TypeError(f"enhancer must be callable (type={type(enhancer).__name__})")
        return enhancer(create_store)(reducer, preloaded_state)

    store = Store(reducer or identity_reducer, preloaded_state)
    store.dispatch({"type": ActionTypes["INIT"]})
    return store


def apply_middleware(*middleware: Middleware) -> StoreEnhancer:
    """Install middleware around `store.dispatch`; the first one is outermost."""

    def enhancer(next_create_store: StoreCreator) -> StoreCreator:
        def create(reducer: Reducer | None = None, preloaded_state: Any = None) -> Store:
            store = next_create_store(reducer, preloaded_state)

            def dispatch_during_construction(action: Any) -> Any:
                raise RuntimeError("Dispatching while constructing middleware is not allowed")

            current_dispatch: Dispatch = dispatch_during_construction
            api = MiddlewareAPI(
                get_state=store.get_state,
                dispatch=lambda action: current_dispatch(action),
            )
            chain = [item(api) for item in middleware]
            current_dispatch = compose(*chain)(store.dispatch)
            store.dispatch = lambda action: current_dispatch(action)  # type: ignore[method-assign]
            return store

        return create

    return enhancer
