from __future__ import annotations

from typing import Any

from storekit.enhance import enhance_store
from storekit.middleware.chain import MiddlewareChain
from storekit.store import Reducer, Store, StoreCreator, StoreEnhancer, apply_middleware
from storekit.store_interface import make_store_interface

store_interface = make_store_interface("middleware")


def make_middleware_enhancer() -> StoreEnhancer:
    """Enhancer adding `store.inject_middleware` / `store.eject_middleware`."""

    def enhancer(next_create_store: StoreCreator) -> StoreCreator:
        def create(reducer: Reducer | None = None, preloaded_state: Any = None) -> Store:
            chain = MiddlewareChain(store_interface)
            store = apply_middleware(chain.middleware)(next_create_store)(reducer, preloaded_state)
            chain.bind(store)
            store.middleware_chain = chain  # type: ignore[attr-defined]
            return enhance_store(
                store,
                store_interface,
                on_injected=chain.invalidate,
                on_ejected=chain.invalidate,
            )

        return create

    return enhancer
