from __future__ import annotations

import logging
from typing import Any

from storekit import actions
from storekit.enhance import InjectionEvent, enhance_store
from storekit.entries import Entry, is_entry_included
from storekit.reducers.cleanup import cleanup_reducer
from storekit.reducers.combine import combine_reducer_entries, compose_reducers
from storekit.store import Reducer, Store, StoreCreator, StoreEnhancer, identity_reducer
from storekit.store_interface import make_store_interface

store_interface = make_store_interface("reducers")

logger = logging.getLogger(__name__)


def _require_namespace_for_functions(entries: tuple[Entry, ...], props: dict[str, Any]) -> None:
    if props.get("namespace"):
        return
    if any(not entry.path for entry in entries):
        raise ValueError("You can only inject reducers as functions if you specify a namespace.")


def make_reducers_enhancer(
    *,
    initial_reducers: Any = None,
    cleanup_ejected_state: bool = True,
) -> StoreEnhancer:
    """Enhancer adding `store.inject_reducers` / `store.eject_reducers`.

    Keyed reducers land at `state[key]`; namespaced ones at
    `state[feature][namespace][key]`. The reducer passed to `create_store` stays
    the outermost reducer.
    """

    def enhancer(next_create_store: StoreCreator) -> StoreCreator:
        def create(reducer: Reducer | None = None, preloaded_state: Any = None) -> Store:
            root_reducer = reducer or identity_reducer
            store = next_create_store(root_reducer, preloaded_state)

            def handle_entries_changed(event: InjectionEvent) -> None:
                store.replace_reducer(
                    compose_reducers(
                        root_reducer,
                        combine_reducer_entries(store_interface.get_entries(store)),
                        cleanup_reducer,
                    )
                )

            def handle_ejected(event: InjectionEvent) -> None:
                handle_entries_changed(event)
                if not cleanup_ejected_state:
                    return

                remaining = store_interface.get_entries(store)
                fully_ejected = [
                    entry for entry in event.entries if not is_entry_included(remaining, entry)
                ]
                if not fully_ejected:
                    return

                if any(not entry.path for entry in fully_ejected):
                    paths = None
                else:
                    paths = [list(entry.path) for entry in fully_ejected]
                logger.debug("Cleaning up state for ejected reducers: %s", paths)
                store.dispatch(actions.clean_up_state(paths, event.props))

            enhance_store(
                store,
                store_interface,
                on_injected=handle_entries_changed,
                on_ejected=handle_ejected,
                validate=_require_namespace_for_functions,
            )

            if initial_reducers:
                store.inject_reducers(initial_reducers)
            return store

        return create

    return enhancer
