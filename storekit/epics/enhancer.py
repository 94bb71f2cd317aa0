from __future__ import annotations

from typing import Any, Iterable, Mapping

from storekit.enhance import enhance_store
from storekit.epics.engine import EpicEngine
from storekit.epics.middleware import EpicMiddleware
from storekit.epics.stream_creators import StreamCreator, normalize_stream_creators
from storekit.store import Reducer, Store, StoreCreator, StoreEnhancer, apply_middleware
from storekit.store_interface import make_store_interface

store_interface = make_store_interface("epics")


def make_epics_enhancer(
    *,
    dependencies: Any = None,
    stream_creators: Mapping[str, StreamCreator] | Iterable[str] | None = None,
) -> StoreEnhancer:
    """Enhancer adding `store.inject_epics` / `store.eject_epics`.

    `dependencies` is passed to every epic as its last argument. When
    `stream_creators` are given, epics are called as
    `epic(action_, state_, streams, dependencies)` where `streams` maps each
    creator name to the stream it built for that epic.
    """

    creators = normalize_stream_creators(stream_creators)

    def enhancer(next_create_store: StoreCreator) -> StoreCreator:
        def create(reducer: Reducer | None = None, preloaded_state: Any = None) -> Store:
            epic_middleware = EpicMiddleware(dependencies)
            store = apply_middleware(epic_middleware)(next_create_store)(reducer, preloaded_state)

            engine = EpicEngine(store_interface, stream_creators=creators)
            enhance_store(
                store,
                store_interface,
                on_injected=engine.handle_injected,
                on_ejected=engine.handle_ejected,
            )
            engine.bind(store)
            store.epic_engine = engine  # type: ignore[attr-defined]

            epic_middleware.run(engine.root_epic, dispatch=lambda action: store.dispatch(action))
            return store

        return create

    return enhancer
