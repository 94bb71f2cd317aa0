"""Create a store with injectable reducers, middleware and epics."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from storekit.config import StoreConfig
from storekit.epics.enhancer import make_epics_enhancer
from storekit.epics.stream_creators import StreamCreator
from storekit.logging_utils import configure_logging
from storekit.middleware.enhancer import make_middleware_enhancer
from storekit.reducers.enhancer import make_reducers_enhancer
from storekit.store import Middleware, Reducer, Store, apply_middleware, compose, create_store
from storekit.thunk import make_thunk_middleware

logger = logging.getLogger(__name__)


def create_extensible_store(
    reducer: Reducer | None = None,
    preloaded_state: Any = None,
    *,
    config: StoreConfig | Mapping[str, Any] | None = None,
    middleware: Sequence[Middleware] = (),
    dependencies: Mapping[str, Any] | None = None,
    stream_creators: Mapping[str, StreamCreator] | Iterable[str] | None = None,
) -> Store:
    """
    Build a store exposing `inject_reducers`, `inject_middleware`, `inject_epics`
    and their `eject_*` counterparts.

    Dispatch runs through the static `middleware` (the thunk middleware first when
    enabled), then injected middleware, then the epic middleware, then reducers.
    `stream_creators` overrides the names listed in the config.
    """

    if config is None or isinstance(config, Mapping):
        config = StoreConfig.from_dict(config)
    if not isinstance(config, StoreConfig):
        raise TypeError(f"config must be a StoreConfig or mapping (type={type(config).__name__})")

    if config.log_level is not None:
        configure_logging(config.log_level, config.log_file)

    resolved_dependencies = dict(dependencies or {})
    static_middleware = list(middleware)
    if config.thunk:
        static_middleware.insert(0, make_thunk_middleware(resolved_dependencies))

    creators = stream_creators if stream_creators is not None else config.stream_creators

    enhancer = compose(
        make_reducers_enhancer(cleanup_ejected_state=config.cleanup_ejected_state),
        apply_middleware(*static_middleware),
        make_middleware_enhancer(),
        make_epics_enhancer(dependencies=resolved_dependencies, stream_creators=creators),
    )
    store = create_store(reducer, preloaded_state, enhancer)
    logger.debug(
        "Extensible store created (thunk=%s, static_middleware=%d, stream_creators=%s)",
        config.thunk,
        len(middleware),
        list(store.epic_engine.stream_creators),
    )
    return store
