"""Injectable side-effect processes (epics) built on reactivex."""

from storekit.epics.engine import EpicContext, EpicEngine
from storekit.epics.enhancer import make_epics_enhancer, store_interface
from storekit.epics.middleware import EpicMiddleware
from storekit.epics.stream_creators import (
    StreamCreatorRef,
    StreamCreatorRegistry,
    default_registry,
    global_action,
    namespaced_state,
    normalize_stream_creators,
)

__all__ = [
    "EpicContext",
    "EpicEngine",
    "EpicMiddleware",
    "StreamCreatorRef",
    "StreamCreatorRegistry",
    "default_registry",
    "global_action",
    "make_epics_enhancer",
    "namespaced_state",
    "normalize_stream_creators",
    "store_interface",
]
