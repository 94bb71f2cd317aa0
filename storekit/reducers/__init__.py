"""Injectable, namespace-scoped reducers."""

from storekit.reducers.cleanup import cleanup_reducer, dissoc_path
from storekit.reducers.combine import (
    combine_reducer_entries,
    combine_reducers,
    compose_reducers,
    filter_reducer,
    reducer_state_path,
)
from storekit.reducers.enhancer import make_reducers_enhancer, store_interface
from storekit.reducers.make_reducer import make_reducer

__all__ = [
    "cleanup_reducer",
    "combine_reducer_entries",
    "combine_reducers",
    "compose_reducers",
    "dissoc_path",
    "filter_reducer",
    "make_reducer",
    "make_reducers_enhancer",
    "reducer_state_path",
    "store_interface",
]
