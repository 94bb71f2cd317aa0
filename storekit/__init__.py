"""Dynamic injection of reducers, middleware and epics into a long-lived store.

Each kind of injectable is added by its own enhancer built on `enhance_store`;
`create_extensible_store` stacks all of them. Only `storekit.epics` imports
`reactivex`; the core modules (entries, namespaces, store, enhance, middleware,
reducers) never import it themselves. Importing the `storekit` package still
loads it, since `create_extensible_store` installs the epics enhancer.
"""

from storekit.actions import ActionTypes, stop_epics
from storekit.bootstrap import create_extensible_store
from storekit.config import StoreConfig, load_store_config
from storekit.config_namespace import ConfigNamespace
from storekit.enhance import InjectionEvent, Injector, enhance_store
from storekit.entries import Entry, create_entries
from storekit.namespaces import (
    DEFAULT_FEATURE,
    attach_namespace,
    force_namespace,
    get_namespace_by_action,
    get_state_by_feature_and_namespace,
    get_state_by_namespace,
    is_action_from_namespace,
    prevent_namespace,
)
from storekit.store import Store, apply_middleware, compose, create_store
from storekit.store_interface import StoreInterface, make_store_interface

__all__ = [
    "ActionTypes",
    "ConfigNamespace",
    "DEFAULT_FEATURE",
    "Entry",
    "InjectionEvent",
    "Injector",
    "Store",
    "StoreConfig",
    "StoreInterface",
    "apply_middleware",
    "attach_namespace",
    "compose",
    "create_entries",
    "create_extensible_store",
    "create_store",
    "enhance_store",
    "force_namespace",
    "get_namespace_by_action",
    "get_state_by_feature_and_namespace",
    "get_state_by_namespace",
    "is_action_from_namespace",
    "load_store_config",
    "make_store_interface",
    "prevent_namespace",
    "stop_epics",
]
