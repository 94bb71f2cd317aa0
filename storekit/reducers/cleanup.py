from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from storekit.actions import ActionTypes, is_action_of_type
from storekit.namespaces import DEFAULT_FEATURE, get_feature_by_action, get_namespace_by_action


def dissoc_path(state: Any, path: Sequence[str]) -> Any:
    """Return `state` without the value at `path`; unchanged when the path is absent."""

    if not path or not isinstance(state, Mapping):
        return state
    head, rest = path[0], path[1:]
    if head not in state:
        return state
    if not rest:
        return {key: value for key, value in state.items() if key != head}

    child = dissoc_path(state[head], rest)
    if child is state[head]:
        return state
    return {**state, head: child}


def _is_empty_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and not value


def cleanup_reducer(state: Any, action: Any) -> Any:
    """Drop state left behind by fully ejected reducers.

    The payload lists the ejected reducer paths; `None` means a bare namespaced
    reducer was ejected and the whole namespace slice goes. Emptied namespace and
    feature slices are removed as well.
    """

    if not is_action_of_type(action, ActionTypes["CLEAN_UP_STATE"]):
        return state
    if not isinstance(state, Mapping):
        return state

    namespace = get_namespace_by_action(action)
    feature = get_feature_by_action(action) or DEFAULT_FEATURE
    slice_root: tuple[str, ...] = (feature, namespace) if namespace else ()
    payload = action.get("payload")

    next_state = state
    if isinstance(payload, (list, tuple)):
        for reducer_path in payload:
            next_state = dissoc_path(next_state, slice_root + tuple(reducer_path))

    if namespace:
        feature_state = next_state.get(feature)
        if isinstance(feature_state, Mapping) and namespace in feature_state:
            if payload is None or _is_empty_mapping(feature_state[namespace]):
                next_state = dissoc_path(next_state, (feature, namespace))
        if _is_empty_mapping(next_state.get(feature)):
            next_state = dissoc_path(next_state, (feature,))

    return next_state
