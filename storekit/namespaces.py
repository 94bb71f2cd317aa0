"""Predicates and selectors relating actions and state to a namespace tag.

An action without a namespace is global: every entry sees it. A namespaced
action is only seen by entries of the same namespace and by global entries.
Namespaced state lives under `state[feature][namespace]`; the default feature
is `DEFAULT_FEATURE`.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Any

DEFAULT_FEATURE = "namespaces"
NAMESPACE_PREVENTED = "@@storekit/NAMESPACE_PREVENTED"


def _meta_of(action: Any) -> Mapping[str, Any]:
    if isinstance(action, Mapping):
        meta = action.get("meta")
    else:
        meta = getattr(action, "meta", None)
    if isinstance(meta, Mapping):
        return meta
    return {}


def get_namespace_by_action(action: Any) -> str | None:
    return _meta_of(action).get("namespace") or None


def get_feature_by_action(action: Any) -> str | None:
    return _meta_of(action).get("feature") or None


def is_action_from_namespace(namespace: str | None, action: Any) -> bool:
    action_namespace = get_namespace_by_action(action)
    if not namespace or not action_namespace:
        return True
    return namespace == action_namespace


def _with_meta(action: Any, key: str, value: str, *, force: bool) -> Any:
    meta = _meta_of(action)
    if not force and meta.get(key):
        return action

    next_meta = {**meta, key: value}

    if isinstance(action, Mapping):
        return {**action, "meta": next_meta}

    if callable(action):

        @functools.wraps(action)
        def wrapped(*args: Any, **kwargs: Any) -> Any:
            return action(*args, **kwargs)

        wrapped.meta = next_meta  # type: ignore[attr-defined]
        return wrapped

    raise TypeError(f"Cannot attach {key} to action (type={type(action).__name__})")


def attach_namespace(namespace: str | None, action: Any) -> Any:
    """Associate an action with a namespace unless it already has one."""

    if not namespace:
        return action
    return _with_meta(action, "namespace", namespace, force=False)


def force_namespace(namespace: str | None, action: Any) -> Any:
    """Associate an action with a namespace, overwriting any previous one."""

    if not namespace:
        return action
    return _with_meta(action, "namespace", namespace, force=True)


def prevent_namespace(action: Any) -> Any:
    """Mark an action so that only global entries see it."""

    return _with_meta(action, "namespace", NAMESPACE_PREVENTED, force=True)


def attach_feature(feature: str | None, action: Any) -> Any:
    if not feature:
        return action
    return _with_meta(action, "feature", feature, force=False)


def has_namespace_state(feature: str | None, namespace: str | None, state: Any) -> bool:
    if not namespace:
        return True
    if not isinstance(state, Mapping):
        return False
    feature_state = state.get(feature or DEFAULT_FEATURE)
    return isinstance(feature_state, Mapping) and namespace in feature_state


def get_state_by_feature_and_namespace(
    feature: str | None, namespace: str | None, state: Any
) -> Any:
    """Return `state[feature][namespace]`, or the whole state for global callers.

    A missing slice for a concrete namespace is almost always a wiring bug (the
    reducers for that namespace were never injected), so it raises `KeyError`.
    """

    if not namespace:
        return state
    resolved_feature = feature or DEFAULT_FEATURE
    if not has_namespace_state(resolved_feature, namespace, state):
        raise KeyError(
            f"No state slice for namespace {namespace!r} under feature {resolved_feature!r}"
        )
    return state[resolved_feature][namespace]


def get_state_by_namespace(namespace: str | None, state: Any) -> Any:
    return get_state_by_feature_and_namespace(DEFAULT_FEATURE, namespace, state)


def get_state_by_action(action: Any, state: Any) -> Any:
    return get_state_by_feature_and_namespace(
        get_feature_by_action(action) or DEFAULT_FEATURE,
        get_namespace_by_action(action),
        state,
    )
