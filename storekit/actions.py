"""Action creators and the action types storekit itself dispatches."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable

ACTION_PREFIX = "@@storekit"


def make_action_types(prefix: str, names: Iterable[str]) -> dict[str, str]:
    if not isinstance(prefix, str) or not prefix.strip():
        raise ValueError("prefix must be a non-empty string")
    types: dict[str, str] = {}
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("action type names must be non-empty strings")
        types[name.strip()] = f"{prefix.strip()}/{name.strip()}"
    return types


ActionTypes = make_action_types(ACTION_PREFIX, ["STOP_EPICS", "CLEAN_UP_STATE", "INIT", "REPLACE"])


def injected_type(kind: str) -> str:
    return f"{ACTION_PREFIX}/{kind.upper()}_INJECTED"


def ejected_type(kind: str) -> str:
    return f"{ACTION_PREFIX}/{kind.upper()}_EJECTED"


def make_action_creator(
    action_type: str,
    get_payload: Callable[..., Any] | None = None,
    get_meta: Callable[..., Any] | None = None,
) -> Callable[..., dict[str, Any]]:
    """Create an action creator with the supplied payload and meta getters.

    Keys resolving to None are omitted. An `Exception` payload marks the
    action with `error: True`.
    """

    if not isinstance(action_type, str) or not action_type.strip():
        raise ValueError("Action type must be a non-empty string")

    def create(*args: Any) -> dict[str, Any]:
        action: dict[str, Any] = {"type": action_type}
        payload = get_payload(*args) if get_payload is not None else None
        meta = get_meta(*args) if get_meta is not None else None
        if payload is not None:
            action["payload"] = payload
        if meta is not None:
            action["meta"] = meta
        if isinstance(payload, Exception):
            action["error"] = True
        return action

    create.__name__ = f"create_{action_type.rsplit('/', 1)[-1].lower()}"
    return create


def make_simple_action_creator(action_type: str) -> Callable[..., dict[str, Any]]:
    return make_action_creator(action_type, lambda payload=None, *_: payload)


def make_binary_action_creator(action_type: str) -> Callable[..., dict[str, Any]]:
    return make_action_creator(
        action_type,
        lambda payload=None, *_: payload,
        lambda _payload=None, meta=None, *_: meta,
    )


def make_constant_action_creator(action_type: str) -> Callable[[], dict[str, Any]]:
    create = make_action_creator(action_type)

    def constant() -> dict[str, Any]:
        return create()

    constant.__name__ = create.__name__
    return constant


def is_error_action(action: Any) -> bool:
    return isinstance(action, Mapping) and action.get("error") is True


def is_not_error_action(action: Any) -> bool:
    return not is_error_action(action)


def is_action_of_type(action: Any, action_type: str) -> bool:
    return isinstance(action, Mapping) and action.get("type") == action_type


def _props_meta(props: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in props.items() if value is not None}


def injected(kind: str, paths: list[list[str]], props: Mapping[str, Any]) -> dict[str, Any]:
    return {"type": injected_type(kind), "payload": paths, "meta": _props_meta(props)}


def ejected(kind: str, paths: list[list[str]], props: Mapping[str, Any]) -> dict[str, Any]:
    return {"type": ejected_type(kind), "payload": paths, "meta": _props_meta(props)}


def stop_epics(ids: Iterable[Any], *, namespace: str | None = None) -> dict[str, Any]:
    """Ask the epic engine to tear down every live epic matching one of `ids`.

    An id is an entry key (`"foo"`, `"a.b"`) or the epic callable itself.
    """

    action: dict[str, Any] = {"type": ActionTypes["STOP_EPICS"], "payload": list(ids)}
    if namespace:
        action["meta"] = {"namespace": namespace}
    return action


def clean_up_state(
    paths: list[list[str]] | None, props: Mapping[str, Any]
) -> dict[str, Any]:
    return {
        "type": ActionTypes["CLEAN_UP_STATE"],
        "payload": paths,
        "meta": _props_meta(props),
    }
