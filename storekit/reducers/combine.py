from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from storekit.entries import Entry, is_entry_included
from storekit.namespaces import DEFAULT_FEATURE, is_action_from_namespace
from storekit.store import Reducer, identity_reducer

# Schema key holding the reducers registered at a node itself (as opposed to its children).
_ROOT = object()


def compose_reducers(*reducers: Reducer) -> Reducer:
    """Right-to-left: the last reducer sees the action first."""

    if not reducers:
        return identity_reducer

    def composed(state: Any, action: Any) -> Any:
        for reducer in reversed(reducers):
            state = reducer(state, action)
        return state

    return composed


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    final_reducers = {key: reducer for key, reducer in reducers.items() if callable(reducer)}

    def combination(state: Any, action: Any) -> Any:
        if state is None:
            state = {}
        if not isinstance(state, Mapping):
            raise TypeError(
                f"combine_reducers() expects mapping state (type={type(state).__name__})"
            )

        has_changed = False
        next_state = dict(state)
        for key, reducer in final_reducers.items():
            previous_state_for_key = state.get(key)
            next_state_for_key = reducer(previous_state_for_key, action)
            next_state[key] = next_state_for_key
            has_changed = has_changed or next_state_for_key is not previous_state_for_key

        has_changed = has_changed or len(next_state) != len(state)
        return next_state if has_changed else state

    return combination


def filter_reducer(reducer: Reducer, namespace: str | None) -> Reducer:
    if not namespace:
        return reducer

    def filtered(state: Any, action: Any) -> Any:
        if is_action_from_namespace(namespace, action):
            return reducer(state, action)
        return state

    return filtered


def reducer_state_path(entry: Entry) -> tuple[str, ...]:
    if entry.namespace:
        return (entry.feature or DEFAULT_FEATURE, entry.namespace, *entry.path)
    return entry.path


def combine_reducer_schema(schema: Mapping[Any, Any]) -> Reducer:
    root_reducers = schema.get(_ROOT, [])
    children = {key: value for key, value in schema.items() if key is not _ROOT}

    if not children:
        return compose_reducers(*root_reducers)

    return compose_reducers(
        *root_reducers,
        combine_reducers({key: combine_reducer_schema(child) for key, child in children.items()}),
    )


def combine_reducer_entries(entries: Iterable[Entry]) -> Reducer:
    unique: list[Entry] = []
    for entry in entries:
        if not is_entry_included(unique, entry):
            unique.append(entry)

    schema: dict[Any, Any] = {}
    for entry in unique:
        node = schema
        for part in reducer_state_path(entry):
            node = node.setdefault(part, {})
        node.setdefault(_ROOT, []).append(filter_reducer(entry.value, entry.namespace))

    return combine_reducer_schema(schema)
