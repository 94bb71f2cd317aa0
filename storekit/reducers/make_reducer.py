from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable

from storekit.actions import is_error_action
from storekit.store import Reducer

Condition = str | Sequence[str] | Callable[[Any], bool]


def _type_predicate(condition: Condition) -> Callable[[Any], bool]:
    if isinstance(condition, str):
        return lambda action: isinstance(action, Mapping) and action.get("type") == condition
    if isinstance(condition, (list, tuple, set, frozenset)):
        types = frozenset(condition)
        return lambda action: isinstance(action, Mapping) and action.get("type") in types
    if callable(condition):
        return condition
    raise TypeError(
        f"make_reducer condition must be a type, a list of types or a predicate "
        f"(type={type(condition).__name__})"
    )


def make_reducer(
    tuples: Sequence[tuple[Any, ...]],
    initial_state: Any = None,
) -> Reducer:
    """Create a reducer from `(condition, reducer[, error_reducer])` tuples.

    The first matching tuple handles the action; error actions go to its
    `error_reducer` when one is given. Unmatched actions leave the state as is.

        reducer = make_reducer([
            ("ADD", lambda state, action: state + action["payload"]),
            ("RESET", lambda state, action: 0),
        ], 0)
    """

    cases: list[tuple[Callable[[Any], bool], Reducer, Reducer | None]] = []
    for idx, item in enumerate(tuples):
        if not isinstance(item, tuple) or len(item) not in (2, 3):
            raise ValueError(f"make_reducer tuples[{idx}] must be (condition, reducer[, error_reducer])")
        condition, handler = item[0], item[1]
        error_handler = item[2] if len(item) == 3 else None
        if not callable(handler):
            raise TypeError(f"make_reducer tuples[{idx}] reducer must be callable")
        cases.append((_type_predicate(condition), handler, error_handler))

    def reducer(state: Any, action: Any) -> Any:
        if state is None:
            state = initial_state
        for predicate, handler, error_handler in cases:
            if not predicate(action):
                continue
            if error_handler is not None and is_error_action(action):
                return error_handler(state, action)
            return handler(state, action)
        return state

    return reducer
