"""Thunk middleware aware of namespaces.

A callable action receives a `ThunkAPI` whose `dispatch` tags every action with
the thunk's namespace (unless the action already carries one).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from storekit.namespaces import (
    DEFAULT_FEATURE,
    attach_namespace,
    get_namespace_by_action,
    get_state_by_feature_and_namespace,
)
from storekit.store import Dispatch, Middleware, MiddlewareAPI


@dataclass(frozen=True)
class ThunkAPI:
    dispatch: Dispatch
    get_state: Callable[[], Any]
    namespace: str | None
    dependencies: dict[str, Any] = field(default_factory=dict)

    def get_namespaced_state(self, feature: str = DEFAULT_FEATURE) -> Any:
        return get_state_by_feature_and_namespace(feature, self.namespace, self.get_state())


def make_thunk_middleware(dependencies: dict[str, Any] | None = None) -> Middleware:
    resolved_dependencies = dict(dependencies or {})

    def thunk_middleware(api: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def handle(action: Any) -> Any:
                if not callable(action):
                    return next_dispatch(action)

                namespace = get_namespace_by_action(action)
                return action(
                    ThunkAPI(
                        dispatch=lambda inner: api.dispatch(attach_namespace(namespace, inner)),
                        get_state=api.get_state,
                        namespace=namespace,
                        dependencies=resolved_dependencies,
                    )
                )

            return handle

        return wrap

    return thunk_middleware


thunk_middleware = make_thunk_middleware()
