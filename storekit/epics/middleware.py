"""Middleware bridging the store's dispatch loop to reactive action/state streams."""

from __future__ import annotations

import logging
from typing import Any, Callable

import reactivex
from reactivex import operators as ops
from reactivex.abc import DisposableBase
from reactivex.scheduler import CurrentThreadScheduler
from reactivex.subject import BehaviorSubject, Subject

from storekit.store import Dispatch, MiddlewareAPI

logger = logging.getLogger(__name__)

RootEpic = Callable[[reactivex.Observable, BehaviorSubject, Any], reactivex.Observable]


class EpicMiddleware:
    """Feeds every dispatched action into `action_` after the reducers ran.

    Actions are delivered on the trampolining current-thread scheduler: an
    action dispatched by an epic while another action is still being delivered
    is queued behind it, so every epic observes actions in dispatch order.
    """

    def __init__(self, dependencies: Any = None) -> None:
        self.dependencies = dependencies
        self._action_subject: Subject = Subject()
        self._state_subject: BehaviorSubject | None = None
        self._store_dispatch: Dispatch | None = None
        self._subscription: DisposableBase | None = None
        self.action_ = self._action_subject.pipe(
            ops.observe_on(CurrentThreadScheduler.singleton()),
            ops.share(),
        )

    @property
    def state_(self) -> BehaviorSubject:
        if self._state_subject is None:
            raise RuntimeError("EpicMiddleware has not been installed on a store yet")
        return self._state_subject

    def __call__(self, api: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
        if self._state_subject is not None:
            raise RuntimeError("An EpicMiddleware instance can only be installed on one store")
        self._state_subject = BehaviorSubject(api.get_state())
        self._store_dispatch = api.dispatch

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def handle(action: Any) -> Any:
                result = next_dispatch(action)
                state = api.get_state()
                if state is not self.state_.value:
                    self.state_.on_next(state)
                self._action_subject.on_next(action)
                return result

            return handle

        return wrap

    def run(self, root_epic: RootEpic, dispatch: Dispatch | None = None) -> None:
        target = dispatch or self._store_dispatch
        if target is None:
            raise RuntimeError("EpicMiddleware.run() called before the middleware was installed")
        if self._subscription is not None:
            raise RuntimeError("EpicMiddleware.run() may only be called once")

        output_ = root_epic(self.action_, self.state_, self.dependencies)
        if not isinstance(output_, reactivex.Observable):
            raise TypeError(
                f"Root epic must return an Observable (type={type(output_).__name__})"
            )

        def on_error(error: Exception) -> None:
            logger.error("Epic engine terminated: %s", error)
            raise error

        self._subscription = output_.subscribe(on_next=target, on_error=on_error)

    def dispose(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
