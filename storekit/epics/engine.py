"""Dynamic epic merge engine.

Each live epic entry owns at most one running pipeline:

    injected --(first copy)--> active --(last matching eject)--> torn down

Injecting an entry that is already active (equal ignoring version) shares the
running pipeline. Ejecting removes one registry occurrence; the pipeline is
torn down only once no equal entry is left in the registry. All pipelines are
merged into a single output stream that the epic middleware dispatches.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import reactivex
from reactivex import operators as ops
from reactivex.subject import Subject

from storekit.actions import ActionTypes, is_action_of_type
from storekit.enhance import InjectionEvent
from storekit.entries import Entry, equals_ignoring_version, is_entry_not_included
from storekit.epics.stream_creators import StreamCreator
from storekit.namespaces import force_namespace, get_namespace_by_action, is_action_from_namespace
from storekit.store_interface import StoreInterface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpicContext:
    """Everything a stream creator may derive an extra stream from."""

    path: tuple[str, ...]
    namespace: str | None
    feature: str | None
    version: int | None
    store: Any
    dependencies: Any
    action_: reactivex.Observable
    global_action_: reactivex.Observable
    state_: reactivex.Observable

    @property
    def key(self) -> str | None:
        return ".".join(self.path) if self.path else None


def _matches_stop_id(entry: Entry, stop_id: Any) -> bool:
    if isinstance(stop_id, str):
        return entry.key == stop_id
    return stop_id is entry.value


class EpicEngine:
    def __init__(
        self,
        store_interface: StoreInterface,
        *,
        stream_creators: Mapping[str, StreamCreator] | None = None,
    ) -> None:
        self.store_interface = store_interface
        self.stream_creators = dict(stream_creators or {})
        self._injected: Subject = Subject()
        self._ejected: Subject = Subject()
        self._active: list[Entry] = []
        self._store: Any = None

    def bind(self, store: Any) -> None:
        self._store = store

    def entries(self) -> tuple[Entry, ...]:
        if self._store is None:
            return ()
        return self.store_interface.get_entries(self._store)

    def active_entries(self) -> tuple[Entry, ...]:
        return tuple(self._active)

    def handle_injected(self, event: InjectionEvent) -> None:
        for entry in event.entries:
            self._injected.on_next(entry)

    def handle_ejected(self, event: InjectionEvent) -> None:
        for entry in event.entries:
            self._ejected.on_next(entry)

    def _claim(self, entry: Entry) -> bool:
        if any(equals_ignoring_version(active, entry) for active in self._active):
            logger.debug("Epic already active, sharing pipeline: %r", entry)
            return False
        if is_entry_not_included(self.entries(), entry):
            return False
        self._active.append(entry)
        return True

    def _release(self, entry: Entry) -> None:
        for idx, active in enumerate(self._active):
            if active is entry:
                del self._active[idx]
                logger.debug("Epic pipeline torn down: %r", entry)
                return

    def _teardown_signal(self, entry: Entry) -> reactivex.Observable:
        return self._ejected.pipe(
            ops.filter(lambda ejected: equals_ignoring_version(ejected, entry)),
            ops.filter(lambda _: is_entry_not_included(self.entries(), entry)),
        )

    def _start(
        self,
        entry: Entry,
        action_: reactivex.Observable,
        state_: reactivex.Observable,
        dependencies: Any,
    ) -> reactivex.Observable:
        local_action_ = action_.pipe(
            ops.filter(functools.partial(is_action_from_namespace, entry.namespace))
        )
        epic = entry.value

        try:
            if self.stream_creators:
                context = EpicContext(
                    path=entry.path,
                    namespace=entry.namespace,
                    feature=entry.feature,
                    version=entry.version,
                    store=self._store,
                    dependencies=dependencies,
                    action_=local_action_,
                    global_action_=action_,
                    state_=state_,
                )
                streams = {name: creator(context) for name, creator in self.stream_creators.items()}
                output_ = epic(local_action_, state_, streams, dependencies)
            else:
                output_ = epic(local_action_, state_, dependencies)

            if not isinstance(output_, reactivex.Observable):
                raise TypeError(
                    f"Epic must return an Observable (entry={entry!r}, "
                    f"type={type(output_).__name__})"
                )
        except Exception:
            self._release(entry)
            logger.error("Epic failed to start: %r", entry)
            raise

        logger.debug("Epic pipeline started: %r", entry)

        stamp = (
            [ops.map(functools.partial(force_namespace, entry.namespace))]
            if entry.namespace
            else []
        )
        return output_.pipe(
            *stamp,
            ops.finally_action(lambda: self._release(entry)),
            # take_until must stay the last operator, otherwise operators after it leak.
            ops.take_until(self._teardown_signal(entry)),
        )

    def _handle_stop(self, action: Any) -> None:
        payload = action.get("payload")
        stop_ids = payload if isinstance(payload, (list, tuple)) else [payload]

        targets = tuple(
            entry
            for entry in self.entries()
            if is_action_from_namespace(entry.namespace, action)
            and any(_matches_stop_id(entry, stop_id) for stop_id in stop_ids)
        )
        if not targets:
            logger.debug("Stop action matched no live epics: %r", stop_ids)
            return

        injector = self._store.injectors[self.store_interface.kind]
        injector.eject_entries(
            targets,
            {"namespace": get_namespace_by_action(action), "feature": None, "version": None},
            all_occurrences=True,
        )

    def root_epic(
        self,
        action_: reactivex.Observable,
        state_: reactivex.Observable,
        dependencies: Any,
    ) -> reactivex.Observable:
        pipelines_ = self._injected.pipe(
            ops.filter(self._claim),
            ops.flat_map(lambda entry: self._start(entry, action_, state_, dependencies)),
        )
        stops_ = action_.pipe(
            ops.filter(lambda action: is_action_of_type(action, ActionTypes["STOP_EPICS"])),
            ops.do_action(on_next=self._handle_stop),
            ops.ignore_elements(),
        )
        return reactivex.merge(pipelines_, stops_)
