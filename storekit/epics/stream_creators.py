"""Extra streams handed to every epic, resolved by name from configuration."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

import reactivex
from reactivex import operators as ops

from storekit.namespaces import (
    DEFAULT_FEATURE,
    get_state_by_feature_and_namespace,
    has_namespace_state,
)

if TYPE_CHECKING:
    from storekit.epics.engine import EpicContext

StreamCreator = Callable[["EpicContext"], reactivex.Observable]


def namespaced_state(context: "EpicContext") -> reactivex.Observable:
    """State of the epic's namespace; emits only once that slice exists."""

    feature = context.feature or DEFAULT_FEATURE
    return context.state_.pipe(
        ops.filter(lambda state: has_namespace_state(feature, context.namespace, state)),
        ops.map(lambda state: get_state_by_feature_and_namespace(feature, context.namespace, state)),
    )


def global_action(context: "EpicContext") -> reactivex.Observable:
    """Actions of every namespace, not only the epic's own."""

    return context.global_action_


@dataclass(frozen=True)
class StreamCreatorRef:
    id: str
    factory: StreamCreator
    doc: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("StreamCreatorRef.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())
        if not callable(self.factory):
            raise TypeError(
                f"StreamCreatorRef.factory must be callable (id={self.id}, "
                f"type={type(self.factory).__name__})"
            )


@dataclass(frozen=True)
class StreamCreatorRegistry:
    _by_id: dict[str, StreamCreatorRef]

    @classmethod
    def from_refs(cls, refs: Iterable[StreamCreatorRef]) -> "StreamCreatorRegistry":
        entries: dict[str, StreamCreatorRef] = {}
        for ref in refs:
            if ref.id in entries:
                raise ValueError(f"Duplicate stream creator id: {ref.id}")
            entries[ref.id] = ref
        return cls(_by_id=entries)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id.keys()))

    def describe(self) -> tuple[dict[str, Any], ...]:
        return tuple(
            {"id": ref.id, "doc": ref.doc}
            for ref in sorted(self._by_id.values(), key=lambda r: r.id)
        )

    def get(self, creator_id: str) -> StreamCreatorRef:
        ref = self._by_id.get((creator_id or "").strip())
        if ref is None:
            raise ValueError(f"Unknown stream creator id: {creator_id}")
        return ref

    def resolve(self, creator_id: str) -> StreamCreatorRef:
        if not isinstance(creator_id, str) or not creator_id.strip():
            raise ValueError("creator_id must be a non-empty string")
        key = creator_id.strip()

        direct = self._by_id.get(key)
        if direct is not None:
            return direct

        available = ", ".join(self.available()) or "<none>"
        suggestions = self.suggest(key)
        if suggestions:
            raise ValueError(
                f"Unknown stream creator id: {creator_id} (did you mean: {', '.join(suggestions)}?)"
            )
        raise ValueError(f"Unknown stream creator id: {creator_id} (available: {available})")

    def suggest(self, creator_id: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (creator_id or "").strip()
        if not key:
            return ()
        return tuple(difflib.get_close_matches(key, list(self.available()), n=limit))

    def factories(self, creator_ids: Iterable[str]) -> dict[str, StreamCreator]:
        return {ref.id: ref.factory for ref in (self.resolve(item) for item in creator_ids)}


def default_registry() -> StreamCreatorRegistry:
    return StreamCreatorRegistry.from_refs(
        [
            StreamCreatorRef("namespaced_state", namespaced_state, doc=namespaced_state.__doc__),
            StreamCreatorRef("global_action", global_action, doc=global_action.__doc__),
        ]
    )


def normalize_stream_creators(
    stream_creators: Mapping[str, StreamCreator] | Iterable[str] | None,
    *,
    registry: StreamCreatorRegistry | None = None,
) -> dict[str, StreamCreator]:
    """Accept either explicit `{name: factory}` or registry names."""

    if stream_creators is None:
        return {}
    if isinstance(stream_creators, Mapping):
        creators: dict[str, StreamCreator] = {}
        for name, factory in stream_creators.items():
            if not isinstance(name, str) or not name.strip():
                raise TypeError("stream creator names must be non-empty strings")
            if not callable(factory):
                raise TypeError(f"stream creator {name} must be callable")
            creators[name.strip()] = factory
        return creators
    if isinstance(stream_creators, str):
        raise TypeError("stream_creators must be a mapping or a list of names, not a string")
    return (registry or default_registry()).factories(stream_creators)
