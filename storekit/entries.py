"""Entry model and the registry algebra shared by every injectable kind.

An entry is one normalized registration. Callers hand `inject_*` / `eject_*` a
callable, a list, or an arbitrarily nested mapping; `create_entries` collapses
that shape into a flat list of `Entry` records exactly once, so nothing
downstream ever inspects the raw injectables again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

ROOT_PATH: tuple[str, ...] = ()


class InjectableShape(str, Enum):
    CALLABLE = "callable"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    INVALID = "invalid"


def classify_injectables(injectables: Any) -> InjectableShape:
    if isinstance(injectables, Mapping):
        return InjectableShape.MAPPING
    if isinstance(injectables, (list, tuple)):
        return InjectableShape.SEQUENCE
    if callable(injectables):
        return InjectableShape.CALLABLE
    return InjectableShape.INVALID


@dataclass(frozen=True, eq=False)
class Entry:
    path: tuple[str, ...]
    value: Any
    namespace: str | None = None
    feature: str | None = None
    version: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))
        for idx, part in enumerate(self.path):
            if not isinstance(part, str):
                raise TypeError(
                    f"Entry.path[{idx}] must be a string (type={type(part).__name__})"
                )
        if self.version is not None and (
            isinstance(self.version, bool) or not isinstance(self.version, int)
        ):
            raise TypeError(
                f"Entry.version must be an int or None (type={type(self.version).__name__})"
            )

    @property
    def key(self) -> str | None:
        if not self.path:
            return None
        return ".".join(self.path)

    def props(self) -> dict[str, Any]:
        return {"namespace": self.namespace, "feature": self.feature, "version": self.version}

    def __repr__(self) -> str:
        value_name = getattr(self.value, "__qualname__", None) or type(self.value).__name__
        return (
            f"Entry(path={self.path!r}, value={value_name}, namespace={self.namespace!r}, "
            f"feature={self.feature!r}, version={self.version!r})"
        )


def _collect(
    injectables: Any,
    prefix: tuple[str, ...],
    *,
    namespace: str | None,
    feature: str | None,
    version: int | None,
) -> list[Entry]:
    shape = classify_injectables(injectables)

    if shape is InjectableShape.CALLABLE:
        return [Entry(prefix, injectables, namespace, feature, version)]

    if shape is InjectableShape.SEQUENCE:
        collected: list[Entry] = []
        for item in injectables:
            collected.extend(
                _collect(item, prefix, namespace=namespace, feature=feature, version=version)
            )
        return collected

    if shape is InjectableShape.MAPPING:
        collected = []
        for key, item in injectables.items():
            if not isinstance(key, str) or not key:
                continue
            collected.extend(
                _collect(
                    item,
                    prefix + (key,),
                    namespace=namespace,
                    feature=feature,
                    version=version,
                )
            )
        return collected

    return []


def create_entries(
    injectables: Any,
    *,
    namespace: str | None = None,
    feature: str | None = None,
    version: int | None = None,
) -> list[Entry]:
    """Normalize `inject_*` / `eject_*` input into standalone entries.

    - a callable becomes one entry with the root path `()`
    - a list or tuple is flattened, each item sharing the current path
    - a mapping prepends each key to the paths produced by its value

    Anything else (including empty containers) yields an empty list.
    """

    return _collect(
        injectables,
        ROOT_PATH,
        namespace=namespace or None,
        feature=feature or None,
        version=version,
    )


def equals_ignoring_version(a: Entry, b: Entry) -> bool:
    return (
        a.path == b.path
        and a.value is b.value
        and a.namespace == b.namespace
        and a.feature == b.feature
    )


def included_count(entries: Iterable[Entry], needle: Entry) -> int:
    return sum(1 for entry in entries if equals_ignoring_version(entry, needle))


def is_entry_included_times(times: int, entries: Iterable[Entry], needle: Entry) -> bool:
    return included_count(entries, needle) == times


def is_entry_included(entries: Iterable[Entry], needle: Entry) -> bool:
    return any(equals_ignoring_version(entry, needle) for entry in entries)


def is_entry_not_included(entries: Iterable[Entry], needle: Entry) -> bool:
    return not is_entry_included(entries, needle)


def is_version_ejectable(reference_version: int | None, tested_version: int | None) -> bool:
    """Whether a request for `reference_version` may eject `tested_version`.

    Unversioned requests only eject unversioned entries; versioned requests only
    eject versioned entries of the same generation or older.
    """

    if reference_version is None and tested_version is None:
        return True
    if reference_version is None or tested_version is None:
        return False
    return tested_version <= reference_version


def is_entry_ejectable_by_version(reference_version: int | None, entry: Entry) -> bool:
    return is_version_ejectable(reference_version, entry.version)


def matches_ejection(request: Entry, live: Entry) -> bool:
    return equals_ignoring_version(request, live) and is_entry_ejectable_by_version(
        request.version, live
    )


def without_once(removals: Iterable[Entry], entries: Sequence[Entry]) -> tuple[Entry, ...]:
    """Remove one matching live entry per removal request.

    Injecting the same entry twice and ejecting it once therefore leaves one
    occurrence live.
    """

    remaining = list(entries)
    for request in removals:
        for idx, live in enumerate(remaining):
            if matches_ejection(request, live):
                del remaining[idx]
                break
    return tuple(remaining)


def without_all(removals: Iterable[Entry], entries: Sequence[Entry]) -> tuple[Entry, ...]:
    requests = list(removals)
    return tuple(
        live for live in entries if not any(matches_ejection(request, live) for request in requests)
    )


def entry_paths(entries: Iterable[Entry]) -> list[list[str]]:
    return [list(entry.path) for entry in entries]
