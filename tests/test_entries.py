import pytest

from storekit.entries import (
    Entry,
    InjectableShape,
    classify_injectables,
    create_entries,
    equals_ignoring_version,
    included_count,
    is_entry_included,
    is_entry_included_times,
    is_entry_not_included,
    is_version_ejectable,
    without_all,
    without_once,
)


def reducer_a(state, action):
    return state


def reducer_b(state, action):
    return state


def test_create_entries_callable_gets_root_path():
    entries = create_entries(reducer_a, namespace="ns", feature="f", version=3)

    assert len(entries) == 1
    assert entries[0].path == ()
    assert entries[0].key is None
    assert entries[0].value is reducer_a
    assert entries[0].props() == {"namespace": "ns", "feature": "f", "version": 3}


def test_create_entries_flattens_nested_mappings_and_lists():
    entries = create_entries({"a": [reducer_a, {"b": reducer_b}], "c": reducer_b})

    assert [(entry.path, entry.value) for entry in entries] == [
        (("a",), reducer_a),
        (("a", "b"), reducer_b),
        (("c",), reducer_b),
    ]
    assert entries[1].key == "a.b"


@pytest.mark.parametrize("injectables", [None, 3, "reducer", [], {}, [None, 1]])
def test_create_entries_ignores_non_injectables(injectables):
    assert create_entries(injectables) == []


def test_create_entries_skips_non_string_keys():
    assert create_entries({1: reducer_a, "": reducer_b}) == []


def test_classify_injectables():
    assert classify_injectables(reducer_a) is InjectableShape.CALLABLE
    assert classify_injectables([reducer_a]) is InjectableShape.SEQUENCE
    assert classify_injectables({"a": reducer_a}) is InjectableShape.MAPPING
    assert classify_injectables(42) is InjectableShape.INVALID


def test_entry_rejects_non_int_version():
    with pytest.raises(TypeError, match=r"Entry.version must be an int"):
        Entry(("a",), reducer_a, version="1")
    with pytest.raises(TypeError, match=r"Entry.version must be an int"):
        Entry(("a",), reducer_a, version=True)


def test_equality_ignores_version_and_compares_value_by_identity():
    base = Entry(("a",), reducer_a, "ns", None, 1)

    assert equals_ignoring_version(base, Entry(("a",), reducer_a, "ns", None, 7))
    assert not equals_ignoring_version(base, Entry(("a",), reducer_b, "ns", None, 1))
    assert not equals_ignoring_version(base, Entry(("b",), reducer_a, "ns", None, 1))
    assert not equals_ignoring_version(base, Entry(("a",), reducer_a, "other", None, 1))
    assert not equals_ignoring_version(base, Entry(("a",), reducer_a, "ns", "f", 1))


def test_inclusion_predicates_count_occurrences():
    needle = Entry(("a",), reducer_a)
    entries = [Entry(("a",), reducer_a), Entry(("b",), reducer_a), Entry(("a",), reducer_a, version=2)]

    assert included_count(entries, needle) == 2
    assert is_entry_included_times(2, entries, needle)
    assert is_entry_included(entries, needle)
    assert is_entry_not_included(entries, Entry(("c",), reducer_a))


@pytest.mark.parametrize(
    ("reference", "tested", "expected"),
    [
        (None, None, True),
        (None, 1, False),
        (1, None, False),
        (2, 1, True),
        (2, 2, True),
        (2, 3, False),
    ],
)
def test_is_version_ejectable(reference, tested, expected):
    assert is_version_ejectable(reference, tested) is expected


def test_without_once_removes_one_occurrence_per_request():
    first = Entry(("a",), reducer_a)
    second = Entry(("a",), reducer_a)
    other = Entry(("b",), reducer_b)

    remaining = without_once([Entry(("a",), reducer_a)], (first, other, second))

    assert remaining == (other, second)


def test_without_once_respects_versions():
    live = (Entry(("a",), reducer_a, version=2),)

    assert without_once([Entry(("a",), reducer_a, version=1)], live) == live
    assert without_once([Entry(("a",), reducer_a)], live) == live
    assert without_once([Entry(("a",), reducer_a, version=2)], live) == ()


def test_without_once_leaves_input_untouched():
    live = [Entry(("a",), reducer_a)]

    without_once([Entry(("a",), reducer_a)], live)

    assert len(live) == 1


def test_without_all_removes_every_match():
    live = (Entry(("a",), reducer_a), Entry(("a",), reducer_a), Entry(("b",), reducer_a))

    remaining = without_all([Entry(("a",), reducer_a)], live)

    assert [entry.path for entry in remaining] == [("b",)]
