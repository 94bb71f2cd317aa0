import logging

import pytest
import reactivex
from reactivex import operators as ops

from storekit import create_extensible_store, stop_epics


def _recorder(log):
    def middleware(api):
        def wrap(next_dispatch):
            def handle(action):
                log.append(action)
                return next_dispatch(action)

            return handle

        return wrap

    return middleware


def _store(**kwargs):
    log = []
    store = create_extensible_store(middleware=[_recorder(log)], **kwargs)
    return store, log


def _of_type(log, action_type):
    return [action for action in log if action["type"] == action_type]


def ping_pong(action_, state_, dependencies):
    return action_.pipe(
        ops.filter(lambda action: action["type"] == "PING"),
        ops.map(lambda action: {"type": "PONG", "payload": action["payload"] + 1}),
    )


def ping(payload=1, namespace=None):
    action = {"type": "PING", "payload": payload}
    if namespace:
        action["meta"] = {"namespace": namespace}
    return action


def test_namespaced_epic_answers_only_its_namespace():
    store, log = _store()
    store.inject_epics(ping_pong, namespace="ns")

    store.dispatch(ping(1, namespace="ns"))
    store.dispatch(ping(1, namespace="other"))

    assert _of_type(log, "PONG") == [{"type": "PONG", "payload": 2, "meta": {"namespace": "ns"}}]


def test_epic_output_namespace_is_forced():
    def relabel(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "PING"),
            ops.map(lambda action: {"type": "PONG", "meta": {"namespace": "spoofed"}}),
        )

    store, log = _store()
    store.inject_epics(relabel, namespace="ns")
    store.dispatch(ping())

    assert _of_type(log, "PONG") == [{"type": "PONG", "meta": {"namespace": "ns"}}]


def test_same_epic_under_distinct_keys_runs_twice():
    store, log = _store()
    store.inject_epics({"foo": ping_pong, "bar": ping_pong})

    store.dispatch(ping())

    assert len(_of_type(log, "PONG")) == 2
    assert len(store.epic_engine.active_entries()) == 2


def test_ejected_epic_stops_emitting():
    store, log = _store()
    store.inject_epics(ping_pong, namespace="ns")

    store.eject_epics(ping_pong, namespace="ns")
    store.dispatch(ping(namespace="ns"))

    assert _of_type(log, "PONG") == []
    assert store.epic_engine.active_entries() == ()


def test_double_inject_shares_one_pipeline_until_last_eject():
    store, log = _store()
    store.inject_epics({"foo": ping_pong})
    store.inject_epics({"foo": ping_pong})

    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 1

    store.eject_epics({"foo": ping_pong})
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 2

    store.eject_epics({"foo": ping_pong})
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 2


def test_versioned_eject_skips_newer_epics():
    store, log = _store()
    store.inject_epics({"foo": ping_pong}, version=2)

    store.eject_epics({"foo": ping_pong}, version=1)
    store.eject_epics({"foo": ping_pong})
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 1

    store.eject_epics({"foo": ping_pong}, version=3)
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 1


def test_stop_action_tears_down_matching_epics():
    store, log = _store()
    store.inject_epics({"foo": ping_pong, "bar": ping_pong})

    store.dispatch(stop_epics(["foo"]))
    store.dispatch(ping())

    assert len(_of_type(log, "PONG")) == 1
    assert [entry.key for entry in store.entries["epics"]] == ["bar"]
    assert _of_type(log, "@@storekit/EPICS_EJECTED")[-1]["payload"] == [["foo"]]


def test_stop_action_matches_epic_callables_within_namespace():
    store, log = _store()
    store.inject_epics(ping_pong, namespace="ns")
    store.inject_epics(ping_pong, namespace="other")

    store.dispatch(stop_epics([ping_pong], namespace="ns"))
    store.dispatch(ping(namespace="ns"))
    store.dispatch(ping(namespace="other"))

    assert [action["meta"]["namespace"] for action in _of_type(log, "PONG")] == ["other"]


def test_stop_action_with_unknown_id_is_a_noop():
    store, log = _store()
    store.inject_epics({"foo": ping_pong})

    store.dispatch(stop_epics(["never-injected"]))
    store.dispatch(ping())

    assert len(_of_type(log, "PONG")) == 1
    assert len(store.entries["epics"]) == 1


def test_dispatch_without_epics_returns_action():
    store, _log = _store()
    action = {"type": "ANY"}

    assert store.dispatch(action) is action


def test_epics_see_actions_in_dispatch_order():
    seen = []

    def echo(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "A"),
            ops.flat_map(lambda action: reactivex.of({"type": "B"}, {"type": "C"})),
        )

    def watch(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] in ("A", "B", "C")),
            ops.do_action(lambda action: seen.append(action["type"])),
            ops.ignore_elements(),
        )

    store, _log = _store()
    store.inject_epics({"echo": echo, "watch": watch})
    store.dispatch({"type": "A"})

    assert seen == ["A", "B", "C"]


def test_epics_receive_state_after_reducers_ran():
    def counter(state, action):
        state = 0 if state is None else state
        return state + 1 if action["type"] == "INCREMENT" else state

    def report(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "INCREMENT"),
            ops.with_latest_from(state_),
            ops.map(lambda pair: {"type": "REPORTED", "payload": pair[1]["count"]}),
        )

    store, log = _store()
    store.inject_reducers({"count": counter})
    store.inject_epics({"report": report})

    store.dispatch({"type": "INCREMENT"})
    store.dispatch({"type": "INCREMENT"})

    assert [action["payload"] for action in _of_type(log, "REPORTED")] == [1, 2]


def test_epics_receive_dependencies():
    def greeter(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "GREET"),
            ops.map(lambda action: {"type": "GREETED", "payload": dependencies["greet"]("bob")}),
        )

    store, log = _store(dependencies={"greet": lambda name: f"hello {name}"})
    store.inject_epics({"greeter": greeter})
    store.dispatch({"type": "GREET"})

    assert _of_type(log, "GREETED")[0]["payload"] == "hello bob"


def test_completed_epic_can_be_started_again():
    def once(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "PING"),
            ops.take(1),
            ops.map(lambda action: {"type": "PONG"}),
        )

    store, log = _store()
    store.inject_epics({"once": once})
    store.dispatch(ping())
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 1
    assert store.epic_engine.active_entries() == ()

    store.eject_epics({"once": once})
    store.inject_epics({"once": once})
    store.dispatch(ping())
    assert len(_of_type(log, "PONG")) == 2


def test_epic_construction_error_propagates_from_inject(caplog):
    def broken(action_, state_, dependencies):
        raise RuntimeError("boom")

    store, _log = _store()

    with caplog.at_level(logging.ERROR, logger="storekit"):
        with pytest.raises(RuntimeError, match=r"boom"):
            store.inject_epics({"broken": broken})

    assert "Epic failed to start" in caplog.text
    assert store.epic_engine.active_entries() == ()


def test_epic_must_return_an_observable():
    def not_a_stream(action_, state_, dependencies):
        return [{"type": "PONG"}]

    store, _log = _store()

    with pytest.raises(TypeError, match=r"Epic must return an Observable"):
        store.inject_epics({"bad": not_a_stream})


def test_notifications_are_dispatched_for_epics():
    store, log = _store()

    store.inject_epics({"foo": ping_pong}, namespace="ns")
    store.eject_epics({"foo": ping_pong}, namespace="ns")

    assert _of_type(log, "@@storekit/EPICS_INJECTED") == [
        {"type": "@@storekit/EPICS_INJECTED", "payload": [["foo"]], "meta": {"namespace": "ns"}}
    ]
    assert _of_type(log, "@@storekit/EPICS_EJECTED")[0]["payload"] == [["foo"]]


def test_epic_started_during_an_action_only_sees_later_actions():
    seen = []

    def late(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] in ("START", "AFTER")),
            ops.do_action(lambda action: seen.append(action["type"])),
            ops.ignore_elements(),
        )

    def starter(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "START"),
            ops.do_action(lambda action: store.inject_epics({"late": late})),
            ops.ignore_elements(),
        )

    store, _log = _store()
    store.inject_epics({"starter": starter})

    store.dispatch({"type": "START"})
    store.dispatch({"type": "AFTER"})

    assert seen == ["AFTER"]
    assert [entry.path for entry in store.epic_engine.active_entries()] == [("starter",), ("late",)]


def test_never_completing_epic_does_not_block_other_epics():
    def idle(action_, state_, dependencies):
        return reactivex.never()

    store, log = _store()
    store.inject_epics({"idle": idle})
    store.inject_epics({"ping": ping_pong})

    store.dispatch(ping())
    assert _of_type(log, "PONG") == [{"type": "PONG", "payload": 2}]

    store.eject_epics({"idle": idle})
    assert [entry.path for entry in store.epic_engine.active_entries()] == [("ping",)]

    store.dispatch(ping(5))
    assert [action["payload"] for action in _of_type(log, "PONG")] == [2, 6]
