import pytest

from storekit import attach_namespace, create_extensible_store
from storekit.reducers import make_reducer

counter = make_reducer([("INCREMENT", lambda state, action: state + 1)], 0)


def _recorder(log):
    def middleware(api):
        def wrap(next_dispatch):
            def handle(action):
                log.append(action)
                return next_dispatch(action)

            return handle

        return wrap

    return middleware


def test_thunk_result_is_returned_from_dispatch():
    store = create_extensible_store()

    assert store.dispatch(lambda api: "done") == "done"


def test_thunk_dispatch_attaches_namespace():
    log = []
    store = create_extensible_store(middleware=[_recorder(log)])

    def increment_twice(api):
        api.dispatch({"type": "INCREMENT"})
        api.dispatch({"type": "INCREMENT", "meta": {"namespace": "explicit"}})
        return api.namespace

    assert store.dispatch(attach_namespace("ns", increment_twice)) == "ns"

    increments = [action for action in log if action["type"] == "INCREMENT"]
    assert [action["meta"]["namespace"] for action in increments] == ["ns", "explicit"]


def test_thunk_reads_namespaced_state_and_dependencies():
    captured = []
    store = create_extensible_store(dependencies={"label": "counter"})
    store.inject_reducers({"count": counter}, namespace="ns")

    def read(api):
        api.dispatch({"type": "INCREMENT"})
        captured.append((api.dependencies["label"], api.get_namespaced_state()))

    store.dispatch(attach_namespace("ns", read))

    assert captured == [("counter", {"count": 1})]


def test_thunk_can_be_disabled_by_config():
    store = create_extensible_store(config={"store": {"thunk": False}})

    with pytest.raises(TypeError, match=r"Actions must be mappings"):
        store.dispatch(lambda api: None)
