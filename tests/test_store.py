import pytest

from storekit.actions import ActionTypes
from storekit.store import apply_middleware, compose, create_store


def counter(state, action):
    if state is None:
        state = 0
    if action["type"] == "INCREMENT":
        return state + 1
    return state


def test_create_store_runs_init():
    store = create_store(counter)

    assert store.get_state() == 0


def test_dispatch_returns_action_and_notifies_listeners():
    store = create_store(counter)
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(store.get_state()))

    action = {"type": "INCREMENT"}
    assert store.dispatch(action) is action
    unsubscribe()
    unsubscribe()
    store.dispatch({"type": "INCREMENT"})

    assert calls == [1]
    assert store.get_state() == 2


def test_dispatch_rejects_non_mapping_actions():
    store = create_store(counter)

    with pytest.raises(TypeError, match=r"Actions must be mappings"):
        store.dispatch("INCREMENT")
    with pytest.raises(TypeError, match=r"Action type must be a string"):
        store.dispatch({"payload": 1})


def test_reducers_may_not_dispatch_or_read_state():
    holder = {}

    def dispatching(state, action):
        if action["type"] == "DISPATCH":
            holder["store"].dispatch({"type": "OTHER"})
        if action["type"] == "READ":
            holder["store"].get_state()
        return state

    store = create_store(dispatching)
    holder["store"] = store

    with pytest.raises(RuntimeError, match=r"Reducers may not dispatch"):
        store.dispatch({"type": "DISPATCH"})
    with pytest.raises(RuntimeError, match=r"may not be called while the reducer"):
        store.dispatch({"type": "READ"})


def test_replace_reducer_dispatches_replace():
    seen = []

    def recording(state, action):
        seen.append(action["type"])
        return state

    store = create_store(counter)
    store.replace_reducer(recording)

    assert seen == [ActionTypes["REPLACE"]]


def test_apply_middleware_runs_first_middleware_outermost():
    order = []

    def tagging(name):
        def middleware(api):
            def wrap(next_dispatch):
                def handle(action):
                    order.append(name)
                    return next_dispatch(action)

                return handle

            return wrap

        return middleware

    store = create_store(counter, None, apply_middleware(tagging("outer"), tagging("inner")))
    store.dispatch({"type": "INCREMENT"})

    assert order == ["outer", "inner"]
    assert store.get_state() == 1


def test_compose_is_right_to_left():
    assert compose()(3) == 3
    assert compose(lambda x: x * 2, lambda x: x + 1)(3) == 8
