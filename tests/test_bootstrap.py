import pytest
from reactivex import operators as ops

from storekit import StoreConfig, create_extensible_store, create_store
from storekit.epics import EpicMiddleware, make_epics_enhancer
from storekit.store import apply_middleware


def test_store_exposes_inject_and_eject_for_every_kind():
    store = create_extensible_store()

    for kind in ("reducers", "middleware", "epics"):
        assert callable(getattr(store, f"inject_{kind}"))
        assert callable(getattr(store, f"eject_{kind}"))
        assert store.entries[kind] == ()
    assert sorted(store.injectors) == ["epics", "middleware", "reducers"]


def test_preloaded_state_is_kept():
    store = create_extensible_store(preloaded_state={"session": "abc"})

    assert store.get_state() == {"session": "abc"}


def test_dispatch_order_runs_static_then_injected_then_epics():
    order = []

    def tagging(name):
        def middleware(api):
            def wrap(next_dispatch):
                def handle(action):
                    if action["type"] == "PING":
                        order.append(name)
                    return next_dispatch(action)

                return handle

            return wrap

        return middleware

    def epic(action_, state_, dependencies):
        return action_.pipe(
            ops.filter(lambda action: action["type"] == "PING"),
            ops.do_action(lambda action: order.append("epic")),
            ops.ignore_elements(),
        )

    store = create_extensible_store(middleware=[tagging("static")])
    store.inject_middleware(tagging("injected"))
    store.inject_epics(epic)

    store.dispatch({"type": "PING"})

    assert order == ["static", "injected", "epic"]


def test_config_object_is_accepted():
    store = create_extensible_store(config=StoreConfig(thunk=False))

    with pytest.raises(TypeError, match=r"Actions must be mappings"):
        store.dispatch(lambda api: None)


def test_invalid_config_type_is_rejected():
    with pytest.raises(TypeError, match=r"config must be a StoreConfig or mapping"):
        create_extensible_store(config="store.yaml")


def test_epics_enhancer_works_on_a_plain_store():
    store = create_store(None, None, make_epics_enhancer())

    assert store.entries == {"epics": ()}
    assert store.epic_engine.stream_creators == {}


def test_epic_middleware_is_single_use():
    middleware = EpicMiddleware()
    create_store(None, None, apply_middleware(middleware))

    with pytest.raises(RuntimeError, match=r"can only be installed on one store"):
        create_store(None, None, apply_middleware(middleware))
    with pytest.raises(RuntimeError, match=r"may only be called once"):
        middleware.run(lambda action_, state_, dependencies: action_.pipe(ops.ignore_elements()))
        middleware.run(lambda action_, state_, dependencies: action_.pipe(ops.ignore_elements()))
