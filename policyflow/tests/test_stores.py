from policyflow.core.config import PolicyFlowConfig, WizardConfig
from policyflow.core.models import Screen
from policyflow.core.stores import InMemorySessionStore, create_session_store_from_config


def test_store_creates_and_returns_sessions():
    store = InMemorySessionStore()
    session = store.create()
    assert store.get(session.id) is session
    assert len(store) == 1
    assert list(store.list()) == [session.id]
    assert store.get("missing") is None


def test_store_evicts_oldest_session_beyond_limit():
    store = InMemorySessionStore(max_sessions=2)
    first = store.create()
    first.start_policy()
    second = store.create()
    third = store.create()

    assert len(store) == 2
    assert store.get(first.id) is None
    assert store.get(second.id) is second
    assert store.get(third.id) is third
    assert first.screen == Screen.DASHBOARD
    assert first.interview is None


def test_delete_unmounts_session():
    store = InMemorySessionStore()
    session = store.create()
    interview = session.start_policy()
    handle = interview.submit("pending")

    assert store.delete(session.id) is True
    assert handle.aborted is True
    assert store.delete(session.id) is False


def test_store_limit_from_config():
    cfg = PolicyFlowConfig(wizard=WizardConfig(max_sessions=3))
    store = create_session_store_from_config(cfg)
    assert store.max_sessions == 3
    assert InMemorySessionStore(max_sessions=0).max_sessions == 1
