from carbonwise.db import SessionStore


def test_save_and_get():
    store = SessionStore()
    sid = store.save("u1", {"a": 1})
    s = store.get(sid)
    assert s.userId == "u1"
    assert s.data == {"a": 1}
    assert s.timestamp.endswith("+00:00")


def test_unknown_session():
    assert SessionStore().get("nope") is None


def test_ids_are_unique():
    store = SessionStore()
    assert store.save("u", 1) != store.save("u", 1)


def test_latest_for_user():
    store = SessionStore()
    store.save("u1", "old")
    store.save("u2", "other")
    store.save("u1", "new")
    assert store.latest_for("u1").data == "new"
    assert store.latest_for("u3") is None


def test_oldest_sessions_evicted():
    store = SessionStore(limit=2)
    first = store.save("u", 1)
    store.save("u", 2)
    store.save("u", 3)
    assert len(store) == 2
    assert store.get(first) is None
