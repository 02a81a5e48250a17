from school_appointments.core.enums import InsertPosition
from school_appointments.sync.store import KeyedStore


def test_insert_follows_position_policy():
    appended = KeyedStore()
    prepended = KeyedStore(position=InsertPosition.PREPEND)
    for store in (appended, prepended):
        store.replace_all([{"id": 1}, {"id": 2}])
        store.insert({"id": 3})

    assert [r["id"] for r in appended.snapshot()] == [1, 2, 3]
    assert [r["id"] for r in prepended.snapshot()] == [3, 1, 2]


def test_replace_swaps_the_whole_row():
    store = KeyedStore()
    store.replace_all([{"id": 1, "status": "pending", "email": "a@x.test"}])

    assert store.replace({"id": 1, "status": "completed"}) is True
    assert store.get(1) == {"id": 1, "status": "completed"}
    assert store.replace({"id": 9, "status": "completed"}) is False


def test_upsert_and_remove():
    store = KeyedStore()
    store.upsert({"id": 1, "v": "a"})
    store.upsert({"id": 1, "v": "b"})
    store.upsert({"id": 2, "v": "c"})

    assert store.snapshot() == [{"id": 1, "v": "b"}, {"id": 2, "v": "c"}]
    assert store.remove(1) is True
    assert store.remove(1) is False
    assert len(store) == 1


def test_snapshot_is_a_copy():
    store = KeyedStore()
    store.replace_all([{"id": 1, "v": "a"}])

    store.snapshot()[0]["v"] = "changed"

    assert store.get(1)["v"] == "a"


def test_listeners_receive_snapshots_until_unsubscribed():
    store = KeyedStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.insert({"id": 1})
    unsubscribe()
    store.insert({"id": 2})

    assert seen == [[{"id": 1}]]


def test_derived_view_recomputes_on_change():
    store = KeyedStore()
    store.replace_all(
        [
            {"id": 1, "time": "10 AM - 12 PM", "status": "pending"},
            {"id": 2, "time": "8 AM - 10 AM", "status": "pending"},
        ]
    )
    pending = store.view(lambda r: r["status"] == "pending", sort_key=lambda r: r["id"], reverse=True)
    updates = []
    pending.subscribe(updates.append)

    assert [r["id"] for r in pending.rows] == [2, 1]

    store.replace({"id": 2, "time": "8 AM - 10 AM", "status": "completed"})

    assert [r["id"] for r in pending.rows] == [1]
    assert updates[-1] == pending.rows

    pending.close()
    store.insert({"id": 3, "status": "pending"})
    assert [r["id"] for r in pending.rows] == [1]
