from __future__ import annotations

import json
from pathlib import Path

import pytest

from packtrack.models.order import OrderStatus
from packtrack.store.order_store import OrderStore
from packtrack.store.persistence import (
    CURRENT_ID_KEY,
    ORDERS_KEY,
    JsonFileKeyValueStore,
    PersistenceError,
    load_store,
    remove_store,
    save_store,
)

HEADER = ("Timestamp", "Name")


@pytest.fixture()
def kv(tmp_path: Path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / "state")


def test_kv_get_set_remove(kv):
    assert kv.get("missing") is None
    kv.set("k", "value")
    assert kv.get("k") == "value"
    kv.remove("k")
    kv.remove("k")  # removing twice is fine
    assert kv.get("k") is None


def test_save_writes_two_keys(kv):
    store = OrderStore()
    store.import_batch([["01/01/2024", "Alice"]], HEADER)
    save_store(store, kv)
    data = json.loads(kv.get(ORDERS_KEY))
    assert data[0]["rowData"] == ["01/01/2024", "Alice"]
    assert data[0]["headers"] == list(HEADER)
    assert kv.get(CURRENT_ID_KEY) == "2"


def test_save_and_load_round_trip(kv):
    store = OrderStore()
    store.import_batch([["01/01/2024", "Alice"], ["02/01/2024", "王小明\n二楼"]], HEADER)
    store.set_status(2, OrderStatus.PACKED)
    store.set_notes(1, "call first")
    save_store(store, kv)

    loaded = load_store(kv)
    assert loaded.snapshot() == store.snapshot()
    assert loaded.next_id == 3
    assert loaded.header == HEADER


def test_load_empty_state(kv):
    store = load_store(kv)
    assert len(store) == 0
    assert store.next_id == 1


def test_counter_survives_after_orders_removed(kv):
    # orders gone but counter kept: ids are not reused
    kv.set(CURRENT_ID_KEY, "10")
    store = load_store(kv)
    assert store.next_id == 10


def test_corrupt_orders_raise(kv):
    kv.set(ORDERS_KEY, "{not json")
    with pytest.raises(PersistenceError):
        load_store(kv)


def test_orders_must_be_array(kv):
    kv.set(ORDERS_KEY, json.dumps({"id": 1}))
    with pytest.raises(PersistenceError):
        load_store(kv)


def test_corrupt_counter_raises(kv):
    kv.set(CURRENT_ID_KEY, "abc")
    with pytest.raises(PersistenceError):
        load_store(kv)


def test_undecodable_orders_raise(kv):
    kv.directory.mkdir(parents=True)
    (kv.directory / f"{ORDERS_KEY}.json").write_bytes(b"\xff\xfe[")
    with pytest.raises(PersistenceError, match="unreadable"):
        load_store(kv)


def test_unreadable_key_path_raises(kv):
    # a directory where the counter file should be
    (kv.directory / f"{CURRENT_ID_KEY}.json").mkdir(parents=True)
    with pytest.raises(PersistenceError):
        load_store(kv)


def test_remove_store(kv):
    store = OrderStore()
    store.import_batch([["01/01/2024", "Alice"]], HEADER)
    save_store(store, kv)
    remove_store(kv)
    assert kv.get(ORDERS_KEY) is None
    assert kv.get(CURRENT_ID_KEY) is None
