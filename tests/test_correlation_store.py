import sqlite3
import threading

import pytest

from issuebridge.domain.errors import DuplicateCorrelationError, StoreError
from issuebridge.infrastructure.sqlite import SQLiteCorrelationStore


def test_round_trip(store):
    store.put("msg-1", 42)
    assert store.get("msg-1") == 42
    assert store.get("unknown") is None


def test_duplicate_put_keeps_first_value(store):
    store.put("msg-1", 42)
    store.put("msg-2", 43)

    with pytest.raises(DuplicateCorrelationError) as exc:
        store.put("msg-1", 99)

    assert exc.value.existing == 42
    assert store.get("msg-1") == 42
    assert store.get("msg-2") == 43
    assert len(store.list_all()) == 2


def test_empty_key_rejected(store):
    with pytest.raises(ValueError):
        store.put("", 1)
    assert store.list_all() == []


def test_survives_reopen(tmp_path):
    path = tmp_path / "kv" / "correlations.db"
    first = SQLiteCorrelationStore(path)
    first.put("<m-1@mg.example.org>", 7)
    first.close()

    second = SQLiteCorrelationStore(path)
    assert second.get("<m-1@mg.example.org>") == 7
    assert [(e.message_id, e.issue_number) for e in second.list_all()] == [
        ("<m-1@mg.example.org>", 7)
    ]


def test_list_all_and_count(store):
    store.put("a", 1)
    store.put("b", 2)
    entries = store.list_all()
    assert {(e.message_id, e.issue_number) for e in entries} == {("a", 1), ("b", 2)}
    assert all(e.created_at for e in entries)
    assert store.count() == 2


def test_verify_reports_healthy_store(store):
    assert store.verify() is True


def test_concurrent_writers_and_readers(store):
    errors = []
    seen = []

    def writer(i):
        try:
            store.put(f"msg-{i}", i)
        except Exception as e:  # pragma: no cover
            errors.append(e)

    def reader(i):
        value = store.get(f"msg-{i}")
        # Either not yet written or the full value, never anything else
        seen.append(value in (None, i))

    threads = []
    for i in range(20):
        threads.append(threading.Thread(target=writer, args=(i,)))
        threads.append(threading.Thread(target=reader, args=(i,)))
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert all(seen)
    assert store.count() == 20


def test_concurrent_duplicate_puts_record_once(store):
    outcomes = []

    def put(value):
        try:
            store.put("same", value)
            outcomes.append("ok")
        except DuplicateCorrelationError:
            outcomes.append("dup")

    threads = [threading.Thread(target=put, args=(v,)) for v in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == 9
    assert store.count() == 1


def test_write_failure_is_store_error(store, monkeypatch):
    def broken_connect(*_a, **_k):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(sqlite3, "connect", broken_connect)
    with pytest.raises(StoreError):
        store.put("msg-1", 1)
    with pytest.raises(StoreError):
        store.get("msg-1")
