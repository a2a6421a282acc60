# tests/test_storage.py
import pytest

from smartprep.db import get_connection
from smartprep.models import DocumentFile
from smartprep.storage import (
    FILES_KEY, MemoryStorage, SqliteStorage, load_records, prepend_record,
)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_db):
    if request.param == "memory":
        return MemoryStorage()
    return SqliteStorage(tmp_db)


def _doc(doc_id: str) -> DocumentFile:
    return DocumentFile(id=doc_id, name=f"{doc_id}.txt", size=3, type="text/plain",
                        upload_date="2024-01-01T00:00:00")


def test_load_unset_slot_returns_default(any_store):
    assert any_store.load("missing") is None
    assert any_store.load("missing", []) == []


def test_save_then_load(any_store):
    any_store.save("slot", {"a": [1, 2, 3]})
    assert any_store.load("slot") == {"a": [1, 2, 3]}


def test_save_overwrites_whole_value(any_store):
    any_store.save("slot", [1, 2])
    any_store.save("slot", [3])
    assert any_store.load("slot") == [3]


def test_remove_clears_slot(any_store):
    any_store.save("slot", "value")
    any_store.remove("slot")
    assert any_store.load("slot") is None


def test_remove_missing_slot_is_noop(any_store):
    any_store.remove("never-set")


def test_malformed_json_fails_closed_memory():
    store = MemoryStorage()
    store._write("slot", "{not json")
    assert store.load("slot", []) == []


def test_malformed_json_fails_closed_sqlite(tmp_db):
    store = SqliteStorage(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute("INSERT INTO kv_store (key, value) VALUES (?, ?)", (FILES_KEY, "[{broken"))
    conn.commit()
    conn.close()
    assert store.load(FILES_KEY) is None


def test_sqlite_storage_persists_across_instances(tmp_db):
    SqliteStorage(tmp_db).save("slot", {"kept": True})
    assert SqliteStorage(tmp_db).load("slot") == {"kept": True}


def test_load_records_non_list_is_empty(store):
    store.save(FILES_KEY, {"id": "x"})
    assert load_records(store, FILES_KEY, DocumentFile.from_dict) == []


def test_load_records_skips_unreadable_entries(store):
    store.save(FILES_KEY, [_doc("a").to_dict(), {"id": "broken"}, _doc("b").to_dict()])
    records = load_records(store, FILES_KEY, DocumentFile.from_dict)
    assert [r.id for r in records] == ["a", "b"]


def test_prepend_record_puts_newest_first(store):
    prepend_record(store, FILES_KEY, _doc("first"), DocumentFile.from_dict)
    prepend_record(store, FILES_KEY, _doc("second"), DocumentFile.from_dict)
    records = load_records(store, FILES_KEY, DocumentFile.from_dict)
    assert [r.id for r in records] == ["second", "first"]
