from __future__ import annotations

import json
import threading
from datetime import datetime, timedelta, timezone

import pytest

from docstore import (
    ConcurrentUpdateError,
    DocumentStore,
    DuplicateRecordError,
    ImageOpenError,
    ImageSerializationError,
    StoredRecord,
    ToyRecord,
    collection_name,
    filter_equals,
)


class Note(StoredRecord):
    text: str
    pinned: bool = False


def _stamp_is_recent(raw: str) -> bool:
    stamp = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return abs(datetime.now(timezone.utc) - stamp) < timedelta(seconds=30)


def test_toys_scenario(store):
    teddy = store.create("toys", {"name": "Teddy"})
    assert teddy["id"] == "1"
    assert teddy["name"] == "Teddy"
    assert _stamp_is_recent(teddy["created_at"])
    assert teddy["updated_at"] == teddy["created_at"]

    car = store.create("toys", {"name": "Car"})
    assert car["id"] == "2"

    toys = store.fetch_collection("toys")
    assert [t["name"] for t in toys] == ["Teddy", "Car"]
    assert filter_equals(toys, "name", "Car") == [car]


def test_create_mutates_callers_record_in_place(store):
    record = {"name": "Kite"}
    returned = store.create("toys", record)
    assert returned is record
    assert record["id"] == "1"


def test_identities_are_sequential(store):
    ids = [store.create("notes", {"n": i})["id"] for i in range(5)]
    assert ids == ["1", "2", "3", "4", "5"]


def test_counters_are_per_collection(store):
    store.create("toys", {"name": "Teddy"})
    store.create("toys", {"name": "Car"})
    assert store.create("cars", {"model": "T"})["id"] == "1"


def test_fetch_unknown_collection_is_empty_and_not_persisted(store, db_path):
    before = db_path.read_bytes()
    assert store.fetch_collection("nothing-here") == []
    assert db_path.read_bytes() == before


def test_fetch_is_idempotent(store):
    store.create("toys", {"name": "Teddy"})
    assert store.fetch_collection("toys") == store.fetch_collection("toys")


def test_typed_record_round_trip(store):
    note = Note(text="buy milk", pinned=True)
    created = store.create(Note, note)
    assert created is note
    assert note.id == "1"
    assert note.created_at is not None and note.created_at == note.updated_at

    [raw] = store.fetch_collection(Note)
    decoded = Note.model_validate(raw)
    assert decoded.text == "buy milk"
    assert decoded.pinned is True
    assert decoded.id == "1"
    assert decoded.created_at == note.created_at


def test_replace_keeps_identity_and_drops_omitted(store):
    a = store.create("toys", {"name": "A"})
    store.create("toys", {"name": "B"})

    store.replace_collection("toys", [a])

    [only] = store.fetch_collection("toys")
    assert only["id"] == "1"
    assert only["name"] == "A"
    assert only["created_at"] == a["created_at"]


def test_replace_refreshes_updated_at(store):
    a = store.create("toys", {"name": "A"})
    a["updated_at"] = "2000-01-01T00:00:00+00:00"
    store.replace_collection("toys", [a])
    [only] = store.fetch_collection("toys")
    assert _stamp_is_recent(only["updated_at"])


def test_counter_is_not_reused_after_delete(store):
    store.create("toys", {"name": "A"})
    store.create("toys", {"name": "B"})
    store.replace_collection("toys", [])
    assert store.fetch_collection("toys") == []
    assert store.create("toys", {"name": "C"})["id"] == "3"


def test_replace_with_stale_counter_is_rejected(store, db_path):
    store.create("toys", {"name": "A"})
    snap = store.snapshot("toys")
    assert snap.counter == 1

    store.create("toys", {"name": "B"})
    before = db_path.read_bytes()

    with pytest.raises(ConcurrentUpdateError) as info:
        store.replace_collection("toys", snap.records, expected_counter=snap.counter)
    assert (info.value.expected, info.value.actual) == (1, 2)
    assert db_path.read_bytes() == before


def test_replace_with_current_counter_succeeds(store):
    store.create("toys", {"name": "A"})
    snap = store.snapshot("toys")
    store.replace_collection("toys", [], expected_counter=snap.counter)
    assert store.fetch_collection("toys") == []


def test_corrupt_file_is_healed_on_create(db_path):
    db_path.write_text("{{{ definitely not json", encoding="utf-8")
    store = DocumentStore(db_path)

    assert store.create("toys", {"name": "Teddy"})["id"] == "1"
    doc = json.loads(db_path.read_text(encoding="utf-8"))
    assert doc["data_indexes"] == {"toys": 1}


@pytest.mark.parametrize("content", [b"\x80\x81garbage", b"[" * 200000], ids=["bad-utf8", "too-deep"])
def test_undecodable_file_is_healed_on_create(db_path, content):
    db_path.write_bytes(content)
    store = DocumentStore(db_path)

    assert store.create("toys", {"name": "Teddy"})["id"] == "1"
    assert [t["name"] for t in store.fetch_collection("toys")] == ["Teddy"]


def test_missing_file_without_create_is_open_error(db_path):
    store = DocumentStore(db_path, create_if_missing=False)
    with pytest.raises(ImageOpenError):
        store.fetch_collection("toys")
    with pytest.raises(ImageOpenError):
        store.create("toys", {"name": "Teddy"})
    assert not db_path.exists()


def test_serialization_failure_leaves_disk_unchanged(store, db_path):
    store.create("toys", {"name": "Teddy"})
    before = db_path.read_bytes()

    with pytest.raises(ImageSerializationError):
        store.create("toys", {"name": "Ghost", "blob": object()})

    assert db_path.read_bytes() == before
    assert len(store.fetch_collection("toys")) == 1


def test_meta_total_tracks_record_count(store, db_path):
    store.create("toys", {"name": "A"})
    store.create("toys", {"name": "B"})
    store.create("cars", {"model": "T"})
    assert json.loads(db_path.read_text(encoding="utf-8"))["meta"]["total"] == 3

    store.replace_collection("toys", [])
    assert json.loads(db_path.read_text(encoding="utf-8"))["meta"]["total"] == 1


def test_concurrent_creates_get_distinct_identities(store):
    ids: list[str] = []
    guard = threading.Lock()

    def worker(n: int) -> None:
        for i in range(5):
            rec = store.create("toys", {"worker": n, "i": i})
            with guard:
                ids.append(rec["id"])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ids, key=int) == [str(i) for i in range(1, 41)]
    assert len(store.fetch_collection("toys")) == 40


def test_store_instances_share_the_file(db_path):
    first = DocumentStore(db_path)
    second = DocumentStore(db_path)
    first.create("toys", {"name": "Teddy"})
    assert second.create("toys", {"name": "Car"})["id"] == "2"


def test_kind_and_instance_resolve_to_same_collection(store):
    assert collection_name(ToyRecord) == "toys"
    assert collection_name(ToyRecord(iid="x")) == "toys"
    assert collection_name(Note) == collection_name(Note(text="x")) == f"{__name__}.Note"

    store.create(ToyRecord(iid="a"), ToyRecord(iid="a"))
    assert len(store.fetch_collection(ToyRecord)) == 1
    assert len(store.fetch_collection("toys")) == 1


def test_blank_collection_name_is_rejected(store):
    with pytest.raises(ValueError):
        store.create("  ", {"name": "x"})


def test_typed_collection(store):
    notes = store.collection(Note)
    notes.create(Note(text="one"))
    notes.create(Note(text="two", pinned=True))

    assert [n.text for n in notes.all()] == ["one", "two"]
    assert [n.text for n in notes.where("pinned", True)] == ["two"]
    assert [n.id for n in notes.find(lambda n: n.text, "one")] == ["1"]

    snap = notes.snapshot()
    assert snap.counter == 2
    notes.replace([n for n in snap.records if n.pinned], expected_counter=snap.counter)
    assert [n.id for n in notes.all()] == ["2"]


def test_unique_create_rejects_existing_value(store, db_path):
    store.create("toys", {"iid": "t-1", "name": "Teddy"})
    before = db_path.read_bytes()

    record = {"iid": "t-1", "name": "Again"}
    with pytest.raises(DuplicateRecordError) as info:
        store.create("toys", record, unique_field="iid")

    assert (info.value.collection, info.value.field, info.value.value) == ("toys", "iid", "t-1")
    assert "id" not in record
    assert db_path.read_bytes() == before
    assert store.create("toys", {"iid": "t-2"}, unique_field="iid")["id"] == "2"


def test_unique_create_is_type_strict(store):
    store.create("toys", {"iid": 1})
    assert store.create("toys", {"iid": "1"}, unique_field="iid")["id"] == "2"
