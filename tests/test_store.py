from datetime import datetime, timezone

import pytest
from bson import ObjectId

from bookmyticket.db.memory import MemoryDocumentStore
from bookmyticket.db.mongo import build_mongo_filter, id_filter
from bookmyticket.db.store import MOVIES, SERVER_TIMESTAMP, DocumentNotFound, Filter

from conftest import SEED, run


def test_unknown_operator_is_rejected():
    with pytest.raises(ValueError):
        Filter("title", "~=", "Dune")


def test_reads_do_not_share_state(store):
    doc = run(store.get(MOVIES, "m1"))
    doc.data["genre"].append("Mutated")
    assert run(store.get(MOVIES, "m1")).data["genre"] == ["Sci-Fi", "Adventure"]
    assert SEED["movies"]["m1"]["genre"] == ["Sci-Fi", "Adventure"]


def test_query_filters_and_ordering(store):
    docs = run(store.query(MOVIES, filters=[Filter("genre", "array-contains", "Sci-Fi")]))
    assert {d.id for d in docs} == {"m1", "m2", "m4"}

    docs = run(store.query(MOVIES, filters=[Filter("ticketPrice", ">=", 10)], order_by="ticketPrice"))
    assert [d.id for d in docs] == ["m2", "m4", "m1"]

    # mismatched types never match
    assert run(store.query(MOVIES, filters=[Filter("ticketPrice", "<", "cheap")])) == []


def test_ordering_skips_documents_without_the_field():
    store = MemoryDocumentStore({"movies": {"a": {"createdAt": 2}, "b": {}, "c": {"createdAt": 1}}})
    docs = run(store.query("movies", order_by="createdAt", descending=True, limit=5))
    assert [d.id for d in docs] == ["a", "c"]


def test_writes(store):
    doc_id = run(store.add(MOVIES, {"title": "New", "createdAt": SERVER_TIMESTAMP}))
    created = run(store.get(MOVIES, doc_id))
    assert created.data["createdAt"].tzinfo is not None

    run(store.update(MOVIES, doc_id, {"title": "Renamed"}))
    assert run(store.get(MOVIES, doc_id)).data["title"] == "Renamed"

    with pytest.raises(DocumentNotFound):
        run(store.update(MOVIES, "missing", {"title": "x"}))

    run(store.delete(MOVIES, doc_id))
    run(store.delete(MOVIES, doc_id))
    assert run(store.get(MOVIES, doc_id)) is None


def test_document_id_wins_over_stored_id(store):
    run(store.set(MOVIES, "m9", {"id": "other", "title": "X"}))
    assert run(store.get(MOVIES, "m9")).to_dict()["id"] == "m9"


def test_mongo_filter_translation():
    query = build_mongo_filter(
        [
            Filter("userId", "==", "u1"),
            Filter("genre", "array-contains-any", ("Drama", "Crime")),
            Filter("status", "!=", "cancelled"),
        ],
        order_by="createdAt",
    )
    assert query == {
        "userId": {"$eq": "u1"},
        "genre": {"$in": ["Drama", "Crime"]},
        "status": {"$ne": "cancelled", "$exists": True},
        "createdAt": {"$exists": True},
    }


def test_ordering_tolerates_mixed_timestamp_forms():
    store = MemoryDocumentStore(
        {
            "bookings": {
                "aware": {"createdAt": datetime(2025, 3, 2, tzinfo=timezone.utc)},
                "naive": {"createdAt": datetime(2025, 3, 3)},
                "text": {"createdAt": "2025-03-01"},
            }
        }
    )
    docs = run(store.query("bookings", order_by="createdAt", descending=True))
    assert [d.id for d in docs] == ["naive", "aware", "text"]


def test_id_filter_matches_object_ids():
    oid = ObjectId()
    assert id_filter(str(oid)) == {"_id": {"$in": [str(oid), oid]}}
    assert id_filter("m1") == {"_id": "m1"}
    assert id_filter("0123456789abcdef0123456789abcdef") == {"_id": "0123456789abcdef0123456789abcdef"}
