"""
Client-local storage backends
"""

import copy
import secrets
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from flask import session
from google.cloud.firestore_v1 import DELETE_FIELD

from academy import create_app
from academy.errors import StorageFullError
from academy.persistence import MemoryStorage, SessionStorage, FirestoreStorage, get_storage
from config import TestingConfig

from conftest import STUDENT_PAYLOAD, login_as


def test_memory_storage_copies_values():
    storage = MemoryStorage()
    items = [{"id": "a"}]
    storage.set("items", items)
    items.append({"id": "b"})

    assert storage.get("items") == [{"id": "a"}]
    storage.get("items").append({"id": "c"})
    assert storage.get("items") == [{"id": "a"}]

    storage.remove("items")
    storage.remove("items")
    assert storage.get("items", []) == []


def test_session_storage_uses_cookie_session(app):
    with app.test_request_context("/"):
        from flask import session
        storage = SessionStorage()
        storage.set("token", "t")
        assert session["token"] == "t"
        assert storage.get("token") == "t"
        storage.remove("token")
        assert "token" not in session


def test_memory_backend_is_per_client(app):
    first, second = app.test_client(), app.test_client()
    for client in (first, second):
        client.get("/")
    with first.session_transaction() as sess:
        first_id = sess["client_id"]
    with second.session_transaction() as sess:
        second_id = sess["client_id"]

    assert first_id != second_id
    assert set(app.extensions["academy_memory_storage"]) == {first_id, second_id}


def test_unknown_backend(app):
    app.config["STORAGE_BACKEND"] = "floppy"
    with app.test_request_context("/"):
        with pytest.raises(ValueError):
            get_storage()


@pytest.fixture
def firestore_db():
    db = MagicMock()
    return db


def test_firestore_storage_reads_document_field(firestore_db):
    doc = firestore_db.collection.return_value.document.return_value.get.return_value
    doc.exists = True
    doc.to_dict.return_value = {"token": "t"}

    storage = FirestoreStorage("client-1", db=firestore_db)

    assert storage.get("token") == "t"
    assert storage.get("user") is None
    firestore_db.collection.assert_called_with("client_state")
    firestore_db.collection.return_value.document.assert_called_with("client-1")


def test_firestore_storage_missing_document(firestore_db):
    firestore_db.collection.return_value.document.return_value.get.return_value.exists = False
    assert FirestoreStorage("c", db=firestore_db).get("token", "none") == "none"


def test_firestore_storage_merges_on_set(firestore_db):
    FirestoreStorage("c", db=firestore_db).set("bookmarkedItems", [{"id": "a"}])

    doc_ref = firestore_db.collection.return_value.document.return_value
    data = doc_ref.set.call_args.args[0]
    assert data["bookmarkedItems"] == [{"id": "a"}]
    assert "updated_at" in data
    assert doc_ref.set.call_args.kwargs == {"merge": True}


# ============================================
# Cookie size
# ============================================

def bookmark(n):
    # random hex does not compress away inside the signed cookie
    return {"id": n, "title": f"Course {n}", "author": "Ada", "type": "course",
            "description": secrets.token_hex(75)}


def test_session_storage_refuses_oversized_write(app):
    with app.test_request_context("/"):
        storage = SessionStorage()
        storage.set("token", "t")

        with pytest.raises(StorageFullError):
            storage.set("token", secrets.token_hex(4096))
        with pytest.raises(StorageFullError):
            storage.set("bookmarkedItems", [secrets.token_hex(4096)])

        assert session["token"] == "t"
        assert "bookmarkedItems" not in session


def test_cookie_backend_reports_full_instead_of_dropping_session(app, client, identity_client):
    app.config["STORAGE_BACKEND"] = "session"
    login_as(client, identity_client, STUDENT_PAYLOAD)

    statuses = []
    for n in range(100):
        resp = client.post("/api/bookmarks", json=bookmark(n))
        statuses.append(resp.status_code)
        if resp.status_code != 201:
            break

    assert statuses[-1] == 507
    assert set(statuses[:-1]) == {201}
    assert "full" in resp.get_json()["error"]
    assert len(client.get_cookie("session").value) < 4093
    assert client.get("/auth/me").get_json()["status"] == "authenticated"
    assert len(client.get("/api/bookmarks").get_json()["items"]) == len(statuses) - 1


# ============================================
# Firestore-backed client state
# ============================================

class FakeDocument:
    def __init__(self, docs, doc_id):
        self.docs = docs
        self.doc_id = doc_id

    def get(self):
        data = self.docs.get(self.doc_id)
        return SimpleNamespace(exists=data is not None, to_dict=lambda: copy.deepcopy(data))

    def set(self, data, merge=False):
        current = self.docs.get(self.doc_id, {}) if merge else {}
        self.docs[self.doc_id] = {**current, **copy.deepcopy(data)}

    def update(self, data):
        current = self.docs[self.doc_id]
        for key, value in data.items():
            if value is DELETE_FIELD:
                current.pop(key, None)
            else:
                current[key] = copy.deepcopy(value)


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        docs = self.collections.setdefault(name, {})
        return SimpleNamespace(document=lambda doc_id: FakeDocument(docs, doc_id))


class FirestoreTestingConfig(TestingConfig):
    STORAGE_BACKEND = "firestore"


@pytest.fixture
def fake_firestore(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr("academy.firebase_init.init_firebase", lambda *args, **kwargs: None)
    monkeypatch.setattr("academy.persistence.get_db", lambda: db)
    return db


@pytest.fixture
def firestore_app(fake_firestore, identity_client):
    app = create_app(FirestoreTestingConfig)
    app.extensions["academy_identity_client"] = identity_client
    return app


def test_firestore_backend_keeps_only_client_id_in_cookie(firestore_app, fake_firestore, identity_client):
    client = firestore_app.test_client()
    login_as(client, identity_client, STUDENT_PAYLOAD)

    for n in range(30):
        assert client.post("/api/bookmarks", json=bookmark(n)).status_code == 201

    assert len(client.get("/api/bookmarks").get_json()["items"]) == 30
    assert client.get("/auth/me").get_json()["status"] == "authenticated"
    with client.session_transaction() as sess:
        assert set(sess) == {"client_id"}
        client_id = sess["client_id"]
    stored = fake_firestore.collections["client_state"][client_id]
    assert len(stored["bookmarkedItems"]) == 30
    assert stored["token"] == "token-123"


def test_firestore_logout_removes_fields(firestore_app, fake_firestore, identity_client):
    client = firestore_app.test_client()
    login_as(client, identity_client, STUDENT_PAYLOAD)
    client.post("/auth/logout")

    (state,) = fake_firestore.collections["client_state"].values()
    assert "token" not in state
    assert "user" not in state
