"""
Shared fixtures.

The API is exercised against in-memory stand-ins for the MongoDB
collections and the GridFS avatar bucket, wired in through
FastAPI dependency overrides. The lifespan (and so a real database
connection) never runs because the TestClient is not used as a
context manager.
"""

import copy
import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from gridfs.errors import NoFile
from pymongo.errors import DuplicateKeyError

from kassa.api import deps
from kassa.main import app
from kassa.services.chat_service import ChatService
from kassa.services.product_service import ProductService
from kassa.services.transaction_service import TransactionService
from kassa.services.user_service import UserService


def _get_path(doc, path):
    value = doc
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _matches_value(actual, expected):
    if isinstance(expected, dict) and any(key.startswith("$") for key in expected):
        for op, operand in expected.items():
            if op == "$ne" and actual == operand:
                return False
            if op == "$gte" and (actual is None or actual < operand):
                return False
            if op == "$lt" and (actual is None or actual >= operand):
                return False
        return True
    if isinstance(actual, list) and not isinstance(expected, list):
        return expected in actual
    return actual == expected


def _matches(doc, query):
    return all(_matches_value(_get_path(doc, key), expected) for key, expected in query.items())


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if projection:
        for key, flag in projection.items():
            if flag == 0:
                doc.pop(key, None)
    return doc


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        present = [doc for doc in self._docs if _get_path(doc, key) is not None]
        missing = [doc for doc in self._docs if _get_path(doc, key) is None]
        present.sort(key=lambda doc: _get_path(doc, key), reverse=direction < 0)
        self._docs = present + missing if direction < 0 else missing + present
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration

    async def to_list(self, length=None):
        return list(self._docs)


class FakeCollection:
    """Just enough of AsyncIOMotorCollection for the services."""

    def __init__(self, name):
        self.name = name
        self.docs = {}

    def find(self, query=None, projection=None):
        found = [_project(doc, projection) for doc in self.docs.values() if _matches(doc, query or {})]
        return FakeCursor(found)

    async def find_one(self, query, projection=None):
        for doc in self.docs.values():
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def insert_one(self, doc):
        if doc["_id"] in self.docs:
            raise DuplicateKeyError(f"duplicate _id {doc['_id']}")
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def _apply(self, doc, update, inserting=False):
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        if inserting:
            for key, value in update.get("$setOnInsert", {}).items():
                doc[key] = copy.deepcopy(value)

    async def update_one(self, query, update, upsert=False):
        for doc in self.docs.values():
            if _matches(doc, query):
                self._apply(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)
        if upsert:
            doc = {key: value for key, value in query.items() if not isinstance(value, dict)}
            self._apply(doc, update, inserting=True)
            self.docs[doc["_id"]] = doc
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def find_one_and_update(self, query, update, return_document=False):
        for doc in self.docs.values():
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                self._apply(doc, update)
                return copy.deepcopy(doc) if return_document else before
        return None

    async def delete_one(self, query):
        for key, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        keys = [key for key, doc in self.docs.items() if _matches(doc, query)]
        for key in keys:
            del self.docs[key]
        return SimpleNamespace(deleted_count=len(keys))


class FakeDownloadStream:
    def __init__(self, data, metadata):
        self._data = data
        self.metadata = metadata

    async def read(self):
        return self._data


class FakeBucket:
    """In-memory replacement for the GridFS avatar bucket."""

    def __init__(self):
        self.files = {}
        self._ids = itertools.count(1)

    async def upload_from_stream(self, filename, data, metadata=None):
        file_id = f"file-{next(self._ids)}"
        self.files[file_id] = (bytes(data), metadata or {})
        return file_id

    async def open_download_stream(self, file_id):
        if file_id not in self.files:
            raise NoFile(file_id)
        data, metadata = self.files[file_id]
        return FakeDownloadStream(data, metadata)

    async def delete(self, file_id):
        if file_id not in self.files:
            raise NoFile(file_id)
        del self.files[file_id]


class FakeDatabase:
    def __init__(self):
        self.collections = {}
        self.avatars = FakeBucket()

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class InMemoryUserService(UserService):
    @property
    def avatars(self):
        return self.db.avatars


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def client(db):
    def product_service():
        return ProductService(db["products"])

    app.dependency_overrides[deps.get_user_service] = lambda: InMemoryUserService(db)
    app.dependency_overrides[deps.get_product_service] = product_service
    app.dependency_overrides[deps.get_transaction_service] = lambda: TransactionService(
        db["transactions"], product_service()
    )
    app.dependency_overrides[deps.get_chat_service] = lambda: ChatService(db)

    yield TestClient(app)

    app.dependency_overrides.clear()


def signup(client, email, password="rahasia123", username=None):
    """Registers and logs in; returns (user profile, auth headers)."""
    payload = {"email": email, "password": password}
    if username:
        payload["username"] = username
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text

    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['access_token']}"}


@pytest.fixture
def cashier(client):
    return signup(client, "kasir@kassa.kilat", username="kasir")


@pytest.fixture
def superadmin(client, db):
    user, headers = signup(client, "admin@kassa.kilat", username="admin")
    db["users"].docs[user["id"]]["role"] = "superadmin"
    return user, headers
