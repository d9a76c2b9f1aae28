"""Shared fixtures for the users API tests."""

import asyncio
import copy
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import jwt
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.config import settings
from app.main import app
from app.models.user import UserRepository
from app.routes.users import get_user_service
from app.services.user_service import UserService
from app.utils.hash_utils import hash_password
from app.utils.upload_utils import UploadConfig

TEST_SALT_ROUNDS = 4


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """In-memory stand-in for a Motor collection.

    Enforces unique indexes the way the server does and yields to the event
    loop on every call so concurrent coroutines interleave.
    """

    def __init__(self):
        self.docs = {}
        self.unique_fields = set()
        self.calls = []
        self.fail_with = None

    def seed(self, doc):
        doc = {"_id": ObjectId(), **doc}
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return doc

    async def _enter(self, name):
        self.calls.append(name)
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def _check_unique(self, doc):
        for field in self.unique_fields:
            for other in self.docs.values():
                if other["_id"] != doc["_id"] and field in doc and other.get(field) == doc[field]:
                    raise DuplicateKeyError(f"E11000 duplicate key error dup key: {{ {field}: {doc[field]!r} }}", code=11000)

    async def create_index(self, key, unique=False):
        await self._enter("create_index")
        if unique:
            self.unique_fields.add(key)
        return f"{key}_1"

    async def count_documents(self, query):
        await self._enter("count_documents")
        return sum(1 for d in self.docs.values() if self._matches(d, query))

    def find(self, query):
        self.calls.append("find")
        return FakeCursor([copy.deepcopy(d) for d in self.docs.values() if self._matches(d, query)])

    async def find_one(self, query):
        await self._enter("find_one")
        for doc in self.docs.values():
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc):
        await self._enter("insert_one")
        doc.setdefault("_id", ObjectId())
        self._check_unique(doc)
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return FakeInsertResult(doc["_id"])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        await self._enter("find_one_and_update")
        for doc in self.docs.values():
            if self._matches(doc, query):
                updated = copy.deepcopy(doc)
                updated.update(update.get("$set", {}))
                for key, step in update.get("$inc", {}).items():
                    updated[key] = updated.get(key, 0) + step
                self._check_unique(updated)
                self.docs[doc["_id"]] = updated
                return copy.deepcopy(updated if return_document == ReturnDocument.AFTER else doc)
        return None


def make_token(user_id, role, expires_in=timedelta(hours=1)):
    claims = {"_id": str(user_id), "role": role, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers(user_id, role):
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def collection():
    coll = FakeCollection()
    coll.unique_fields.add("email")
    return coll


@pytest.fixture
def repository(collection):
    return UserRepository(collection)


@pytest.fixture
def upload_config(tmp_path):
    return UploadConfig(server_url="http://testserver", public_dir=str(tmp_path / "public"))


@pytest.fixture
def service(repository, upload_config):
    return UserService(repository, upload_config, salt_rounds=TEST_SALT_ROUNDS)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_user_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _seed_user(collection, email, role):
    return collection.seed({
        "firstname": "Test",
        "lastname": role.title(),
        "email": email,
        "phone": None,
        "address": None,
        "avatar": None,
        "passwordHash": hash_password("secret", TEST_SALT_ROUNDS),
        "role": role,
        "status": "active",
        "version": 0,
    })


@pytest.fixture
def admin_user(collection):
    return _seed_user(collection, "admin@example.com", "admin")


@pytest.fixture
def plain_user(collection):
    return _seed_user(collection, "user@example.com", "user")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user["_id"], "admin")


@pytest.fixture
def user_headers(plain_user):
    return auth_headers(plain_user["_id"], "user")


@pytest.fixture
def store_failure():
    return PyMongoError("connection reset")


@pytest.fixture
def headers_for():
    return auth_headers
