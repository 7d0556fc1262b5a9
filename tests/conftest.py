"""Shared pytest fixtures.

Services run against an in-memory stand-in for the async pymongo client: just the
collection calls the services make, plus unique indexes and injectable failures.
"""

import base64
import copy
from collections.abc import AsyncIterator, Iterator
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from deltaiota.app import App
from deltaiota.config import Config
from deltaiota.core.core import Core
from deltaiota.core.modules.session.models import Session
from deltaiota.core.modules.user.models import User, UserInput
from deltaiota.core.modules.user.passwords import hash_password
from deltaiota.utils import now
from deltaiota.web.server import create_fastapi_app

TEST_DATABASE_URL = "mongodb://localhost:27017/deltaiota_test"
TEST_BCRYPT_ROUNDS = 4


def _matches(doc: dict[str, Any], query: dict[str, Any] | None) -> bool:
    return all(doc.get(key) == value for key, value in (query or {}).items())


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda doc: doc[key], reverse=direction == -1)
        return self

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            yield doc

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()


class FakeCollection:
    """In-memory collection.

    ``calls`` records every operation by name; ``failures`` maps an operation name
    to the exception it should raise instead of running.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.unique_keys: set[str] = set()
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise self.failures[operation]

    def _check_unique(self, doc: dict[str, Any]) -> None:
        for key in self.unique_keys:
            for other in self.docs:
                if other["_id"] != doc["_id"] and other.get(key) == doc.get(key):
                    raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {key}_1", 11000)

    def seed(self, doc: dict[str, Any]) -> None:
        """Insert directly, bypassing call recording."""
        self.docs.append(copy.deepcopy(doc))

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False) -> str:
        self._record("create_index")
        if unique and len(keys) == 1:
            self.unique_keys.add(keys[0][0])
        return "_".join(f"{key}_{direction}" for key, direction in keys)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        self._record("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        self._record("find")
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query)])

    async def count_documents(self, query: dict[str, Any]) -> int:
        self._record("count_documents")
        return sum(1 for doc in self.docs if _matches(doc, query))

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self._record("insert_one")
        self._check_unique(doc)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        self._record("update_one")
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                updated = {**doc, **copy.deepcopy(update["$set"])}
                self._check_unique(updated)
                self.docs[index] = updated
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self._record("delete_one")
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        self._record("delete_many")
        before = len(self.docs)
        self.docs = [doc for doc in self.docs if not _matches(doc, query)]
        return SimpleNamespace(deleted_count=before - len(self.docs))


class FakeDatabase:
    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def reset_calls(self) -> None:
        for collection in self.collections.values():
            collection.calls.clear()

    @property
    def calls(self) -> list[str]:
        return [f"{name}.{call}" for name, collection in self.collections.items() for call in collection.calls]


class FakeMongoClient:
    def __init__(self) -> None:
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False

    def get_database(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    async def aclose(self) -> None:
        self.closed = True


def basic_auth(username: str, secret: str) -> str:
    """Build an Authorization header value."""
    return "Basic " + base64.b64encode(f"{username}:{secret}".encode()).decode()


def make_user(username: str, password: str, **fields: Any) -> User:
    defaults = {
        "first_name": username.capitalize(),
        "last_name": "Tester",
        "email": f"{username}@example.com",
    }
    return User(username=username, password_hash=hash_password(password, TEST_BCRYPT_ROUNDS), **(defaults | fields))


def make_session(user_id: UUID, key: str, expires_at: datetime) -> Session:
    return Session(user_id=user_id, key=key, expires_at=expires_at)


ALICE_PASSWORD = "correct-password"  # noqa: S105
BOB_PASSWORD = "bob-password"  # noqa: S105


@pytest.fixture
def config():
    """Fast bcrypt and no .env lookup."""
    return Config(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        session_duration=timedelta(days=7),
        root_password="root-password",  # noqa: S106
    )


@pytest.fixture
def mongo_client():
    return FakeMongoClient()


@pytest.fixture
def database(mongo_client):
    return mongo_client.get_database("deltaiota_test")


@pytest.fixture
def users(database):
    return database.get_collection("users")


@pytest.fixture
def sessions(database):
    return database.get_collection("sessions")


@pytest.fixture
def notifications(database):
    return database.get_collection("notifications")


@pytest.fixture
def alice(users):
    """Stored user alice, seeded before startup so no root account is created."""
    user = make_user("alice", ALICE_PASSWORD)
    users.seed(user.to_mongo())
    return user


@pytest.fixture
def bob(users):
    user = make_user("bob", BOB_PASSWORD)
    users.seed(user.to_mongo())
    return user


@pytest.fixture
def alice_session(alice, sessions):
    """Valid key session for alice, expiring in an hour."""
    session = make_session(alice.id, "alice-key", now() + timedelta(hours=1))
    sessions.seed(session.to_mongo())
    return session


@pytest.fixture
def bob_session(bob, sessions):
    session = make_session(bob.id, "bob-key", now() + timedelta(hours=1))
    sessions.seed(session.to_mongo())
    return session


@pytest.fixture
async def core(config, mongo_client):
    """Started Core over the fake client."""
    core = Core(config, mongo_client)
    async with core.lifespan():
        yield core


@pytest.fixture
def api_client(config, mongo_client) -> Iterator[TestClient]:
    """TestClient over the full FastAPI app; the context manager runs startup and shutdown."""
    fastapi_app = create_fastapi_app(App(config, mongo_client), config)
    with TestClient(fastapi_app) as client:
        yield client


@pytest.fixture
def alice_headers(alice_session):
    return {"Authorization": basic_auth("alice", alice_session.key)}


@pytest.fixture
def new_user_input():
    return UserInput(
        username="carol",
        first_name="Carol",
        last_name="Danvers",
        email="carol@example.com",
        phone="555-0100",
        password="carol-password",  # noqa: S106
    )


@pytest.fixture
def auth_header():
    """Factory for Basic Authorization header values."""
    return basic_auth


@pytest.fixture
def user_factory(users):
    """Create and store a user with the given password."""

    def factory(username: str, password: str, **fields: Any) -> User:
        user = make_user(username, password, **fields)
        users.seed(user.to_mongo())
        return user

    return factory


@pytest.fixture
def session_factory(sessions):
    """Create and store a session for a user."""

    def factory(user_id: UUID, key: str, expires_at: datetime) -> Session:
        session = make_session(user_id, key, expires_at)
        sessions.seed(session.to_mongo())
        return session

    return factory
