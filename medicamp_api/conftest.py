import copy
import os
import re
import types
from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-token-secret")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")


# ---------------------------------------------------------------------------
# In-memory stand-ins for the handful of pymongo calls the stores make
# ---------------------------------------------------------------------------

def _matches(doc, filt):
    for key, cond in (filt or {}).items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
            continue
        value = doc.get(key)
        if isinstance(cond, dict) and any(k.startswith("$") for k in cond):
            for op, arg in cond.items():
                if op == "$gt" and not (value is not None and value > arg):
                    return False
                if op == "$in" and value not in arg:
                    return False
                if op == "$regex":
                    flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
                    if not isinstance(value, str) or not re.search(arg, value, flags):
                        return False
        elif value != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=None):
        keys = key if isinstance(key, list) else [(key, direction if direction is not None else 1)]
        for field, order in reversed(keys):
            self.docs.sort(key=lambda d: (d.get(field) is None, d.get(field)), reverse=order < 0)
        return self

    def skip(self, n):
        self.docs = self.docs[n:]
        return self

    def limit(self, n):
        if n:
            self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    def __init__(self, name, unique=()):
        self.name = name
        self.docs = []
        self.unique = list(unique)
        self.fail_on = {}
        self.indexes = []

    def _maybe_fail(self, op):
        exc = self.fail_on.get(op)
        if exc is not None:
            raise exc

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return str(keys)

    def insert_one(self, doc, session=None):
        self._maybe_fail("insert_one")
        doc.setdefault("_id", ObjectId())
        for fields in self.unique:
            key = tuple(doc.get(f) for f in fields)
            if any(tuple(d.get(f) for f in fields) == key for d in self.docs):
                raise DuplicateKeyError(f"duplicate key on {self.name} {fields}")
        self.docs.append(copy.deepcopy(doc))
        return types.SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find_one(self, filt=None, session=None):
        for d in self.docs:
            if _matches(d, filt):
                return copy.deepcopy(d)
        return None

    def find(self, filt=None, session=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, filt)])

    def count_documents(self, filt, session=None):
        return sum(1 for d in self.docs if _matches(d, filt))

    def _apply(self, doc, update):
        for field, value in update.get("$set", {}).items():
            doc[field] = value
        for field, delta in update.get("$inc", {}).items():
            doc[field] = doc.get(field, 0) + delta

    def update_one(self, filt, update, session=None):
        self._maybe_fail("update_one")
        for d in self.docs:
            if _matches(d, filt):
                before = copy.deepcopy(d)
                self._apply(d, update)
                return types.SimpleNamespace(matched_count=1, modified_count=int(before != d))
        return types.SimpleNamespace(matched_count=0, modified_count=0)

    def update_many(self, filt, update, session=None):
        self._maybe_fail("update_many")
        matched = modified = 0
        for d in self.docs:
            if _matches(d, filt):
                before = copy.deepcopy(d)
                self._apply(d, update)
                matched += 1
                modified += int(before != d)
        return types.SimpleNamespace(matched_count=matched, modified_count=modified)

    def delete_one(self, filt, session=None):
        for i, d in enumerate(self.docs):
            if _matches(d, filt):
                del self.docs[i]
                return types.SimpleNamespace(deleted_count=1)
        return types.SimpleNamespace(deleted_count=0)


class FakeSession:
    def __init__(self, client):
        self.client = client

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def with_transaction(self, callback):
        self.client.transactions += 1
        return callback(self)


class FakeClient:
    def __init__(self):
        self.transactions = 0

    def start_session(self):
        return FakeSession(self)


class FakeDatabase:
    UNIQUE = {
        "users": [("email",)],
        "registered_camps": [("participantEmail", "campId")],
        "payments": [("registrationId",)],
    }

    def __init__(self):
        self.client = FakeClient()
        self._collections = {}

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self.UNIQUE.get(name, ()))
        return self._collections[name]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]


class FakeGateway:
    currency = "usd"

    def __init__(self):
        self.amounts = []

    def create_payment_intent(self, amount):
        self.amounts.append(amount)
        return f"pi_test_{amount}_secret"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def seed_camp(fake_db):
    def _seed(**fields):
        camp = {
            "campName": "Free Eye Checkup",
            "campFees": 50,
            "dateTime": "2025-01-10T09:00",
            "location": "Dhaka",
            "healthcareProfessional": "Dr. Rahman",
            "description": "Vision screening",
            "participantCount": 0,
            "email": "organizer@x.com",
        }
        camp.update(fields)
        return fake_db.camps.insert_one(camp).inserted_id
    return _seed


@pytest.fixture
def seed_user(fake_db):
    def _seed(email, role="participant"):
        fake_db.users.insert_one({"email": email, "name": email.split("@")[0], "role": role,
                                  "createdAt": datetime.now(timezone.utc)})
    return _seed


@pytest.fixture
def api_client(fake_db, fake_gateway):
    """Build a TestClient over the given routers, authenticated as `email` (or anonymous)"""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from .database.db import get_database
    from .errors import register_exception_handlers
    from .middlewares.jwt_auth import get_current_user
    from .src.auth.schema import JWTClaims
    from .src.reconciliation.controller import get_payment_gateway

    def _build(*routers, email=None):
        app = FastAPI()
        register_exception_handlers(app)
        for router in routers:
            app.include_router(router)
        app.dependency_overrides[get_database] = lambda: fake_db
        app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
        if email is not None:
            now = datetime.now(timezone.utc)
            app.dependency_overrides[get_current_user] = lambda: JWTClaims(email=email, exp=now, iat=now)
        return TestClient(app, raise_server_exceptions=False)

    return _build
