import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app


@pytest.fixture
def db():
    return mongomock.MongoClient()["app-data"]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a bare profile document and return its user_id."""
    def _make(user_id, matches=(), **fields):
        doc = {
            "user_id": user_id,
            "email": f"{user_id}@example.com",
            "hashed_password": "x",
            "matches": [{"user_id": m} for m in matches],
        }
        doc.update(fields)
        db["users"].insert_one(doc)
        return user_id
    return _make
