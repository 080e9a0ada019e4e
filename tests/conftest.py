# tests/conftest.py
# -*- coding: utf-8 -*-
"""Defines fixtures available to all tests."""
import fakeredis
import pytest
from flask_jwt_extended import create_access_token

from knowledge_manager.app import create_app
from knowledge_manager.databases.service import create_database
from knowledge_manager.extensions import db as _db
from knowledge_manager.post.service import create_post
from knowledge_manager.user.models import User


@pytest.fixture
def app():
    """Create a Flask app instance for testing."""
    app = create_app(test_config={
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough",
        "BCRYPT_LOG_ROUNDS": 4,
    })
    app.extensions["redis"] = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    """Provide the database instance."""
    return _db


@pytest.fixture
def redis_client(app):
    return app.extensions["redis"]


@pytest.fixture
def client(app):
    """Provide Flask test client."""
    return app.test_client()


@pytest.fixture
def users_two(db):
    u1 = User(name="alice", email="alice@example.com", password="password123")
    u2 = User(name="bob", email="bob@example.com", password="password123")
    db.session.add_all([u1, u2])
    db.session.commit()
    return u1, u2


@pytest.fixture
def auth_header_app():
    def _make(user_id: int):
        token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def seed_notes(db, users_two):
    """Alice owns "Notes" with one post tagged "foo bar"; Bob has no access."""
    u1, u2 = users_two
    database_id = create_database(u1.id, "Notes")
    post_id = create_post("Hello", "World", database_id, u1.id, tags=["foo", "bar"])
    return {"u1": u1, "u2": u2, "database_id": database_id, "post_id": post_id}
