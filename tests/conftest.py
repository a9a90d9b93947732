"""Shared fixtures: an in-memory store per test and an app bound to it."""

import pytest
from fastapi.testclient import TestClient

from taskboard.database import Database
from taskboard.main import create_app
from taskboard.models import User
from taskboard.security import get_password_hash

from .helpers import PASSWORD


@pytest.fixture()
def database():
    database = Database("sqlite://")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture()
def session(database):
    with database.session() as session:
        yield session


@pytest.fixture()
def make_user(database):
    """Persist a user through a short-lived session and return it."""

    def _make(name: str, email: str = None, password: str = PASSWORD) -> User:
        with database.session() as session:
            user = User(
                name=name,
                email=email or f"{name.lower()}@example.com",
                hashed_password=get_password_hash(password),
            )
            session.add(user)
            session.commit()
            return user

    return _make


@pytest.fixture()
def alice(make_user):
    return make_user("Alice")


@pytest.fixture()
def bob(make_user):
    return make_user("Bob")


@pytest.fixture()
def carol(make_user):
    return make_user("Carol")


@pytest.fixture()
def client(database):
    # Not entered as a context manager: tables already exist and the
    # lifespan would reconfigure root logging.
    return TestClient(create_app(database))
