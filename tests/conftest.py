"""Pytest configuration shared across the suite."""
from __future__ import annotations

import os
import uuid

os.environ["APP_ENV"] = "testing"

import pytest

from oauth_core import applications
from oauth_core.config import configure, reset_config
from oauth_core.models import storage
from oauth_core.models.user import User


@pytest.fixture(autouse=True)
def db():
    """Fresh schema per test."""
    storage.reload()
    yield storage
    storage.drop_all()


@pytest.fixture(autouse=True)
def config():
    """Testing config; tests may call configure() and it is restored afterwards."""
    yield reset_config()
    reset_config()


@pytest.fixture
def set_config():
    return configure


@pytest.fixture
def make_user():
    def _make_user(email: str | None = None) -> User:
        return storage.insert(User(email=email or f"{uuid.uuid4().hex}@example.com"))

    return _make_user


@pytest.fixture
def make_application():
    def _make_application(owner: User | None = None, **attrs):
        attrs.setdefault("name", "OAuth Application")
        attrs.setdefault("redirect_uri", "urn:ietf:wg:oauth:2.0:oob")
        return applications.create_application(attrs, owner=owner)

    return _make_application


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def application(user, make_application):
    return make_application(owner=user)
