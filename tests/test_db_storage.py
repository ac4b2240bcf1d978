from __future__ import annotations

import pytest
from marshmallow import ValidationError

from oauth_core.models import storage
from oauth_core.models.oauth_application import OauthApplication
from oauth_core.models.user import User


def test_insert_and_count(user) -> None:
    assert storage.find_one(User, User.id == user.id) is user
    assert storage.count(User) == 1
    assert storage.count() == 1


def test_find_one_and_list_all(make_user) -> None:
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")

    assert storage.find_one(User, User.email == "bob@example.com") is bob
    assert storage.find_one(User, User.email == "carol@example.com") is None
    assert storage.list_all(User, order_by=(User.email.desc(),)) == [bob, alice]


def test_insert_integrity_error_is_validation_error(make_user) -> None:
    make_user("alice@example.com")

    with pytest.raises(ValidationError) as exc_info:
        storage.insert(User(email="alice@example.com"))
    assert exc_info.value.messages == {"email": ["has already been taken"]}

    # session is usable after the rollback
    assert storage.count(User) == 1


def test_update(application) -> None:
    storage.update(application, scopes="app:read")

    storage.close()
    stored = storage.find_one(OauthApplication, OauthApplication.id == application.id)
    assert stored is not application
    assert stored.scopes == "app:read"
