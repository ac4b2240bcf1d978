from __future__ import annotations

from datetime import timedelta

import pytest
from marshmallow import ValidationError

from oauth_core import access_grants
from oauth_core.models import storage
from oauth_core.models.base_model import utcnow
from oauth_core.models.oauth_access_grant import OauthAccessGrant

VALID_ATTRS = {"expires_in": 600, "redirect_uri": "urn:ietf:wg:oauth:2.0:oob"}


def test_create_grant(user, application) -> None:
    access_grant = access_grants.create_grant(user, application, VALID_ATTRS)

    assert access_grant.resource_owner_id == user.id
    assert access_grant.application_id == application.id
    assert access_grant.scopes == "public"
    assert access_grant.expires_in == 600
    assert len(access_grant.token) == 64
    assert access_grants.is_accessible(access_grant)


def test_create_grant_with_custom_scopes(user, application) -> None:
    access_grant = access_grants.create_grant(user, application, {**VALID_ATTRS, "scopes": "read"})
    assert access_grant.scopes == "read"


def test_create_grant_requires_fields(user, application) -> None:
    with pytest.raises(ValidationError) as exc_info:
        access_grants.create_grant(user, application, {"scopes": "invalid"})

    messages = exc_info.value.messages
    assert messages["expires_in"] == ["Missing data for required field."]
    assert messages["redirect_uri"] == ["Missing data for required field."]
    assert messages["scopes"] == ['not in permitted scopes list: ["public", "read", "write"]']
    assert storage.count(OauthAccessGrant) == 0


def test_create_grant_with_application_scopes(user, make_application) -> None:
    application = make_application(owner=user, scopes="app:read")

    with pytest.raises(ValidationError) as exc_info:
        access_grants.create_grant(user, application, {**VALID_ATTRS, "scopes": "app:write"})
    assert exc_info.value.messages == {"scopes": ['not in permitted scopes list: "app:read"']}


def test_get_by_token(user, application) -> None:
    access_grant = access_grants.create_grant(user, application, VALID_ATTRS)

    assert access_grants.get_by_token(access_grant.token).id == access_grant.id
    assert access_grants.get_by_token("missing") is None


def test_get_active_grant_for(user, application, make_application) -> None:
    access_grant = access_grants.create_grant(user, application, VALID_ATTRS)

    assert access_grants.get_active_grant_for(application, access_grant.token).id == access_grant.id
    assert access_grants.get_active_grant_for(make_application(), access_grant.token) is None

    storage.update(access_grant, inserted_at=utcnow() - timedelta(seconds=601))
    assert access_grants.get_active_grant_for(application, access_grant.token) is None


def test_get_active_grant_for_revoked(user, application) -> None:
    access_grant = access_grants.revoke(access_grants.create_grant(user, application, VALID_ATTRS))

    assert access_grants.get_active_grant_for(application, access_grant.token) is None


def test_get_authorized_grants_for(user, application, make_user) -> None:
    access_grant = access_grants.create_grant(user, application, VALID_ATTRS)
    expired = access_grants.create_grant(user, application, {**VALID_ATTRS, "expires_in": 0})

    assert [g.id for g in access_grants.get_authorized_grants_for(user)] == [access_grant.id]
    assert access_grants.get_authorized_grants_for(make_user()) == []
    assert not access_grants.is_accessible(expired)


def test_revoke(user, application) -> None:
    access_grant = access_grants.create_grant(user, application, VALID_ATTRS)

    access_grant = access_grants.revoke(access_grant)
    revoked_at = access_grant.revoked_at
    assert access_grants.is_revoked(access_grant)
    assert not access_grants.is_accessible(access_grant)

    assert access_grants.revoke(access_grant).revoked_at == revoked_at


def test_predicates_with_none() -> None:
    assert not access_grants.is_accessible(None)
    assert not access_grants.is_revoked(None)
