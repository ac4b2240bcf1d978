from __future__ import annotations

from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from oauth_core.errors import InvalidScopeError, error_response, integrity_error_messages


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(message))


def test_invalid_scope_error_is_a_validation_error() -> None:
    err = InvalidScopeError('not in permitted scopes list: "app:read"', permitted="app:read")

    assert isinstance(err, ValidationError)
    assert err.field_name == "scopes"
    assert err.normalized_messages() == {"scopes": ['not in permitted scopes list: "app:read"']}


def test_integrity_error_messages_sqlite() -> None:
    err = _integrity_error("UNIQUE constraint failed: oauth_access_tokens.refresh_token")
    assert integrity_error_messages(err) == {"refresh_token": ["has already been taken"]}

    err = _integrity_error("NOT NULL constraint failed: oauth_access_tokens.token")
    assert integrity_error_messages(err) == {"token": ["can't be blank"]}


def test_integrity_error_messages_postgres() -> None:
    err = _integrity_error(
        'duplicate key value violates unique constraint "oauth_access_tokens_token_key"\n'
        "DETAIL:  Key (token)=(abc) already exists."
    )
    assert integrity_error_messages(err) == {"token": ["has already been taken"]}


def test_integrity_error_messages_fallback() -> None:
    assert integrity_error_messages(_integrity_error("something odd")) == {"_schema": ["Integrity error."]}


def test_error_response_invalid_scope() -> None:
    err = InvalidScopeError('not in permitted scopes list: ["public"]', permitted=["public"])

    assert error_response(err) == {
        "error": "invalid_scope",
        "error_description": 'not in permitted scopes list: ["public"]',
        "details": {"scopes": ['not in permitted scopes list: ["public"]']},
    }


def test_error_response_validation_error() -> None:
    payload = error_response(ValidationError({"token": ["has already been taken"]}))

    assert payload["error"] == "invalid_request"
    assert payload["details"] == {"token": ["has already been taken"]}


def test_error_response_scope_failure_from_create() -> None:
    err = ValidationError({"scopes": ['not in permitted scopes list: "app:read"'], "expires_in": ["Not a valid integer."]})

    payload = error_response(err)
    assert payload["error"] == "invalid_scope"
    assert payload["error_description"] == 'not in permitted scopes list: "app:read"'
