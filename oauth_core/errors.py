"""
Error taxonomy for token and grant bookkeeping.

- ValidationError (marshmallow): aggregated field-level failures, `messages`
  maps a field name to a list of messages.
- InvalidScopeError: a requested scope is outside the permitted set.
- Lookups that miss return None; there is no NotFound exception.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

TAKEN = "has already been taken"
BLANK = "can't be blank"


class InvalidScopeError(ValidationError):
    """Requested scopes are not a subset of the permitted scopes."""

    def __init__(self, message: str, permitted: Union[str, List[str]]):
        super().__init__(message, field_name="scopes")
        self.permitted = permitted


def _column_from_message(message: str) -> str | None:
    # sqlite: "UNIQUE constraint failed: oauth_access_tokens.token"
    # postgres: 'Key (token)=(...) already exists.'
    if "failed:" in message:
        column = message.rsplit("failed:", 1)[1].strip().split(",")[0]
        return column.rsplit(".", 1)[-1].strip() or None
    if "key (" in message:
        return message.split("key (", 1)[1].split(")", 1)[0].strip() or None
    return None


def integrity_error_messages(err: IntegrityError) -> Dict[str, List[str]]:
    """Map a database integrity failure to field-level messages."""
    message = str(getattr(err, "orig", err))
    lower_msg = message.lower()
    column = _column_from_message(lower_msg)

    if "unique constraint" in lower_msg or "unique violation" in lower_msg or "already exists" in lower_msg:
        return {column or "_schema": [TAKEN]}
    if "not null constraint" in lower_msg or "null value" in lower_msg:
        return {column or "_schema": [BLANK]}
    if "foreign key constraint" in lower_msg or "foreign key mismatch" in lower_msg:
        return {column or "_schema": ["does not exist"]}
    # Generic integrity issue
    logger.warning("Unclassified integrity error: %s", message)
    return {"_schema": ["Integrity error."]}


def error_response(err: ValidationError) -> Dict[str, Any]:
    """Build the OAuth2 error envelope a protocol layer would return."""
    messages = err.normalized_messages()
    # InvalidScopeError, or a create failure that includes a scope error
    if "scopes" in messages:
        return {
            "error": "invalid_scope",
            "error_description": str(messages["scopes"][0]),
            "details": messages,
        }

    payload: Dict[str, Any] = {
        "error": "invalid_request",
        "error_description": "The request is missing a required parameter or is otherwise malformed.",
    }
    if messages:
        payload["details"] = messages
    return payload
