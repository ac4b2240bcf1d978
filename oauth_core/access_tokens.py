"""
Access token lifecycle.

Issuing, looking up, rotating and revoking OauthAccessToken records.

- create_token / create_application_token always insert a new record
- get_or_create_token / get_or_create_application_token return the newest
  accessible token with the same owner, application and scope set, and only
  create one when there is none. This is a read followed by a write, not an
  atomic operation: two concurrent calls may both create a token.
- refresh rotation links the new token to the old one through
  previous_refresh_token (a plain string copy of the old refresh_token)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from marshmallow import ValidationError

from oauth_core.config import current_config
from oauth_core.errors import BLANK
from oauth_core.models import storage
from oauth_core.models.base_model import utcnow
from oauth_core.models.oauth_access_token import OauthAccessToken
from oauth_core.models.oauth_application import OauthApplication
from oauth_core.models.schemas.access_token import AccessTokenCreateSchema
from oauth_core.models.user import User
from oauth_core.utils import scopes as scope_utils
from oauth_core.utils.security import generate_token

logger = logging.getLogger(__name__)


def _id(record) -> Optional[str]:
    return record.id if record is not None else None


def _match(column, value):
    # NULL only matches NULL
    return column.is_(None) if value is None else column == value


def _newest_first():
    return (OauthAccessToken.inserted_at.desc(),)


def is_revoked(access_token: Optional[OauthAccessToken]) -> bool:
    return access_token is not None and access_token.is_revoked()


def is_accessible(access_token: Optional[OauthAccessToken]) -> bool:
    """Not None, not revoked and not expired."""
    return access_token is not None and access_token.is_accessible()


def get_by_token(token: str) -> Optional[OauthAccessToken]:
    return storage.find_one(OauthAccessToken, OauthAccessToken.token == token)


def get_by_refresh_token(refresh_token: str) -> Optional[OauthAccessToken]:
    return storage.find_one(OauthAccessToken, OauthAccessToken.refresh_token == refresh_token)


def get_by_previous_refresh_token_for(access_token: OauthAccessToken) -> Optional[OauthAccessToken]:
    """
    The token `access_token` was rotated from: the newest token whose
    refresh_token equals access_token.previous_refresh_token and that belongs
    to the same resource owner and application. Revoked tokens are included.
    """
    if not access_token.previous_refresh_token:
        return None

    return storage.find_one(
        OauthAccessToken,
        OauthAccessToken.refresh_token == access_token.previous_refresh_token,
        _match(OauthAccessToken.resource_owner_id, access_token.resource_owner_id),
        _match(OauthAccessToken.application_id, access_token.application_id),
        order_by=_newest_first(),
    )


def get_matching_token_for(
    resource_owner: Optional[User],
    application: Optional[OauthApplication],
    scopes: scope_utils.Scopes,
) -> Optional[OauthAccessToken]:
    """Newest accessible token for the owner/application pair with exactly these scopes."""
    candidates = storage.list_all(
        OauthAccessToken,
        _match(OauthAccessToken.resource_owner_id, _id(resource_owner)),
        _match(OauthAccessToken.application_id, _id(application)),
        OauthAccessToken.revoked_at.is_(None),
        order_by=_newest_first(),
    )
    now = utcnow()
    for access_token in candidates:
        if access_token.is_accessible(now) and scope_utils.equal(access_token.scopes, scopes):
            return access_token
    return None


def get_authorized_tokens_for(owner: Union[User, OauthApplication]) -> List[OauthAccessToken]:
    """
    Live tokens issued to a resource owner, or to an application acting for
    itself (no resource owner), newest first.
    """
    if isinstance(owner, OauthApplication):
        criteria = (
            OauthAccessToken.application_id == owner.id,
            OauthAccessToken.resource_owner_id.is_(None),
        )
    else:
        criteria = (OauthAccessToken.resource_owner_id == owner.id,)

    tokens = storage.list_all(
        OauthAccessToken,
        *criteria,
        OauthAccessToken.revoked_at.is_(None),
        order_by=_newest_first(),
    )
    now = utcnow()
    return [access_token for access_token in tokens if access_token.is_accessible(now)]


def create_token(resource_owner: Optional[User], attrs: Optional[Dict[str, Any]] = None) -> OauthAccessToken:
    """
    Issue a new access token.

    attrs:
      application            OauthApplication or None
      scopes                 requested scopes; defaults to the default scopes
      expires_in             seconds, None for never; defaults to ACCESS_TOKEN_EXPIRES_IN
      use_refresh_token      also issue a refresh token; defaults to USE_REFRESH_TOKEN
      previous_refresh_token the token (or refresh token value) this one replaces

    Raises ValidationError with field-level messages.
    """
    config = current_config()
    attrs = dict(attrs or {})
    application = attrs.pop("application", None)
    use_refresh_token = attrs.pop("use_refresh_token", config.USE_REFRESH_TOKEN)
    previous = attrs.pop("previous_refresh_token", None)
    if isinstance(previous, OauthAccessToken):
        previous = previous.refresh_token

    payload = {
        **attrs,
        "resource_owner_id": _id(resource_owner),
        "application_id": _id(application),
        "expires_in": attrs.get("expires_in", config.ACCESS_TOKEN_EXPIRES_IN),
        "previous_refresh_token": previous or None,
    }
    schema = AccessTokenCreateSchema(
        default_scopes=config.DEFAULT_SCOPES,
        optional_scopes=config.OPTIONAL_SCOPES,
        application_scopes=application.scopes if application is not None else None,
    )
    data = schema.load(payload)

    data["token"] = config.access_token_generator(
        {
            "resource_owner_id": data["resource_owner_id"],
            "application_id": data["application_id"],
            "scopes": data["scopes"],
            "expires_in": data["expires_in"],
            "created_at": utcnow(),
        }
    )
    if not data["token"]:
        raise ValidationError({"token": [BLANK]})
    if use_refresh_token:
        data["refresh_token"] = generate_token()

    access_token = storage.insert(OauthAccessToken(**data))
    logger.info(
        "Issued access token %s (resource_owner=%s, application=%s, scopes=%r)",
        access_token.id,
        access_token.resource_owner_id,
        access_token.application_id,
        access_token.scopes,
    )
    return access_token


def create_application_token(application: OauthApplication, attrs: Optional[Dict[str, Any]] = None) -> OauthAccessToken:
    """Issue a token for the application itself (client credentials)."""
    attrs = dict(attrs or {})
    attrs["application"] = application
    return create_token(None, attrs)


def get_or_create_token(
    resource_owner: Optional[User],
    application: Optional[OauthApplication],
    scopes: scope_utils.Scopes,
    attrs: Optional[Dict[str, Any]] = None,
) -> OauthAccessToken:
    """Return the matching accessible token unchanged, or issue a new one."""
    scopes = scope_utils.resolve(scopes, current_config().DEFAULT_SCOPES)

    access_token = get_matching_token_for(resource_owner, application, scopes)
    if access_token is not None:
        logger.debug("Reusing access token %s", access_token.id)
        return access_token

    attrs = dict(attrs or {})
    attrs.update(application=application, scopes=scopes)
    return create_token(resource_owner, attrs)


def get_or_create_application_token(
    application: OauthApplication,
    scopes: scope_utils.Scopes,
    attrs: Optional[Dict[str, Any]] = None,
) -> OauthAccessToken:
    return get_or_create_token(None, application, scopes, attrs)


def revoke(access_token: OauthAccessToken) -> OauthAccessToken:
    """Set revoked_at. A token that is already revoked is returned unchanged."""
    if access_token.is_revoked():
        return access_token

    storage.update(access_token, revoked_at=utcnow())
    logger.info("Revoked access token %s", access_token.id)
    return access_token


def refresh_access_token(access_token: OauthAccessToken, attrs: Optional[Dict[str, Any]] = None) -> OauthAccessToken:
    """
    Issue the replacement for a token presented through its refresh token.

    The new token keeps the owner and application. Requested scopes must be
    within the old token's scopes, and a revoked token cannot be refreshed.
    With REVOKE_REFRESH_TOKEN_ON_USE the old token stays valid and the new
    one records it as previous_refresh_token (see
    revoke_previous_refresh_token); otherwise the old token is revoked right
    away.
    """
    if is_revoked(access_token):
        raise ValidationError({"refresh_token": ["is revoked"]})

    config = current_config()
    attrs = dict(attrs or {})

    requested = attrs.pop("scopes", None)
    if scope_utils.to_list(requested):
        scope_utils.check(requested, access_token.scopes or "")
        scopes = scope_utils.to_string(requested)
    else:
        scopes = access_token.scopes

    attrs.update(
        application=access_token.application,
        scopes=scopes,
        use_refresh_token=True,
    )
    if config.REVOKE_REFRESH_TOKEN_ON_USE:
        attrs["previous_refresh_token"] = access_token

    new_token = create_token(access_token.resource_owner, attrs)
    if not config.REVOKE_REFRESH_TOKEN_ON_USE:
        revoke(access_token)
    logger.info("Rotated access token %s to %s", access_token.id, new_token.id)
    return new_token


def revoke_previous_refresh_token(access_token: OauthAccessToken) -> Optional[OauthAccessToken]:
    """Revoke the token `access_token` was rotated from, if there is one."""
    previous = get_by_previous_refresh_token_for(access_token)
    if previous is None:
        return None
    return revoke(previous)
