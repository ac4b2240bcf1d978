"""
Authorization code grants.

Same revocation and expiry semantics as access tokens; grants have no
refresh chain and are always tied to both a resource owner and an
application.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from oauth_core.config import current_config
from oauth_core.models import storage
from oauth_core.models.base_model import utcnow
from oauth_core.models.oauth_access_grant import OauthAccessGrant
from oauth_core.models.oauth_application import OauthApplication
from oauth_core.models.schemas.access_grant import AccessGrantCreateSchema
from oauth_core.models.user import User
from oauth_core.utils.security import generate_token

logger = logging.getLogger(__name__)


def is_revoked(access_grant: Optional[OauthAccessGrant]) -> bool:
    return access_grant is not None and access_grant.is_revoked()


def is_accessible(access_grant: Optional[OauthAccessGrant]) -> bool:
    return access_grant is not None and access_grant.is_accessible()


def get_by_token(token: str) -> Optional[OauthAccessGrant]:
    return storage.find_one(OauthAccessGrant, OauthAccessGrant.token == token)


def get_active_grant_for(application: OauthApplication, token: str) -> Optional[OauthAccessGrant]:
    """The grant with this code issued to `application`, if it is still accessible."""
    access_grant = storage.find_one(
        OauthAccessGrant,
        OauthAccessGrant.application_id == application.id,
        OauthAccessGrant.token == token,
        OauthAccessGrant.revoked_at.is_(None),
    )
    return access_grant if is_accessible(access_grant) else None


def get_authorized_grants_for(resource_owner: User) -> List[OauthAccessGrant]:
    grants = storage.list_all(
        OauthAccessGrant,
        OauthAccessGrant.resource_owner_id == resource_owner.id,
        OauthAccessGrant.revoked_at.is_(None),
        order_by=(OauthAccessGrant.inserted_at.desc(),),
    )
    now = utcnow()
    return [access_grant for access_grant in grants if access_grant.is_accessible(now)]


def create_grant(resource_owner: User, application: OauthApplication, attrs: Dict[str, Any]) -> OauthAccessGrant:
    """
    Issue an authorization code for `resource_owner` and `application`.

    attrs: expires_in and redirect_uri (both required), scopes (optional).
    Raises ValidationError with field-level messages.
    """
    config = current_config()
    payload = {
        **attrs,
        "resource_owner_id": resource_owner.id,
        "application_id": application.id,
    }
    schema = AccessGrantCreateSchema(
        default_scopes=config.DEFAULT_SCOPES,
        optional_scopes=config.OPTIONAL_SCOPES,
        application_scopes=application.scopes,
    )
    data = schema.load(payload)
    data["token"] = generate_token()

    access_grant = storage.insert(OauthAccessGrant(**data))
    logger.info(
        "Issued access grant %s (resource_owner=%s, application=%s)",
        access_grant.id,
        access_grant.resource_owner_id,
        access_grant.application_id,
    )
    return access_grant


def revoke(access_grant: OauthAccessGrant) -> OauthAccessGrant:
    """Set revoked_at. A grant that is already revoked is returned unchanged."""
    if access_grant.is_revoked():
        return access_grant

    storage.update(access_grant, revoked_at=utcnow())
    logger.info("Revoked access grant %s", access_grant.id)
    return access_grant
