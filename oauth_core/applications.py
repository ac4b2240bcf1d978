"""OAuth2 client applications and the tokens their users have authorized."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from oauth_core import access_tokens
from oauth_core.models import storage
from oauth_core.models.oauth_access_token import OauthAccessToken
from oauth_core.models.oauth_application import OauthApplication
from oauth_core.models.schemas.application import ApplicationCreateSchema
from oauth_core.models.user import User
from oauth_core.utils.security import generate_token

logger = logging.getLogger(__name__)

application_create_schema = ApplicationCreateSchema()


def create_application(attrs: Dict[str, Any], owner: Optional[User] = None) -> OauthApplication:
    """Register an application; uid and secret are generated unless given."""
    payload = {
        "uid": generate_token(),
        "secret": generate_token(),
        **attrs,
        "owner_id": owner.id if owner is not None else None,
    }
    data = application_create_schema.load(payload)

    application = storage.insert(OauthApplication(**data))
    logger.info("Registered application %s (uid=%s)", application.id, application.uid)
    return application


def get_application(uid: str) -> Optional[OauthApplication]:
    return storage.find_one(OauthApplication, OauthApplication.uid == uid)


def get_authorized_applications_for(resource_owner: User) -> List[OauthApplication]:
    """Applications holding at least one live token for `resource_owner`."""
    applications = []
    seen = set()
    for access_token in access_tokens.get_authorized_tokens_for(resource_owner):
        if access_token.application_id is None or access_token.application_id in seen:
            continue
        seen.add(access_token.application_id)
        applications.append(access_token.application)
    return applications


def revoke_all_access_tokens_for(application: OauthApplication, resource_owner: User) -> List[OauthAccessToken]:
    """Revoke every unrevoked token `application` holds for `resource_owner`."""
    tokens = storage.list_all(
        OauthAccessToken,
        OauthAccessToken.application_id == application.id,
        OauthAccessToken.resource_owner_id == resource_owner.id,
        OauthAccessToken.revoked_at.is_(None),
    )
    return [access_tokens.revoke(access_token) for access_token in tokens]
