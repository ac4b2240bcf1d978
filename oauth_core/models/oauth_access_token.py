"""
OauthAccessToken model: one row per issued bearer token.

- token / refresh_token are unique; refresh_token is NULL when refresh
  tokens were not issued
- previous_refresh_token holds the refresh_token value of the token this one
  replaced. It is a plain string, not a foreign key, so the link survives the
  predecessor being revoked
- resource_owner_id is NULL for application (client credentials) tokens
"""
from sqlalchemy import Column, String, ForeignKey, Index
from sqlalchemy.orm import relationship

from oauth_core.models.base_model import Base, BaseModel, RevocableMixin


class OauthAccessToken(RevocableMixin, BaseModel, Base):
    __tablename__ = "oauth_access_tokens"

    resource_owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    application_id = Column(String(36), ForeignKey("oauth_applications.id", ondelete="CASCADE"), nullable=True)

    token = Column(String(255), nullable=False, unique=True)
    refresh_token = Column(String(255), nullable=True, unique=True)
    previous_refresh_token = Column(String(255), nullable=True)
    scopes = Column(String(255), nullable=True)

    resource_owner = relationship("User")
    application = relationship("OauthApplication")

    __table_args__ = (
        Index("ix_oauth_access_tokens_owner_application", "resource_owner_id", "application_id"),
    )

    def __repr__(self):
        return f"<OauthAccessToken id={self.id}>"
