from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from oauth_core.models.base_model import Base, BaseModel, RevocableMixin


class OauthAccessGrant(RevocableMixin, BaseModel, Base):
    """Authorization code grant. Same revocation and expiry rules as access tokens, no refresh chain."""

    __tablename__ = "oauth_access_grants"

    resource_owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    application_id = Column(String(36), ForeignKey("oauth_applications.id", ondelete="CASCADE"), nullable=False)

    token = Column(String(255), nullable=False, unique=True)
    expires_in = Column(Integer, nullable=False)
    redirect_uri = Column(Text, nullable=False)
    scopes = Column(String(255), nullable=True)

    resource_owner = relationship("User")
    application = relationship("OauthApplication")

    def __repr__(self):
        return f"<OauthAccessGrant id={self.id}>"
