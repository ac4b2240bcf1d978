from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from oauth_core.models.base_model import Base, BaseModel


class OauthApplication(BaseModel, Base):
    __tablename__ = "oauth_applications"

    name = Column(String(255), nullable=False)
    uid = Column(String(255), nullable=False, unique=True, index=True)
    secret = Column(String(255), nullable=False)
    redirect_uri = Column(Text, nullable=True)
    # Space-joined; when set it replaces the server's optional scopes for this application
    scopes = Column(String(255), nullable=True, default="")

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    owner = relationship("User", back_populates="applications")

    def __repr__(self):
        return f"<OauthApplication uid={self.uid}>"
