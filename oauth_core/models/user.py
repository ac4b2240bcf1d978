from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from oauth_core.models.base_model import Base, BaseModel


class User(BaseModel, Base):
    """Resource owner. The token core only reads `id`."""

    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)

    applications = relationship("OauthApplication", back_populates="owner", passive_deletes=True)

    def __repr__(self):
        return f"<User email={self.email}>"
