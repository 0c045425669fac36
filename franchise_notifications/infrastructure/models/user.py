"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, String

from franchise_notifications.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a platform user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    email = Column(String(120), nullable=False, index=True)
    first_name = Column(String(60), nullable=True)
    last_name = Column(String(60), nullable=True)
    role = Column(String(20), nullable=False, index=True)
    franchise_id = Column(String(36), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["UserModel"]
