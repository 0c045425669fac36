"""SQLAlchemy model for the franchise table."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from franchise_notifications.infrastructure.database import Base


class FranchiseModel(Base):
    """Franchise with its owning franchisee account."""

    __tablename__ = "franchise"

    id = Column(String(36), primary_key=True)
    business_name = Column(String(150), nullable=False)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=True, index=True)

    owner = relationship("UserModel", foreign_keys=[user_id], lazy="joined")


__all__ = ["FranchiseModel"]
