"""ORM models used by the application infrastructure."""

from .franchise import FranchiseModel
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "FranchiseModel",
    "NotificationModel",
    "UserModel",
]
