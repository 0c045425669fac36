"""SQL-backed lookups of users and franchises used to address notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from franchise_notifications.domain.entities import TargetRole, UserEmailInfo
from franchise_notifications.domain.ports import RecipientDirectory
from franchise_notifications.infrastructure.models import FranchiseModel, UserModel

logger = logging.getLogger(__name__)


def _display_name(model: UserModel) -> str | None:
    parts = [part.strip() for part in (model.first_name, model.last_name) if part and part.strip()]
    return " ".join(parts) or None


def _to_user_info(model: UserModel) -> UserEmailInfo | None:
    try:
        role = TargetRole(model.role)
    except ValueError:
        logger.warning("User %s has an unsupported role %r", model.id, model.role)
        return None
    return UserEmailInfo(
        id=model.id,
        email=model.email,
        role=role,
        name=_display_name(model),
        franchise_id=model.franchise_id,
    )


class SqlRecipientDirectory(RecipientDirectory):
    """Resolve contacts from the ``user`` and ``franchise`` tables.

    Database errors are logged and reported as "not found" so a failing lookup
    never aborts a notification.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_user_by_id(self, user_id: str) -> UserEmailInfo | None:
        try:
            model = self.session.get(UserModel, user_id)
        except SQLAlchemyError:
            logger.exception("Failed to load user %s", user_id)
            return None
        return _to_user_info(model) if model else None

    def get_franchise_owner(self, franchise_id: str) -> UserEmailInfo | None:
        franchise = self._get_franchise(franchise_id)
        if franchise is None or franchise.owner is None:
            return None
        return _to_user_info(franchise.owner)

    def get_franchise_name(self, franchise_id: str) -> str | None:
        franchise = self._get_franchise(franchise_id)
        return franchise.business_name if franchise else None

    def list_active_admins(self) -> Sequence[UserEmailInfo]:
        try:
            models = (
                self.session.query(UserModel)
                .filter(UserModel.role == TargetRole.ADMIN.value)
                .filter(UserModel.is_active.is_(True))
                .order_by(UserModel.email)
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Failed to list active administrators")
            return []
        admins = (_to_user_info(model) for model in models)
        return [admin for admin in admins if admin is not None]

    def _get_franchise(self, franchise_id: str) -> FranchiseModel | None:
        try:
            return self.session.get(FranchiseModel, franchise_id)
        except SQLAlchemyError:
            logger.exception("Failed to load franchise %s", franchise_id)
            return None


__all__ = ["SqlRecipientDirectory"]
