"""Tests for the SQL recipient directory."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from franchise_notifications.domain.entities import TargetRole
from franchise_notifications.infrastructure.database import Base
from franchise_notifications.infrastructure.directory import SqlRecipientDirectory
from franchise_notifications.infrastructure.models import FranchiseModel, UserModel


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    session.add_all(
        [
            UserModel(id="admin-1", email="alice@drivncook.com", first_name="Alice", last_name="Martin", role="ADMIN", is_active=True),
            UserModel(id="admin-2", email="old@drivncook.com", first_name="Old", last_name="Admin", role="ADMIN", is_active=False),
            UserModel(id="owner-1", email="chloe@burger-nomade.fr", first_name="Chloé", last_name="Durand", role="FRANCHISEE", franchise_id="franchise-1", is_active=True),
            FranchiseModel(id="franchise-1", business_name="Burger Nomade", user_id="owner-1"),
            FranchiseModel(id="franchise-2", business_name="Sans Gérant", user_id=None),
        ]
    )
    session.commit()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def test_get_user_by_id_builds_display_name(session) -> None:
    user = SqlRecipientDirectory(session).get_user_by_id("owner-1")

    assert user.email == "chloe@burger-nomade.fr"
    assert user.name == "Chloé Durand"
    assert user.role is TargetRole.FRANCHISEE
    assert user.franchise_id == "franchise-1"


def test_franchise_lookups(session) -> None:
    directory = SqlRecipientDirectory(session)

    assert directory.get_franchise_name("franchise-1") == "Burger Nomade"
    assert directory.get_franchise_owner("franchise-1").id == "owner-1"
    assert directory.get_franchise_owner("franchise-2") is None
    assert directory.get_franchise_name("missing") is None


def test_list_active_admins_skips_inactive_accounts(session) -> None:
    admins = SqlRecipientDirectory(session).list_active_admins()

    assert [admin.email for admin in admins] == ["alice@drivncook.com"]


def test_database_errors_are_logged_and_reported_as_missing(session, monkeypatch, caplog) -> None:
    def broken_query(*_args, **_kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "query", broken_query)
    monkeypatch.setattr(session, "get", broken_query)
    directory = SqlRecipientDirectory(session)

    with caplog.at_level(logging.ERROR):
        assert directory.list_active_admins() == []
        assert directory.get_user_by_id("owner-1") is None
        assert directory.get_franchise_name("franchise-1") is None

    assert "Failed to list active administrators" in caplog.text
