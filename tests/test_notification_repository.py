"""Tests for the SQLAlchemy notification repository."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from conftest import BASE_TIME, make_notification
from franchise_notifications.domain.entities import (
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    TargetRole,
)
from franchise_notifications.infrastructure.database import Base
from franchise_notifications.infrastructure import models  # noqa: F401
from franchise_notifications.infrastructure.repositories import NotificationRepository


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def repository(session) -> NotificationRepository:
    return NotificationRepository(session)


def _admin_filters(**overrides) -> NotificationFilters:
    return NotificationFilters(target_role=TargetRole.ADMIN, **overrides)


def test_create_round_trips_every_field(repository) -> None:
    notification = make_notification(
        notification_type=NotificationType.VEHICLE_BREAKDOWN,
        priority=NotificationPriority.URGENT,
        target_role=TargetRole.FRANCHISEE,
        data={"licensePlate": "AB-123-CD", "amount": 12.5},
        franchise_id="franchise-1",
        target_user_id="owner-1",
        related_entity_id="vehicle-1",
        related_entity_type="vehicle",
        action_url="/vehicles/vehicle-1",
        expires_at=BASE_TIME + timedelta(days=7),
    )

    saved = repository.create(notification)
    loaded = repository.get(saved.id)

    assert loaded == saved
    assert loaded.created_at == BASE_TIME
    assert loaded.created_at.tzinfo is not None
    assert loaded.data == {"licensePlate": "AB-123-CD", "amount": 12.5}
    assert loaded.priority is NotificationPriority.URGENT


def test_create_assigns_an_identifier(repository) -> None:
    saved = repository.create(make_notification(id=None))

    assert saved.id
    assert repository.get(saved.id) is not None


def test_query_filters_and_orders_newest_first(repository) -> None:
    oldest = repository.create(make_notification(minutes_ago=30))
    newest = repository.create(make_notification(minutes_ago=1))
    repository.create(
        make_notification(notification_type=NotificationType.STOCK_LOW, minutes_ago=5)
    )
    repository.create(make_notification(target_role=TargetRole.FRANCHISEE))

    system_only = repository.query(_admin_filters(types=[NotificationType.SYSTEM]))

    assert [item.id for item in system_only] == [newest.id, oldest.id]
    assert repository.count(_admin_filters()) == 3
    assert repository.count(NotificationFilters(target_role=TargetRole.FRANCHISEE)) == 1


def test_query_supports_date_range_and_pagination(repository) -> None:
    for minutes in range(6):
        repository.create(make_notification(minutes_ago=minutes * 10))

    window = _admin_filters(
        start_date=BASE_TIME - timedelta(minutes=35),
        end_date=BASE_TIME - timedelta(minutes=5),
    )
    second_page = repository.query(_admin_filters(limit=2, offset=2))

    assert repository.count(window) == 3
    assert [item.created_at for item in second_page] == [
        BASE_TIME - timedelta(minutes=20),
        BASE_TIME - timedelta(minutes=30),
    ]


def test_mark_all_read_scenario_updates_exactly_the_unread_ids(repository) -> None:
    unread_ids = [repository.create(make_notification(minutes_ago=index)).id for index in range(5)]
    for index in range(2):
        repository.create(
            make_notification(status=NotificationStatus.READ, minutes_ago=30 + index)
        )

    pending = repository.query(
        _admin_filters(statuses=[NotificationStatus.UNREAD], limit=None)
    )
    result = repository.batch_update_status(
        [item.id for item in pending],
        status=NotificationStatus.READ,
        read_at=BASE_TIME,
        target_role=TargetRole.ADMIN,
    )

    assert result.updated_count == 5
    assert set(result.updated_ids) == set(unread_ids)
    assert repository.count(_admin_filters(statuses=[NotificationStatus.UNREAD])) == 0
    assert repository.get(unread_ids[0]).read_at == BASE_TIME


def test_batch_update_never_touches_read_rows_or_other_roles(repository) -> None:
    already_read = repository.create(
        make_notification(status=NotificationStatus.READ, read_at=BASE_TIME - timedelta(days=1))
    )
    franchise = repository.create(make_notification(target_role=TargetRole.FRANCHISEE))

    result = repository.batch_update_status(
        [already_read.id, franchise.id, "missing"],
        status=NotificationStatus.READ,
        read_at=BASE_TIME,
        target_role=TargetRole.ADMIN,
    )

    assert result.updated_count == 0
    assert repository.get(already_read.id).read_at == BASE_TIME - timedelta(days=1)
    assert repository.get(franchise.id).status is NotificationStatus.UNREAD


def test_batch_update_refuses_to_revert_to_unread(repository) -> None:
    saved = repository.create(make_notification(status=NotificationStatus.READ))

    with pytest.raises(ValueError):
        repository.batch_update_status(
            [saved.id],
            status=NotificationStatus.UNREAD,
            read_at=BASE_TIME,
            target_role=TargetRole.ADMIN,
        )
    assert repository.get(saved.id).status is NotificationStatus.READ
