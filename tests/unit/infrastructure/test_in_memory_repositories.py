"""
Name: In-Memory Repository Tests

Responsibilities:
  - Case-insensitive email uniqueness (also under concurrency)
  - Newest-first ordering with stable tie-break
  - Delete semantics: created_by and activity log user_id set to NULL
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from backoffice.domain.entities import (
    ActivityAction,
    ActivityLogEntry,
    UserRole,
    UserStatus,
)
from backoffice.domain.errors import DuplicateEmailError
from backoffice.infrastructure.repositories.in_memory import (
    InMemoryActivityLogRepository,
    InMemoryUserRepository,
)

pytestmark = pytest.mark.unit


def _create(repo, email, **kwargs):
    return repo.create_user(
        name=kwargs.pop("name", "User"),
        email=email,
        password_hash="hash",
        role=kwargs.pop("role", UserRole.USER),
        **kwargs,
    )


def test_create_and_lookup_by_email_ignores_case(user_repo):
    user = _create(user_repo, "bob@example.com")

    assert user_repo.get_user_by_email("BOB@example.com").id == user.id
    assert user_repo.get_user_by_id(user.id) == user
    assert user_repo.get_user_by_email("ghost@example.com") is None


def test_duplicate_email_rejected(user_repo):
    _create(user_repo, "bob@example.com")

    with pytest.raises(DuplicateEmailError):
        _create(user_repo, "Bob@Example.com")


def test_concurrent_creates_same_email_exactly_one_wins():
    repo = InMemoryUserRepository()

    def _attempt(_):
        try:
            _create(repo, "race@example.com")
            return True
        except DuplicateEmailError:
            return False

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(_attempt, range(16)))

    assert results.count(True) == 1
    assert repo.count_users() == 1


def test_list_users_newest_first_with_tie_break():
    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    repo = InMemoryUserRepository(clock=lambda: fixed)
    first = _create(repo, "a@example.com")
    second = _create(repo, "b@example.com")
    third = _create(repo, "c@example.com")

    assert [u.id for u in repo.list_users()] == [third.id, second.id, first.id]
    assert [u.id for u in repo.list_users(limit=2)] == [third.id, second.id]
    assert repo.list_users(limit=0) == []


def test_update_user_changes_fields_and_email_index(user_repo):
    user = _create(user_repo, "bob@example.com")

    updated = user_repo.update_user(
        user.id,
        name="Robert",
        email="robert@example.com",
        role=UserRole.MANAGER,
        status=UserStatus.INACTIVE,
    )

    assert updated.name == "Robert"
    assert updated.status == UserStatus.INACTIVE
    assert user_repo.get_user_by_email("bob@example.com") is None
    assert user_repo.get_user_by_email("robert@example.com").id == user.id


def test_update_user_to_taken_email_rejected(user_repo):
    _create(user_repo, "alice@example.com")
    bob = _create(user_repo, "bob@example.com")

    with pytest.raises(DuplicateEmailError):
        user_repo.update_user(
            bob.id,
            name="Bob",
            email="ALICE@example.com",
            role=UserRole.USER,
            status=UserStatus.ACTIVE,
        )


def test_update_user_keeping_own_email(user_repo):
    bob = _create(user_repo, "bob@example.com")

    updated = user_repo.update_user(
        bob.id,
        name="Bob B",
        email="bob@example.com",
        role=UserRole.USER,
        status=UserStatus.ACTIVE,
    )
    assert updated.name == "Bob B"


def test_update_missing_user_returns_none(user_repo):
    assert (
        user_repo.update_user(
            uuid4(),
            name="X",
            email="x@example.com",
            role=UserRole.USER,
            status=UserStatus.ACTIVE,
        )
        is None
    )


def test_delete_user_nulls_creator_and_activity_references(user_repo, activity_log):
    admin = _create(user_repo, "admin@example.com", role=UserRole.ADMIN)
    child = _create(user_repo, "child@example.com", created_by=admin.id)
    activity_log.append(
        ActivityLogEntry(id=uuid4(), user_id=admin.id, action=ActivityAction.LOGIN)
    )

    assert user_repo.delete_user(admin.id) is True

    assert user_repo.get_user_by_id(child.id).created_by is None
    entries = activity_log.all()
    assert len(entries) == 1
    assert entries[0].user_id is None
    # El email queda libre para una cuenta nueva.
    _create(user_repo, "admin@example.com")


def test_delete_missing_user_returns_false(user_repo):
    assert user_repo.delete_user(uuid4()) is False


def test_activity_log_count_since():
    now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    repo = InMemoryActivityLogRepository(clock=lambda: now)
    repo.append(
        ActivityLogEntry(
            id=uuid4(),
            user_id=None,
            action=ActivityAction.LOGIN,
            created_at=now - timedelta(days=1),
        )
    )
    repo.append(ActivityLogEntry(id=uuid4(), user_id=None, action=ActivityAction.LOGOUT))

    assert repo.count_since(now.replace(hour=0)) == 1
    assert [e.action for e in repo.all()] == [ActivityAction.LOGIN, ActivityAction.LOGOUT]
