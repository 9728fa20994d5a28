"""
Name: Bootstrap Admin Tests

Responsibilities:
  - Seed an admin only when enabled and the store is empty
  - Losing a concurrent seeding race is not an error
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from backoffice.application.bootstrap_admin import ensure_bootstrap_admin
from backoffice.domain.entities import UserRole
from backoffice.domain.errors import DuplicateEmailError

pytestmark = pytest.mark.unit


def _settings(**overrides):
    data = dict(
        bootstrap_admin_enabled=True,
        bootstrap_admin_name="System Admin",
        bootstrap_admin_email="admin@dashboard.com",
        bootstrap_admin_password="Admin@123",
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_creates_admin_on_empty_store(credentials):
    admin = ensure_bootstrap_admin(_settings(), credentials=credentials)

    assert admin.role == UserRole.ADMIN
    assert credentials.verify("admin@dashboard.com", "Admin@123").id == admin.id


def test_skips_when_store_has_users(credentials):
    credentials.create("Bob", "bob@x.io", "pw1", UserRole.USER)

    assert ensure_bootstrap_admin(_settings(), credentials=credentials) is None
    assert credentials.count() == 1


def test_second_run_is_noop(credentials):
    ensure_bootstrap_admin(_settings(), credentials=credentials)

    assert ensure_bootstrap_admin(_settings(), credentials=credentials) is None
    assert credentials.count() == 1


def test_disabled_does_nothing():
    credentials = Mock()

    assert (
        ensure_bootstrap_admin(
            _settings(bootstrap_admin_enabled=False), credentials=credentials
        )
        is None
    )
    credentials.count.assert_not_called()


def test_lost_race_returns_none():
    credentials = Mock()
    credentials.count.return_value = 0
    credentials.create.side_effect = DuplicateEmailError("admin@dashboard.com")

    assert ensure_bootstrap_admin(_settings(), credentials=credentials) is None


def test_empty_password_rejected(credentials):
    with pytest.raises(ValueError):
        ensure_bootstrap_admin(
            _settings(bootstrap_admin_password=""), credentials=credentials
        )
