"""
Name: Activity Recording Tests

Responsibilities:
  - record_activity appends one entry
  - Store failures never propagate to the caller
"""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from backoffice.application.activity_log import record_activity
from backoffice.domain.entities import ActivityAction

pytestmark = pytest.mark.unit


def test_record_activity_appends_entry(activity_log):
    actor = uuid4()

    record_activity(
        activity_log, actor, ActivityAction.LOGOUT, ip_address="192.168.0.7"
    )

    [entry] = activity_log.all()
    assert entry.user_id == actor
    assert entry.action == ActivityAction.LOGOUT
    assert entry.details is None
    assert entry.created_at is not None


def test_record_activity_swallows_store_errors():
    repository = Mock()
    repository.append.side_effect = RuntimeError("db down")

    record_activity(repository, uuid4(), ActivityAction.LOGIN)

    repository.append.assert_called_once()


def test_record_activity_without_repository_is_noop():
    record_activity(None, uuid4(), ActivityAction.LOGIN)
