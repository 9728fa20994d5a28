"""
Name: Identity Guards Tests

Responsibilities:
  - Unauthenticated vs Forbidden are distinct outcomes
  - refresh_identity re-reads role/status and drops stale sessions
"""

import pytest

from backoffice.domain.entities import SessionIdentity, UserRole, UserStatus
from backoffice.identity.errors import (
    ForbiddenError,
    SessionMissingError,
    UnauthenticatedError,
)
from backoffice.identity.guards import (
    refresh_identity,
    require_authenticated,
    require_privileged,
)

pytestmark = pytest.mark.unit


def test_require_authenticated_rejects_none():
    with pytest.raises(UnauthenticatedError):
        require_authenticated(None)


def test_require_privileged_by_role(admin_identity, plain_identity):
    assert require_privileged(admin_identity) is admin_identity

    with pytest.raises(ForbiddenError):
        require_privileged(plain_identity)

    # Sin identidad no es Forbidden: es Unauthenticated.
    with pytest.raises(UnauthenticatedError):
        require_privileged(None)


def test_manager_is_privileged(plain_identity):
    manager = SessionIdentity(
        user_id=plain_identity.user_id, user_name="M", user_role=UserRole.MANAGER
    )
    assert require_privileged(manager) is manager


def test_refresh_identity_picks_up_role_change(credentials, sessions):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.ADMIN)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)

    credentials.update(user.id, "Bobby", user.email, UserRole.USER, UserStatus.ACTIVE)

    refreshed = refresh_identity(
        identity, token=token, credentials=credentials, sessions=sessions
    )
    assert refreshed.user_role == UserRole.USER
    assert refreshed.user_name == "Bobby"
    assert not refreshed.is_privileged


def test_refresh_identity_unchanged_returns_same_identity(credentials, sessions):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.USER)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)

    assert (
        refresh_identity(identity, token=token, credentials=credentials, sessions=sessions)
        is identity
    )


def test_refresh_identity_inactive_user_destroys_session(credentials, sessions):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.USER)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)
    credentials.update(user.id, user.name, user.email, user.role, UserStatus.INACTIVE)

    with pytest.raises(UnauthenticatedError):
        refresh_identity(
            identity, token=token, credentials=credentials, sessions=sessions
        )
    with pytest.raises(SessionMissingError):
        sessions.validate(token)


def test_refresh_identity_deleted_user(credentials, sessions):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.USER)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)
    credentials.delete(user.id)

    with pytest.raises(UnauthenticatedError):
        refresh_identity(
            identity, token=token, credentials=credentials, sessions=sessions
        )


def test_refresh_identity_trusting_session_role(credentials, sessions):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.ADMIN)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)
    credentials.update(user.id, user.name, user.email, UserRole.USER, UserStatus.ACTIVE)

    kept = refresh_identity(
        identity,
        token=token,
        credentials=credentials,
        sessions=sessions,
        trust_session_role=True,
    )
    assert kept is identity
    assert kept.is_privileged


def test_refresh_identity_trusting_session_role_still_drops_inactive(
    credentials, sessions
):
    user = credentials.create("Bob", "bob@example.com", "pw", UserRole.ADMIN)
    token = sessions.create(user.id, user.name, user.role)
    identity = sessions.validate(token)
    credentials.update(user.id, user.name, user.email, user.role, UserStatus.INACTIVE)

    with pytest.raises(UnauthenticatedError):
        refresh_identity(
            identity,
            token=token,
            credentials=credentials,
            sessions=sessions,
            trust_session_role=True,
        )
    with pytest.raises(SessionMissingError):
        sessions.validate(token)
