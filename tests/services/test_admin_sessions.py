"""Tests for admin login, token checks and logout."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from photo_contest.models import AdminSession
from photo_contest.services import admin_sessions
from photo_contest.services.errors import UnauthorizedError


def test_login_issues_distinct_tokens(db_session) -> None:
    first = admin_sessions.login(db_session, "secret", admin_password="secret")
    second = admin_sessions.login(db_session, "secret", admin_password="secret")

    assert first != second
    assert db_session.query(AdminSession).count() == 2


def test_login_wrong_password(db_session) -> None:
    with pytest.raises(UnauthorizedError):
        admin_sessions.login(db_session, "guess", admin_password="secret")
    assert db_session.query(AdminSession).count() == 0


def test_require_auth_accepts_live_token(db_session) -> None:
    token = admin_sessions.login(db_session, "secret", admin_password="secret")

    assert admin_sessions.require_auth(db_session, token).token == token


@pytest.mark.parametrize("token", [None, "", "not-a-session"])
def test_require_auth_rejects_unknown_tokens(db_session, token) -> None:
    with pytest.raises(UnauthorizedError):
        admin_sessions.require_auth(db_session, token)


def test_sessions_without_ttl_never_expire(db_session) -> None:
    issued = datetime(2020, 1, 1, tzinfo=UTC)
    token = admin_sessions.login(db_session, "secret", admin_password="secret", now=issued)

    session = admin_sessions.require_auth(db_session, token, now=issued + timedelta(days=3650))
    assert session.token == token


def test_expired_session_is_removed(db_session) -> None:
    issued = datetime(2026, 1, 1, tzinfo=UTC)
    token = admin_sessions.login(db_session, "secret", admin_password="secret", now=issued)

    admin_sessions.require_auth(db_session, token, ttl_seconds=60, now=issued + timedelta(seconds=59))
    with pytest.raises(UnauthorizedError):
        admin_sessions.require_auth(db_session, token, ttl_seconds=60, now=issued + timedelta(seconds=60))
    assert db_session.get(AdminSession, token) is None


def test_logout_is_idempotent(db_session) -> None:
    token = admin_sessions.login(db_session, "secret", admin_password="secret")

    admin_sessions.logout(db_session, token)
    admin_sessions.logout(db_session, token)
    admin_sessions.logout(db_session, "never-issued")
    admin_sessions.logout(db_session, None)

    with pytest.raises(UnauthorizedError):
        admin_sessions.require_auth(db_session, token)
