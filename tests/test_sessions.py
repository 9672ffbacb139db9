from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from expense_tracker.errors import SessionError
from expense_tracker.users import sessions
from expense_tracker.users.models import UserSession


def test_start_then_validate(db_session, user):
    token = sessions.start(db_session, user)
    current = sessions.validate(db_session, token)

    assert current is not None
    assert current.user_id == user.id
    assert current.user.name == "alice"
    assert current.user.is_admin is False
    assert current.expires_at > datetime.utcnow() + timedelta(days=29)


def test_validate_unknown_or_malformed_token(db_session, user):
    assert sessions.validate(db_session, None) is None
    assert sessions.validate(db_session, "") is None
    assert sessions.validate(db_session, "not a token") is None
    assert sessions.validate(db_session, "A" * 43) is None


def test_destroy_then_validate(db_session, user):
    token = sessions.start(db_session, user)
    sessions.destroy(db_session, token)

    assert sessions.validate(db_session, token) is None
    # Idempotent
    sessions.destroy(db_session, token)


def test_start_drops_previous_session(db_session, user):
    old = sessions.start(db_session, user)
    new = sessions.start(db_session, user, previous_token=old)

    assert new != old
    assert sessions.validate(db_session, old) is None
    assert sessions.validate(db_session, new) is not None


def test_expired_session_is_rejected_and_removed(db_session, user):
    token = sessions.start(db_session, user)
    row = db_session.get(UserSession, token)
    row.expires_at = datetime.utcnow() - timedelta(seconds=1)
    db_session.commit()

    assert sessions.validate(db_session, token) is None
    assert db_session.get(UserSession, token) is None


def test_validation_slides_the_expiry(db_session, user):
    token = sessions.start(db_session, user)
    row = db_session.get(UserSession, token)
    row.expires_at = datetime.utcnow() + timedelta(days=1)
    db_session.commit()

    current = sessions.validate(db_session, token)
    assert current.expires_at > datetime.utcnow() + timedelta(days=29)


def test_start_reports_persistence_failure(db_session, user, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db_session, "commit", broken_commit)
    with pytest.raises(SessionError):
        sessions.start(db_session, user)


def test_purge_expired(db_session, user):
    live = sessions.start(db_session, user)
    stale = sessions.start(db_session, user)
    db_session.get(UserSession, stale).expires_at = datetime.utcnow() - timedelta(days=1)
    db_session.commit()

    assert sessions.purge_expired(db_session) == 1
    assert db_session.get(UserSession, live) is not None
