"""Server-side sessions referenced by an opaque cookie.

A session moves Anonymous -> Authenticated on login or registration and back
to Anonymous on logout or after ``SESSION_TTL_DAYS`` without a request. Every
successful validation pushes ``expires_at`` out by the full window.
"""
import re
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Response
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.config import settings
from expense_tracker.errors import SessionError
from expense_tracker.users import schemas
from expense_tracker.users.models import User, UserSession

TOKEN_BYTES = 32
# token_urlsafe(32) always yields 43 url-safe characters
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{43}$")


def session_ttl() -> timedelta:
    return timedelta(days=settings.SESSION_TTL_DAYS)


def is_well_formed(token: Optional[str]) -> bool:
    return isinstance(token, str) and bool(TOKEN_PATTERN.match(token))


def _summary(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "relation": user.relation,
        "is_admin": bool(user.is_admin),
    }


def _to_schema(row: UserSession) -> schemas.SessionRead:
    return schemas.SessionRead(
        session_id=row.session_id,
        user_id=row.user_id,
        user=schemas.SessionUser(**row.data),
        expires_at=row.expires_at,
    )


# =========================
# Start
# =========================
def start(db: Session, user: User, previous_token: Optional[str] = None) -> str:
    """Persist a fresh session for user and return the cookie value.

    Any session tied to previous_token is dropped first, so a cookie planted
    before login never becomes authenticated.
    """
    try:
        if is_well_formed(previous_token):
            db.query(UserSession).filter(UserSession.session_id == previous_token).delete()

        token = secrets.token_urlsafe(TOKEN_BYTES)
        db.add(
            UserSession(
                session_id=token,
                user_id=user.id,
                data=_summary(user),
                expires_at=datetime.utcnow() + session_ttl(),
            )
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.opt(exception=exc).error(f"Could not persist session for user {user.id}")
        raise SessionError() from exc

    return token


# =========================
# Validate
# =========================
def validate(db: Session, token: Optional[str]) -> Optional[schemas.SessionRead]:
    """Return the live session for token, or None when not logged in."""
    if not is_well_formed(token):
        return None

    row = db.get(UserSession, token)
    if row is None:
        return None

    now = datetime.utcnow()
    if row.expires_at <= now:
        db.delete(row)
        db.commit()
        return None

    row.expires_at = now + session_ttl()
    db.commit()
    db.refresh(row)
    return _to_schema(row)


# =========================
# Destroy
# =========================
def destroy(db: Session, token: Optional[str]) -> None:
    if not is_well_formed(token):
        return
    db.query(UserSession).filter(UserSession.session_id == token).delete()
    db.commit()


def purge_expired(db: Session) -> int:
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= datetime.utcnow())
        .delete()
    )
    db.commit()
    return deleted


# =========================
# Cookie helpers
# =========================
def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(session_ttl().total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )
