from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from expense_tracker.config import settings
from expense_tracker.database import get_db
from expense_tracker.errors import AuthError
from expense_tracker.users import schemas, sessions


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_session(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> schemas.SessionRead:
    """Gate for protected routes: 401 unless the cookie maps to a live session."""
    token = get_session_token(request)
    current = sessions.validate(db, token)
    if current is None:
        raise AuthError("Not authenticated")

    # Sliding window: re-issue the cookie with a fresh max-age
    sessions.set_session_cookie(response, token)
    return current
