from fastapi import APIRouter, Depends, Request, Response, status
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.users import crud as user_crud, schemas, sessions
from expense_tracker.users.auth import get_current_session, get_session_token

router = APIRouter()


@router.post(
    "/register",
    response_model=schemas.UserSummary,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: schemas.RegisterSchema,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    user = user_crud.register(db, payload.name, payload.password, payload.relation)

    token = sessions.start(db, user, previous_token=get_session_token(request))
    sessions.set_session_cookie(response, token)
    return user


@router.post("/login", response_model=schemas.UserSummary)
def login(
    payload: schemas.LoginSchema,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    user = user_crud.authenticate(db, payload.identifier, payload.password)

    token = sessions.start(db, user, previous_token=get_session_token(request))
    sessions.set_session_cookie(response, token)
    return user


@router.post("/logout", response_model=schemas.MessageSchema)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    sessions.destroy(db, get_session_token(request))
    sessions.clear_session_cookie(response)
    logger.info("Session closed")
    return {"message": "Logged out."}


@router.get("/me", response_model=schemas.SessionUser)
def get_current_user_info(
    current: schemas.SessionRead = Depends(get_current_session),
):
    return current.user
