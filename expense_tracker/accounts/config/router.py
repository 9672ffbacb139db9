from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.users.auth import get_current_session
from expense_tracker.users.schemas import SessionRead

from . import schemas, service

router = APIRouter()


@router.get("/config", response_model=schemas.ConfigOut)
def get_config(
    db: Session = Depends(get_db),
    current: SessionRead = Depends(get_current_session),
):
    return service.get_or_create(db)


@router.put("/config", response_model=schemas.ConfigOut)
def update_config(
    payload: schemas.ConfigUpdate,
    db: Session = Depends(get_db),
    current: SessionRead = Depends(get_current_session),
):
    return service.upsert(db, payload, updated_by=current.user.name)
