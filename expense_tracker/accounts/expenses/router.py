from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.users.auth import get_current_session
from expense_tracker.users.schemas import MessageSchema

from . import schemas, service

router = APIRouter(dependencies=[Depends(get_current_session)])


@router.post(
    "/addExpenses",
    response_model=schemas.ExpenseOut,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
):
    return service.add_expense(db, expense)


@router.get("/", response_model=List[schemas.ExpenseOut])
def list_expenses(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    mode: Optional[str] = None,
    db: Session = Depends(get_db),
):
    filters = schemas.ExpenseFilter(
        start_date=start_date,
        end_date=end_date,
        category=category,
        subcategory=subcategory,
        mode=mode,
    )
    return service.list_expenses(db, filters)


@router.get("/summary", response_model=schemas.SummaryOut)
def get_summary(
    type: Optional[str] = Query(None, description="weekly or monthly"),
    db: Session = Depends(get_db),
):
    return service.summarize(db, type)


@router.get("/expenses", response_model=List[schemas.ExpenseOut])
def list_all_expenses(db: Session = Depends(get_db)):
    return service.list_expenses(db)


@router.delete("/expenses/{expense_id}", response_model=MessageSchema)
def delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
):
    service.remove_expense(db, expense_id)
    return {"message": "Expense deleted successfully"}
