from datetime import datetime, time, timedelta
from typing import Optional

import pytz
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from expense_tracker.config import settings
from expense_tracker.errors import NotFoundError, ValidationError

from . import models, schemas

REQUIRED_FIELDS = ("category", "subcategory", "mode", "amount", "date")

# Placeholders the front-end sends for "no filter" on a field
NO_FILTER = {"", "all", "all-categories", "all-subcategories", "all-modes"}

PERIODS = ("weekly", "monthly")


# =========================
# Helpers: local time
# =========================
def local_tz():
    return pytz.timezone(settings.TIMEZONE)


def local_now() -> datetime:
    return datetime.now(local_tz()).replace(tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    """Stored dates are naive local time; aware inputs are converted first."""
    if value.tzinfo is not None:
        return value.astimezone(local_tz()).replace(tzinfo=None)
    return value


def parse_date_param(value: str, field: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")
    return to_local_naive(parsed)


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


# =========================
# Create Expense
# =========================
def add_expense(db: Session, expense: schemas.ExpenseCreate | dict) -> models.Expense:
    if isinstance(expense, schemas.ExpenseCreate):
        data = expense.model_dump()
    else:
        data = dict(expense or {})

    missing = [field for field in REQUIRED_FIELDS if _is_missing(data.get(field))]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")

    try:
        expense_in = schemas.ExpenseCreate.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}")

    new_expense = models.Expense(
        category=expense_in.category.strip(),
        subcategory=expense_in.subcategory.strip(),
        mode=expense_in.mode.strip(),
        amount=expense_in.amount,
        date=to_local_naive(expense_in.date),
        comments=expense_in.comments,
    )

    db.add(new_expense)
    db.commit()
    db.refresh(new_expense)

    logger.info(f"Expense {new_expense.id} added: {new_expense.category}/{new_expense.subcategory} {new_expense.amount}")
    return new_expense


# =========================
# List Expenses
# =========================
def list_expenses(db: Session, filters: Optional[schemas.ExpenseFilter] = None) -> list[models.Expense]:
    query = db.query(models.Expense)
    filters = filters or schemas.ExpenseFilter()

    # =========================
    # DATE FILTER (inclusive)
    # =========================
    if filters.start_date and filters.start_date.strip():
        start_dt = parse_date_param(filters.start_date, "startDate")
        query = query.filter(models.Expense.date >= start_dt)

    if filters.end_date and filters.end_date.strip():
        end_dt = parse_date_param(filters.end_date, "endDate")
        if len(filters.end_date.strip()) == 10:
            # Date only: cover the whole day, up to next midnight
            query = query.filter(models.Expense.date < end_dt + timedelta(days=1))
        else:
            query = query.filter(models.Expense.date <= end_dt)

    # =========================
    # EXACT MATCH FILTERS
    # =========================
    for field in ("category", "subcategory", "mode"):
        value = getattr(filters, field)
        if value is None or value.strip().lower() in NO_FILTER:
            continue
        # Stored values are stripped on insert
        query = query.filter(getattr(models.Expense, field) == value.strip())

    return (
        query
        .order_by(models.Expense.date.desc(), models.Expense.id.desc())
        .all()
    )


# =========================
# Summary
# =========================
def period_start(period: str, now: datetime) -> datetime:
    if period == "weekly":
        # isoweekday: Monday=1 ... Sunday=7
        monday = now.date() - timedelta(days=now.isoweekday() - 1)
        return datetime.combine(monday, time.min)
    return datetime(now.year, now.month, 1)


def summarize(db: Session, period: Optional[str], now: Optional[datetime] = None) -> dict:
    if period not in PERIODS:
        raise ValidationError("type must be weekly or monthly")

    start = period_start(period, now or local_now())
    total = (
        db.query(func.coalesce(func.sum(models.Expense.amount), 0))
        .filter(models.Expense.date >= start)
        .scalar()
    )
    return {"total": total or 0}


# =========================
# Delete Expense
# =========================
def remove_expense(db: Session, expense_id: int | str) -> None:
    try:
        expense_id = int(expense_id)
    except (TypeError, ValueError):
        # An id that cannot exist is simply not found
        raise NotFoundError("Expense not found")

    expense = db.get(models.Expense, expense_id)
    if expense is None:
        raise NotFoundError("Expense not found")

    db.delete(expense)
    db.commit()
    logger.info(f"Expense {expense_id} deleted")
