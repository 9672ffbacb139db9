from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from expense_tracker.users.schemas import CamelModel


# =========================
# Create
# =========================
class ExpenseCreate(BaseModel):
    category: str
    subcategory: str
    mode: str                    # Card / Cash / UPI ...
    amount: float = Field(allow_inf_nan=False)
    date: datetime
    comments: Optional[str] = None


# =========================
# Filters
# =========================
class ExpenseFilter(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    mode: Optional[str] = None


# =========================
# Output
# =========================
class ExpenseOut(CamelModel):
    id: int
    category: str
    subcategory: str
    mode: str
    amount: float
    date: datetime
    comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SummaryOut(BaseModel):
    total: float
