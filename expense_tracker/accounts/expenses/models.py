from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from expense_tracker.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)

    category = Column(String(100), nullable=False, index=True)
    subcategory = Column(String(100), nullable=False)
    mode = Column(String(50), nullable=False)
    amount = Column(Float, nullable=False)

    # Naive local time, see service.to_local_naive
    date = Column(DateTime, nullable=False, index=True)
    comments = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
