from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Integer, String

from expense_tracker.database import Base

# The config table holds at most this one row
SINGLETON_ID = 1


class ExpenseConfig(Base):
    __tablename__ = "config"
    __table_args__ = (
        CheckConstraint(f"id = {SINGLETON_ID}", name="config_single_row"),
    )

    id = Column(Integer, primary_key=True, default=SINGLETON_ID)

    categories = Column(JSON, nullable=False, default=list)
    # {"House": ["Rent", "Electricity"], ...}
    subcategories = Column(JSON, nullable=False, default=dict)
    modes = Column(JSON, nullable=False, default=list)

    updated_by = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
