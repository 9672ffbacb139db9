from __future__ import annotations

from datetime import datetime, timezone

import pytest

from expense_tracker.accounts.expenses import schemas, service
from expense_tracker.errors import NotFoundError, ValidationError


def make(db, **overrides):
    data = {
        "category": "House",
        "subcategory": "Rent",
        "mode": "Card",
        "amount": 100,
        "date": "2024-01-05",
    }
    data.update(overrides)
    return service.add_expense(db, data)


def test_add_expense_from_dict(db_session):
    expense = make(db_session, comments="rent")
    assert expense.id is not None
    assert expense.date == datetime(2024, 1, 5)
    assert expense.comments == "rent"


@pytest.mark.parametrize("field", ["category", "subcategory", "mode", "amount", "date"])
def test_add_expense_requires_field(db_session, field):
    with pytest.raises(ValidationError) as excinfo:
        make(db_session, **{field: None})
    assert field in excinfo.value.message


def test_add_expense_converts_aware_dates_to_local(db_session, monkeypatch):
    monkeypatch.setattr(service.settings, "TIMEZONE", "Africa/Lagos")
    expense = make(db_session, date=datetime(2024, 1, 5, 23, 30, tzinfo=timezone.utc))
    # Lagos is UTC+1
    assert expense.date == datetime(2024, 1, 6, 0, 30)


def test_list_without_filters_returns_everything(db_session):
    make(db_session)
    make(db_session, category="Food")
    assert len(service.list_expenses(db_session)) == 2


def test_list_placeholder_all_is_ignored(db_session):
    make(db_session)
    filters = schemas.ExpenseFilter(category="all", mode="")
    assert len(service.list_expenses(db_session, filters)) == 1


def test_list_end_date_with_time_is_inclusive(db_session):
    make(db_session, date="2024-01-05T10:00:00")
    make(db_session, date="2024-01-05T12:00:00")

    filters = schemas.ExpenseFilter(end_date="2024-01-05T10:00:00")
    result = service.list_expenses(db_session, filters)
    assert [e.date.hour for e in result] == [10]


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2024, 1, 10, 15, 0), datetime(2024, 1, 8)),   # Wednesday
        (datetime(2024, 1, 8, 0, 0), datetime(2024, 1, 8)),     # Monday midnight
        (datetime(2024, 1, 14, 23, 59), datetime(2024, 1, 8)),  # Sunday is day 7
    ],
)
def test_weekly_period_starts_on_monday(now, expected):
    assert service.period_start("weekly", now) == expected


def test_monthly_period_starts_on_the_first():
    assert service.period_start("monthly", datetime(2024, 2, 29, 12, 0)) == datetime(2024, 2, 1)


def test_summarize_weekly_and_monthly(db_session):
    now = datetime(2024, 1, 10, 15, 0)
    make(db_session, amount=10, date="2024-01-08")   # this Monday
    make(db_session, amount=20, date="2024-01-07")   # last Sunday
    make(db_session, amount=40, date="2023-12-31")   # last month

    assert service.summarize(db_session, "weekly", now=now) == {"total": 10}
    assert service.summarize(db_session, "monthly", now=now) == {"total": 30}


def test_summarize_empty_is_zero(db_session):
    assert service.summarize(db_session, "weekly") == {"total": 0}


def test_summarize_rejects_unknown_period(db_session):
    with pytest.raises(ValidationError):
        service.summarize(db_session, "bogus")


def test_remove_expense(db_session):
    expense = make(db_session)
    service.remove_expense(db_session, expense.id)
    assert service.list_expenses(db_session) == []

    with pytest.raises(NotFoundError):
        service.remove_expense(db_session, expense.id)


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
def test_add_expense_rejects_non_finite_amount(db_session, amount):
    with pytest.raises(ValidationError) as excinfo:
        make(db_session, amount=amount)
    assert "amount" in excinfo.value.message
    assert service.list_expenses(db_session) == []


def test_list_filters_ignore_surrounding_whitespace(db_session):
    make(db_session, category=" House ")
    filters = schemas.ExpenseFilter(category="House ", subcategory=" Rent")
    assert len(service.list_expenses(db_session, filters)) == 1


def test_remove_expense_with_non_numeric_id(db_session):
    with pytest.raises(NotFoundError):
        service.remove_expense(db_session, "abc")
