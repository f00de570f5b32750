from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func
from sqlmodel import select

from budgetpay.errors import TransactionError
from budgetpay.models.budget import Budget
from budgetpay.models.expense import Expense
from budgetpay.services import budgets, recorder, wallet

from .conftest import USER


def _budget(session, category, user=USER):
    session.expire_all()
    return session.exec(
        select(Budget).where(Budget.user_email == user, Budget.category == category)
    ).first()


def test_first_expense_creates_aggregate_with_zero_limit(session, add_expense):
    expense = add_expense(amount="45.20", category="Food")

    assert expense.id is not None
    b = _budget(session, "Food")
    assert b.spent_amount == Decimal("45.20")
    assert b.limit_amount == Decimal("0")


def test_spent_accumulates_per_category(session, add_expense):
    add_expense(amount="10.50", category="Food")
    add_expense(amount="4.25", category="Food")
    add_expense(amount="99.99", category="Travel")

    assert _budget(session, "Food").spent_amount == Decimal("14.75")
    assert _budget(session, "Travel").spent_amount == Decimal("99.99")


def test_existing_budget_keeps_its_limit(session, add_expense):
    budgets.create_budget(session, USER, "Food", Decimal("200"))
    add_expense(amount="30.00", category="Food")

    b = _budget(session, "Food")
    assert b.limit_amount == Decimal("200.00")
    assert b.spent_amount == Decimal("30.00")


def test_failed_insert_rolls_back_budget_increment(session, add_expense):
    add_expense(amount="20.00", category="Food")

    # amount <= 0 is rejected by the expenses check constraint
    with pytest.raises(TransactionError):
        recorder.record_expense(
            session,
            USER,
            amount=Decimal("-5.00"),
            category="Food",
            description="Refund",
            expense_date=date(2024, 1, 16),
        )

    assert _budget(session, "Food").spent_amount == Decimal("20.00")
    assert session.exec(select(func.count()).select_from(Expense)).one() == 1


def test_concurrent_recordings_do_not_lose_updates(store):
    amounts = [Decimal("1.25")] * 24 + [Decimal("0.10")] * 16

    def _record(amount):
        with store.session() as s:
            recorder.record_expense(
                s,
                USER,
                amount=amount,
                category="Groceries",
                description="shop",
                expense_date=date(2024, 2, 1),
            )

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_record, amounts))

    with store.session() as s:
        b = s.exec(select(Budget).where(Budget.category == "Groceries")).one()
        count = s.exec(select(func.count()).select_from(Expense)).one()

    assert count == len(amounts)
    assert b.spent_amount == sum(amounts)


def test_alert_when_category_limit_exceeded(session, add_expense):
    budgets.create_budget(session, USER, "Food", Decimal("50"))
    add_expense(amount="40.00", category="Food")
    assert recorder.evaluate_alerts(session, USER, "Food", Decimal("40.00")) == []

    add_expense(amount="15.00", category="Food")
    assert recorder.evaluate_alerts(session, USER, "Food", Decimal("15.00")) == [recorder.CATEGORY_OVER_LIMIT]


def test_auto_created_category_alerts_from_its_second_expense(session, add_expense):
    add_expense(amount="10.00", category="Misc")
    assert recorder.evaluate_alerts(session, USER, "Misc", Decimal("10.00")) == []

    add_expense(amount="5.00", category="Misc")
    assert recorder.evaluate_alerts(session, USER, "Misc", Decimal("5.00")) == [recorder.CATEGORY_OVER_LIMIT]


def test_wallet_alert_only_with_positive_funds(session, add_expense):
    add_expense(amount="60.00", category="Food")
    add_expense(amount="50.00", category="Travel")
    assert recorder.evaluate_alerts(session, USER, "Travel", Decimal("50.00")) == []

    wallet.set_total_funds(session, USER, Decimal("100"))
    assert recorder.evaluate_alerts(session, USER, "Travel", Decimal("50.00")) == [recorder.WALLET_EXCEEDED]

    wallet.set_total_funds(session, USER, Decimal("200"))
    assert recorder.evaluate_alerts(session, USER, "Travel", Decimal("50.00")) == []


def test_recorded_expense_has_timezone_aware_timestamp(add_expense):
    expense = add_expense(amount="3.50")
    assert expense.id is not None
    assert expense.created_at is not None

    pending = Expense(
        user_email=USER,
        amount=Decimal("1.00"),
        category="Food",
        description="Tea",
        expense_date=date(2024, 1, 1),
    )
    assert pending.created_at.tzinfo is not None
