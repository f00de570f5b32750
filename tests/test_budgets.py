from decimal import Decimal

import pytest

from budgetpay.errors import ConflictError
from budgetpay.services import budgets, wallet

from .conftest import OTHER_USER, USER


def test_create_budget_starts_with_nothing_spent(session):
    b = budgets.create_budget(session, USER, "Rent", Decimal("1200"))
    assert b.spent_amount == Decimal("0")
    assert b.limit_amount == Decimal("1200")


def test_duplicate_budget_is_rejected_and_row_unchanged(session, add_expense):
    budgets.create_budget(session, USER, "Food", Decimal("100"))
    add_expense(amount="12.00", category="Food")

    with pytest.raises(ConflictError):
        budgets.create_budget(session, USER, "Food", Decimal("500"))

    (food,) = budgets.list_budgets(session, USER)
    assert food.limit_amount == Decimal("100.00")
    assert food.spent_amount == Decimal("12.00")


def test_same_category_is_independent_per_user(session):
    budgets.create_budget(session, USER, "Food", Decimal("100"))
    budgets.create_budget(session, OTHER_USER, "Food", Decimal("50"))

    assert [b.limit_amount for b in budgets.list_budgets(session, OTHER_USER)] == [Decimal("50.00")]


def test_update_limit_reports_affected_rows_and_keeps_spent(session, add_expense):
    add_expense(amount="30.00", category="Food")

    assert budgets.update_limit(session, USER, "Food", Decimal("75")) == 1
    assert budgets.update_limit(session, USER, "Nope", Decimal("75")) == 0

    session.expire_all()
    (food,) = budgets.list_budgets(session, USER)
    assert food.limit_amount == Decimal("75.00")
    assert food.spent_amount == Decimal("30.00")


def test_list_budgets_is_ordered_by_category(session):
    for category in ("Travel", "Bills", "Food"):
        budgets.create_budget(session, USER, category, Decimal("10"))

    assert [b.category for b in budgets.list_budgets(session, USER)] == ["Bills", "Food", "Travel"]


def test_wallet_defaults_to_zero_and_last_write_wins(session):
    assert wallet.get_total_funds(session, USER) == Decimal("0")

    assert wallet.set_total_funds(session, USER, Decimal("500.50")) == Decimal("500.50")
    assert wallet.set_total_funds(session, USER, Decimal("20")) == Decimal("20.00")
    assert wallet.get_total_funds(session, OTHER_USER) == Decimal("0")
