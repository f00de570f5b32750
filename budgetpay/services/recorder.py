"""Expense recorder: ledger append plus budget increment as one unit."""

import logging
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlmodel import Session, select

from ..database import classify_db_error
from ..errors import TransactionError
from ..models.budget import Budget
from ..models.expense import Expense
from .upserts import build_upsert
from .wallet import get_total_funds

logger = logging.getLogger(__name__)

CATEGORY_OVER_LIMIT = "category_over_limit"
WALLET_EXCEEDED = "wallet_exceeded"


def _increment_spent(session: Session, user_key: str, category: str, amount: Decimal):
    return build_upsert(
        session,
        Budget.__table__,
        {
            "user_email": user_key,
            "category": category,
            "limit_amount": Decimal("0"),
            "spent_amount": amount,
        },
        ["user_email", "category"],
        lambda table, incoming: {"spent_amount": table.c.spent_amount + incoming.spent_amount},
    )


def record_expense(
    session: Session,
    user_key: str,
    *,
    amount: Decimal,
    category: str,
    description: str,
    expense_date: date,
) -> Expense:
    """Insert the expense and add ``amount`` to the category's spent total.

    Both writes share one transaction. On any failure the transaction is
    rolled back and ``TransactionError`` (or ``UpstreamStoreUnavailable``
    when the connection itself is gone) is raised. Inputs are expected to be
    validated already; the ``amount > 0`` check constraint backs this up.
    """
    expense = Expense(
        user_email=user_key,
        amount=amount,
        category=category,
        description=description,
        expense_date=expense_date,
    )
    try:
        session.add(expense)
        session.flush()
        session.exec(_increment_spent(session, user_key, category, amount))
        session.commit()
    except DBAPIError as e:
        session.rollback()
        logger.warning("Expense write rolled back for %s/%s: %s", user_key, category, e)
        raise classify_db_error(e) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("Expense write rolled back for %s/%s: %s", user_key, category, e)
        raise TransactionError() from e

    session.refresh(expense)
    logger.info("Recorded expense %s for %s: %s %s", expense.id, user_key, category, amount)
    return expense


def evaluate_alerts(session: Session, user_key: str, category: str, amount: Decimal) -> List[str]:
    """Advisory checks a client shows after a successful write of ``amount``; never stored.

    The category check only applies to a budget that existed before this
    write. A row the recorder just created holds limit 0 and spent == amount.
    """
    alerts = []

    budget = session.exec(
        select(Budget).where(Budget.user_email == user_key, Budget.category == category)
    ).first()
    if budget is not None:
        existed = budget.limit_amount > 0 or budget.spent_amount > amount
        if existed and budget.spent_amount > budget.limit_amount:
            alerts.append(CATEGORY_OVER_LIMIT)

    total_funds = get_total_funds(session, user_key)
    if total_funds > 0:
        total_spent = session.exec(
            select(func.coalesce(func.sum(Budget.spent_amount), 0)).where(Budget.user_email == user_key)
        ).one()
        if Decimal(str(total_spent)) > total_funds:
            alerts.append(WALLET_EXCEEDED)

    return alerts
