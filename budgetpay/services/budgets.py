import logging
from decimal import Decimal
from typing import List

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import ConflictError
from ..models.budget import Budget

logger = logging.getLogger(__name__)


def list_budgets(session: Session, user_key: str) -> List[Budget]:
    stmt = select(Budget).where(Budget.user_email == user_key).order_by(Budget.category.asc())
    return list(session.exec(stmt).all())


def create_budget(session: Session, user_key: str, category: str, limit: Decimal) -> Budget:
    """Create a (user, category) budget with nothing spent yet.

    Uniqueness is left to the ``uq_budgets_user_category`` constraint so two
    concurrent creators cannot both succeed.
    """
    budget = Budget(
        user_email=user_key,
        category=category,
        limit_amount=limit,
        spent_amount=Decimal("0"),
    )
    session.add(budget)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info("Budget %r already exists for %s", category, user_key)
        raise ConflictError("Budget already exists for category") from e
    session.refresh(budget)
    return budget


def update_limit(session: Session, user_key: str, category: str, limit: Decimal) -> int:
    """Set the limit for an existing budget; returns the affected-row count.

    A missing (user, category) pair is not an error: the count is 0.
    """
    stmt = (
        update(Budget)
        .where(Budget.user_email == user_key, Budget.category == category)
        .values(limit_amount=limit)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount
