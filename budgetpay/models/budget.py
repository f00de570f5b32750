from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Budget(SQLModel, table=True):
    """Running total of spend per (user, category).

    ``spent_amount`` only grows through the expense recorder's atomic
    increment; ``limit_amount`` is edited independently.
    """

    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_email", "category", name="uq_budgets_user_category"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    user_email: str = Field(index=True, max_length=255)
    category: str = Field(max_length=255)

    limit_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    spent_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
