from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import field_validator
from sqlmodel import Field, Session, SQLModel

from ..core.security import get_current_user_key
from ..database import get_session
from ..services import budgets as budgets_service


router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)


class BudgetCreate(SQLModel):
    category: str = Field(min_length=1, max_length=255)
    limit: Decimal = Field(gt=0, max_digits=12, decimal_places=2)

    @field_validator("category")
    @classmethod
    def _strip_category(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category must not be blank")
        return v


class BudgetLimitUpdate(SQLModel):
    limit: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class BudgetRead(SQLModel):
    category: str
    limit: Decimal
    spent: Decimal


class BudgetUpdateOut(SQLModel):
    ok: bool = True
    affected: int


@router.get(
    "",
    response_model=List[BudgetRead],
)
def list_budgets(
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return [
        BudgetRead(category=b.category, limit=b.limit_amount, spent=b.spent_amount)
        for b in budgets_service.list_budgets(session, user_key)
    ]


@router.post(
    "",
    response_model=BudgetRead,
    status_code=status.HTTP_201_CREATED,
)
def create_budget(
    payload: BudgetCreate,
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    b = budgets_service.create_budget(session, user_key, payload.category, payload.limit)
    return BudgetRead(category=b.category, limit=b.limit_amount, spent=b.spent_amount)


@router.patch(
    "/{category}",
    response_model=BudgetUpdateOut,
)
def update_budget_limit(
    category: str,
    payload: BudgetLimitUpdate,
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    """Zero ``affected`` means no budget exists for that category."""
    affected = budgets_service.update_limit(session, user_key, category, payload.limit)
    return BudgetUpdateOut(affected=affected)
