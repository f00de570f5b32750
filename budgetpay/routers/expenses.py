from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import field_validator
from sqlmodel import Field, Session, SQLModel

from ..core.security import get_current_user_key
from ..database import get_session
from ..services import export as export_service
from ..services import recorder
from ..services.statements import DEFAULT_PAGE_SIZE, fetch_for_export, query_statement

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
)

# ─────────────────────────────
#   SCHEMAS (Pydantic/SQLModel)
# ─────────────────────────────

class ExpenseBase(SQLModel):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=1024)
    expense_date: date


class ExpenseCreate(ExpenseBase):
    @field_validator("category", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ExpenseRead(ExpenseBase):
    id: int
    user_email: str
    created_at: datetime


class ExpenseCreated(ExpenseRead):
    alerts: List[str] = []


class StatementOut(SQLModel):
    items: List[ExpenseRead]
    total: int
    page: int
    page_size: int


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.post(
    "",
    response_model=ExpenseCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    expense_in: ExpenseCreate,
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    """
    Record an expense and bump the category's spent total in one transaction.

    - ``alerts`` are advisory and computed after the commit.
    """
    expense = recorder.record_expense(
        session,
        user_key,
        amount=expense_in.amount,
        category=expense_in.category,
        description=expense_in.description,
        expense_date=expense_in.expense_date,
    )
    alerts = recorder.evaluate_alerts(session, user_key, expense.category, expense.amount)
    return ExpenseCreated(**ExpenseRead.model_validate(expense).model_dump(), alerts=alerts)


@router.get(
    "",
    response_model=StatementOut,
)
def list_expenses(
    date_from: Optional[date] = Query(default=None, alias="from"),
    date_to: Optional[date] = Query(default=None, alias="to"),
    page: Optional[str] = "1",
    page_size: Optional[str] = str(DEFAULT_PAGE_SIZE),
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    """
    Statement view, newest first.

    - ``page_size`` outside 1..200 or not a number silently falls back to the default.
    - ``page`` below 1 or not a number becomes 1.
    """
    result = query_statement(session, user_key, date_from, date_to, page, page_size)
    return StatementOut(
        items=[ExpenseRead.model_validate(e) for e in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/export")
def export_expenses(
    request: Request,
    format: str = "xlsx",
    date_from: Optional[date] = Query(default=None, alias="from"),
    date_to: Optional[date] = Query(default=None, alias="to"),
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    fmt = export_service.normalize_format(format)
    rows = fetch_for_export(session, user_key, date_from, date_to)
    document = export_service.render(
        rows, fmt, request.app.state.settings.currency, date_from, date_to
    )
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
