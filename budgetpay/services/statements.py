"""Paginated, date-filtered reads over the expense ledger."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from sqlalchemy import func
from sqlmodel import Session, select

from ..errors import ValidationError
from ..models.expense import Expense

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


@dataclass
class StatementPage:
    items: List[Expense]
    total: int
    page: int
    page_size: int


def _to_int(value: Union[int, str, None]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def clamp_page(page: Union[int, str, None]) -> int:
    page = _to_int(page)
    if page is None or page < 1:
        return 1
    return page


def clamp_page_size(page_size: Union[int, str, None]) -> int:
    # Non-numeric or out-of-range sizes fall back to the default instead of erroring.
    page_size = _to_int(page_size)
    if page_size is None or page_size < 1 or page_size > MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return page_size


def _filtered(stmt, user_key: str, date_from: Optional[date], date_to: Optional[date]):
    if date_from and date_to and date_from > date_to:
        raise ValidationError("'from' must not be after 'to'")
    stmt = stmt.where(Expense.user_email == user_key)
    if date_from:
        stmt = stmt.where(Expense.expense_date >= date_from)
    if date_to:
        stmt = stmt.where(Expense.expense_date <= date_to)
    return stmt


def query_statement(
    session: Session,
    user_key: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: Union[int, str, None] = 1,
    page_size: Union[int, str, None] = DEFAULT_PAGE_SIZE,
) -> StatementPage:
    """Newest first: date descending, then id descending for same-day entries."""
    page = clamp_page(page)
    page_size = clamp_page_size(page_size)

    total = session.exec(
        _filtered(select(func.count()).select_from(Expense), user_key, date_from, date_to)
    ).one()

    offset = (page - 1) * page_size
    items: List[Expense] = []
    # Past the last row there is nothing to fetch; this also keeps huge
    # offsets away from drivers with fixed-width integers.
    if offset < total:
        stmt = _filtered(select(Expense), user_key, date_from, date_to)
        stmt = (
            stmt.order_by(Expense.expense_date.desc(), Expense.id.desc())
            .offset(offset)
            .limit(page_size)
        )
        items = list(session.exec(stmt).all())

    return StatementPage(items=items, total=int(total), page=page, page_size=page_size)


def fetch_for_export(
    session: Session,
    user_key: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Expense]:
    """Full, unpaginated slice for the export renderers."""
    stmt = _filtered(select(Expense), user_key, date_from, date_to)
    stmt = stmt.order_by(Expense.expense_date.desc(), Expense.id.desc())
    return list(session.exec(stmt).all())
