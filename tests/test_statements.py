from datetime import date

import pytest

from budgetpay.errors import ValidationError
from budgetpay.services.statements import (
    DEFAULT_PAGE_SIZE,
    clamp_page,
    clamp_page_size,
    fetch_for_export,
    query_statement,
)

from .conftest import OTHER_USER, USER


@pytest.mark.parametrize(
    "size, expected",
    [(0, 20), (500, 20), (-3, 20), (None, 20), ("abc", 20), ("", 20), ("5", 5), (1, 1), (200, 200)],
)
def test_page_size_falls_back_to_default(size, expected):
    assert clamp_page_size(size) == expected


def test_newest_date_first(session, add_expense):
    add_expense(day=date(2024, 1, 14), description="older")
    add_expense(day=date(2024, 1, 15), description="newer")

    page = query_statement(session, USER)
    assert [e.description for e in page.items] == ["newer", "older"]


def test_same_day_entries_ordered_by_id_descending(session, add_expense):
    first = add_expense(day=date(2024, 3, 1))
    second = add_expense(day=date(2024, 3, 1))

    page = query_statement(session, USER)
    assert [e.id for e in page.items] == [second.id, first.id]
    assert second.id > first.id


def test_pagination_and_total(session, add_expense):
    for day in range(1, 26):
        add_expense(day=date(2024, 1, day), description=f"d{day}")

    page = query_statement(session, USER, page=2, page_size=10)
    assert page.total == 25
    assert page.page == 2
    assert page.page_size == 10
    assert [e.description for e in page.items] == [f"d{d}" for d in range(15, 5, -1)]

    last = query_statement(session, USER, page=3, page_size=10)
    assert len(last.items) == 5


def test_invalid_page_size_uses_default(session, add_expense):
    for day in range(1, 26):
        add_expense(day=date(2024, 1, day))

    page = query_statement(session, USER, page=0, page_size=500)
    assert page.page == 1
    assert page.page_size == DEFAULT_PAGE_SIZE
    assert len(page.items) == DEFAULT_PAGE_SIZE


def test_date_range_is_inclusive_and_scoped_to_user(session, add_expense):
    add_expense(day=date(2023, 12, 31))
    add_expense(day=date(2024, 1, 1))
    add_expense(day=date(2024, 1, 31))
    add_expense(day=date(2024, 2, 1))
    add_expense(day=date(2024, 1, 10), user=OTHER_USER)

    page = query_statement(session, USER, date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))
    assert page.total == 2
    assert [e.expense_date for e in page.items] == [date(2024, 1, 31), date(2024, 1, 1)]


def test_reversed_range_is_rejected(session):
    with pytest.raises(ValidationError):
        query_statement(session, USER, date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))


def test_export_fetch_is_unpaginated(session, add_expense):
    for day in range(1, 29):
        add_expense(day=date(2024, 2, day))

    rows = fetch_for_export(session, USER)
    assert len(rows) == 28
    assert rows[0].expense_date == date(2024, 2, 28)


@pytest.mark.parametrize("page, expected", [(None, 1), (0, 1), ("-2", 1), ("xyz", 1), ("3", 3), (7, 7)])
def test_page_falls_back_to_first(page, expected):
    assert clamp_page(page) == expected


def test_page_past_the_end_is_empty(session, add_expense):
    add_expense()
    add_expense()

    page = query_statement(session, USER, page=10**30, page_size=5)
    assert page.items == []
    assert page.total == 2
    assert page.page == 10**30

    assert query_statement(session, USER, page=2, page_size=2).items == []
