"""
Shared fixtures.

Every test gets its own SQLite file under ``tmp_path``; the schema is built
by the same Alembic migration the application runs at startup.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from budgetpay.config import Settings
from budgetpay.database import Store, migrate
from budgetpay.main import create_app
from budgetpay.services import recorder

USER = "u@x.com"
OTHER_USER = "other@x.com"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        database_url=f"sqlite:///{tmp_path / 'budgetpay.db'}",
        upload_dir=str(tmp_path / "uploads"),
        jwt_secret="test-secret",
        jwt_algorithm="HS256",
        currency="INR",
        log_level="WARNING",
    )


@pytest.fixture
def store(settings):
    store = Store(settings)
    store.open()
    migrate(store)
    yield store
    store.close()


@pytest.fixture
def session(store):
    with store.session() as s:
        yield s


@pytest.fixture
def add_expense(session):
    """Record an expense through the recorder with sensible defaults."""

    def _add(amount="10.00", category="Food", day=date(2024, 1, 15), description="Lunch", user=USER):
        return recorder.record_expense(
            session,
            user,
            amount=Decimal(amount),
            category=category,
            description=description,
            expense_date=day,
        )

    return _add


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def auth_client(client):
    resp = client.post(
        "/auth/signup",
        json={"email": "U@X.com", "password": "secret1", "name": "Uma"},
    )
    assert resp.status_code == 201, resp.text
    client.headers["Authorization"] = f"Bearer {resp.json()['access_token']}"
    return client
