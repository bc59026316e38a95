"""Pytest configuration and shared fixtures.

Tests run against an in-memory SQLite database. Every test gets a session
joined to an outer transaction that is rolled back afterwards, so handlers
may commit freely without leaking state between tests.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import erpforms.db.models  # noqa: F401  registers tables on Base.metadata
from erpforms.db.base import Base
from erpforms.core.security import create_access_token
from erpforms.modules import sales_invoice, stock_correction  # noqa: F401  registers side effects

from tests.factories import create_setting_journal


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT to work
    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def client(db_session):
    """API client whose requests share the test session."""
    from erpforms.api.deps import get_db
    from erpforms.api.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers


@pytest.fixture
def stock_correction_journal(db_session):
    return create_setting_journal(
        db_session, feature="stock correction", name="difference stock expenses"
    )


@pytest.fixture
def sales_journal(db_session):
    """Journal mappings of the sales feature, keyed by setting name."""
    names = ["account receivable", "sales income", "income tax payable", "cost of sales"]
    return {
        name: create_setting_journal(db_session, feature="sales", name=name)
        for name in names
    }
