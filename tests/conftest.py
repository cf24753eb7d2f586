"""
Pytest fixtures for the finance mapping test suite.

Provides:
- Structured logging configuration and a captured_logs fixture
- An in-memory SQLite database with the mapping tables (per test)
- Seed helpers for GL accounts, payment types, charges and mapping rows
- An in-memory MappingStore stub with caller-controlled row order

Environment Variables:
- DATABASE_URL: optional database URL.  Defaults to in-memory SQLite.
"""

import json
import logging
import os
from io import StringIO
from typing import Generator, Sequence

import pytest
from sqlalchemy.orm import Session

from finance_mapping.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from finance_mapping.domain.values import MappingRow, ProductCategory, RowKind
from finance_mapping.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from finance_mapping.models import Charge, GLAccount, PaymentType, ProductAccountMapping

DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture finance_mapping logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, resolver):
            resolver.resolve_role_accounts(...)
            logs = captured_logs()
            assert any(r["message"] == "role_accounts_resolved" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("finance_mapping")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh engine with all mapping tables created."""
    engine = init_engine_from_url(get_database_url())
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """Session bound to the test engine; rolled back after each test."""
    session = get_session()
    yield session
    session.rollback()
    session.close()


class MappingSeeder:
    """Writes reference data and mapping rows for tests."""

    def __init__(self, session: Session):
        self.session = session

    def gl_account(self, code: str, name: str | None = None) -> GLAccount:
        account = GLAccount(code=code, name=name or f"Account {code}")
        self.session.add(account)
        self.session.flush()
        return account

    def payment_type(self, name: str) -> PaymentType:
        payment_type = PaymentType(name=name)
        self.session.add(payment_type)
        self.session.flush()
        return payment_type

    def charge(self, name: str, is_penalty: bool = False) -> Charge:
        charge = Charge(name=name, is_penalty=is_penalty)
        self.session.add(charge)
        self.session.flush()
        return charge

    def mapping(
        self,
        product_id: int,
        category: ProductCategory,
        role_code: int,
        gl_account_id: int,
        *,
        payment_type_id: int | None = None,
        charge_id: int | None = None,
    ) -> ProductAccountMapping:
        mapping = ProductAccountMapping(
            product_id=product_id,
            product_type=category.persisted_value,
            financial_account_type=role_code,
            gl_account_id=gl_account_id,
            payment_type_id=payment_type_id,
            charge_id=charge_id,
        )
        self.session.add(mapping)
        self.session.flush()
        return mapping


@pytest.fixture
def seeder(session) -> MappingSeeder:
    return MappingSeeder(session)


# =============================================================================
# Store stubs
# =============================================================================


class StubMappingStore:
    """
    In-memory MappingStore returning rows in insertion order.

    Applies the same kind / penalty filters as MappingSelector unless
    ``filter_rows`` is False, in which case every row is returned as-is
    (simulates a store that ignores the query shape).
    """

    def __init__(self, rows: Sequence[MappingRow] = (), filter_rows: bool = True):
        self.rows = list(rows)
        self.filter_rows = filter_rows
        self.calls: list[tuple] = []

    def fetch_rows(
        self,
        product_id: int,
        category: ProductCategory,
        kind: RowKind | None = None,
        is_penalty: bool | None = None,
    ) -> list[MappingRow]:
        self.calls.append((product_id, category, kind, is_penalty))
        if not self.filter_rows:
            return list(self.rows)
        result = []
        for row in self.rows:
            if row.product_id != product_id or row.product_category != category:
                continue
            if kind is not None and row.kind != kind:
                continue
            if (
                kind is RowKind.CHARGE
                and is_penalty is not None
                and bool(row.is_penalty_charge) != is_penalty
            ):
                continue
            result.append(row)
        return result


class FailingMappingStore:
    """MappingStore whose every read raises the given exception."""

    def __init__(self, exc: Exception):
        self.exc = exc

    def fetch_rows(self, product_id, category, kind=None, is_penalty=None):
        raise self.exc


_next_row_id = iter(range(1, 1_000_000))


def make_row(
    role_code: int = 1,
    *,
    product_id: int = 1,
    category: ProductCategory = ProductCategory.LOAN,
    account_id: int | None = 100,
    account_name: str | None = None,
    account_code: str | None = None,
    payment_type_id: int | None = None,
    payment_type_name: str | None = None,
    charge_id: int | None = None,
    charge_name: str | None = None,
    is_penalty: bool | None = None,
    row_id: int | None = None,
) -> MappingRow:
    """Build a MappingRow; account_id=None simulates a dangling GL reference."""
    has_account = account_id is not None
    return MappingRow(
        id=row_id if row_id is not None else next(_next_row_id),
        product_id=product_id,
        product_category=category,
        role_code=role_code,
        ledger_account_id=account_id,
        ledger_account_name=(account_name or f"Account {account_id}") if has_account else None,
        ledger_account_code=(account_code or f"GL-{account_id}") if has_account else None,
        payment_type_id=payment_type_id,
        payment_type_name=payment_type_name,
        charge_id=charge_id,
        charge_name=charge_name,
        is_penalty_charge=is_penalty,
    )


@pytest.fixture
def row_factory():
    """The make_row helper, as a fixture."""
    return make_row


@pytest.fixture
def stub_store():
    """Factory for StubMappingStore instances."""
    return StubMappingStore


@pytest.fixture
def failing_store():
    """Factory for FailingMappingStore instances."""
    return FailingMappingStore
