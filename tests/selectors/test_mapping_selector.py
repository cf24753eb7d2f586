"""
MappingSelector query tests against a real database session.

Verifies:
- The three query shapes: role rows, payment-channel rows, charge rows.
- Charge rows filter on the charge's penalty flag, never on the role code.
- Rows are returned in mapping id order, scoped to product and category.
- A dangling GL reference is read back with no ledger name or code.
- Query failures surface as StorageUnavailableError.
"""

import pytest
from sqlalchemy.exc import OperationalError

from finance_mapping.domain.values import MappingRow, ProductCategory, RowKind
from finance_mapping.exceptions import StorageUnavailableError
from finance_mapping.selectors.mapping_selector import MappingSelector

LOAN = ProductCategory.LOAN
SAVINGS = ProductCategory.SAVINGS


@pytest.fixture
def seeded(seeder):
    """One loan product with every row kind, plus noise on other products."""
    fund = seeder.gl_account("1000", "Fund Source")
    portfolio = seeder.gl_account("1100", "Loan Portfolio")
    fee_income = seeder.gl_account("4100", "Fee Income")
    penalty_income = seeder.gl_account("4200", "Penalty Income")
    cash = seeder.payment_type("Cash")
    late_fee = seeder.charge("Late payment", is_penalty=True)
    processing = seeder.charge("Processing fee", is_penalty=False)

    rows = {
        "fund": seeder.mapping(10, LOAN, 1, fund.id),
        "portfolio": seeder.mapping(10, LOAN, 2, portfolio.id),
        "cash": seeder.mapping(10, LOAN, 1, fund.id, payment_type_id=cash.id),
        "penalty": seeder.mapping(10, LOAN, 5, penalty_income.id, charge_id=late_fee.id),
        "fee": seeder.mapping(10, LOAN, 4, fee_income.id, charge_id=processing.id),
        # Same product id, other category
        "savings": seeder.mapping(10, SAVINGS, 1, fund.id),
        # Other loan product
        "other": seeder.mapping(11, LOAN, 1, portfolio.id),
    }
    return {
        "accounts": {
            "fund": fund,
            "portfolio": portfolio,
            "fee_income": fee_income,
            "penalty_income": penalty_income,
        },
        "payment_type": cash,
        "charges": {"penalty": late_fee, "fee": processing},
        "rows": rows,
    }


class TestFetchRowsQueryShapes:

    def test_role_rows_exclude_payment_and_charge_rows(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, LOAN, RowKind.ROLE)

        assert [r.id for r in rows] == [
            seeded["rows"]["fund"].id,
            seeded["rows"]["portfolio"].id,
        ]
        assert all(r.kind is RowKind.ROLE for r in rows)

    def test_role_row_carries_ledger_account(self, session, seeded):
        row = MappingSelector(session).fetch_rows(10, LOAN, RowKind.ROLE)[0]
        fund = seeded["accounts"]["fund"]

        assert isinstance(row, MappingRow)
        assert row.role_code == 1
        assert row.product_category is LOAN
        assert row.ledger_account_id == fund.id
        assert row.ledger_account_name == "Fund Source"
        assert row.ledger_account_code == "1000"

    def test_payment_channel_rows(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, LOAN, RowKind.PAYMENT_CHANNEL)

        assert len(rows) == 1
        row = rows[0]
        assert row.payment_type_id == seeded["payment_type"].id
        assert row.payment_type_name == "Cash"
        assert row.charge_id is None
        assert row.ledger_account_id == seeded["accounts"]["fund"].id

    def test_charge_rows_penalty_filter(self, session, seeded):
        selector = MappingSelector(session)

        penalties = selector.fetch_rows(10, LOAN, RowKind.CHARGE, is_penalty=True)
        fees = selector.fetch_rows(10, LOAN, RowKind.CHARGE, is_penalty=False)

        assert [r.charge_id for r in penalties] == [seeded["charges"]["penalty"].id]
        assert penalties[0].is_penalty_charge is True
        assert penalties[0].charge_name == "Late payment"
        assert [r.charge_id for r in fees] == [seeded["charges"]["fee"].id]
        assert fees[0].is_penalty_charge is False

    def test_charge_rows_without_penalty_filter(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, LOAN, RowKind.CHARGE)
        assert len(rows) == 2

    def test_penalty_filter_ignored_for_role_rows(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, LOAN, RowKind.ROLE, is_penalty=True)
        assert len(rows) == 2

    def test_all_rows_when_kind_omitted(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, LOAN)

        ids = [r.id for r in rows]
        assert ids == sorted(ids)
        assert len(rows) == 5
        assert {r.kind for r in rows} == set(RowKind)


class TestFetchRowsScoping:

    def test_category_scopes_rows(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(10, SAVINGS, RowKind.ROLE)
        assert [r.id for r in rows] == [seeded["rows"]["savings"].id]
        assert rows[0].product_category is SAVINGS

    def test_product_scopes_rows(self, session, seeded):
        rows = MappingSelector(session).fetch_rows(11, LOAN)
        assert [r.id for r in rows] == [seeded["rows"]["other"].id]

    def test_unknown_product_is_empty(self, session, seeded):
        assert MappingSelector(session).fetch_rows(999, LOAN) == []

    def test_rows_ordered_by_mapping_id(self, session, seeder):
        account = seeder.gl_account("2000")
        inserted = [seeder.mapping(20, LOAN, code, account.id) for code in (3, 1, 2)]

        rows = MappingSelector(session).fetch_rows(20, LOAN, RowKind.ROLE)

        assert [r.id for r in rows] == [m.id for m in inserted]
        assert [r.role_code for r in rows] == [3, 1, 2]


class TestDanglingReference:

    def test_missing_gl_account_read_without_name_or_code(self, session, seeder):
        seeder.mapping(30, LOAN, 3, gl_account_id=987654)

        rows = MappingSelector(session).fetch_rows(30, LOAN, RowKind.ROLE)

        assert len(rows) == 1
        row = rows[0]
        assert row.ledger_account_id == 987654
        assert row.ledger_account_name is None
        assert row.ledger_account_code is None
        assert not row.has_ledger_account


class _BrokenSession:
    """Session stand-in whose every query fails at the driver level."""

    def execute(self, statement):
        raise OperationalError("SELECT", {}, Exception("connection refused"))


class TestStorageFailure:

    def test_sqlalchemy_error_wrapped(self, captured_logs):
        selector = MappingSelector(_BrokenSession())

        with pytest.raises(StorageUnavailableError) as exc_info:
            selector.fetch_rows(1, LOAN, RowKind.ROLE)

        error = exc_info.value
        assert error.code == "STORAGE_UNAVAILABLE"
        assert error.product_id == 1
        assert error.category == "loan"
        assert isinstance(error.__cause__, OperationalError)

        records = [r for r in captured_logs() if r["message"] == "mapping_store_unavailable"]
        assert len(records) == 1
        assert records[0]["level"] == "ERROR"
        assert records[0]["kind"] == "role"

    def test_selector_does_not_write(self, session, seeded):
        MappingSelector(session).fetch_rows(10, LOAN)
        assert not session.new
        assert not session.dirty
        assert not session.deleted
