"""Tests for mapping value objects and reference enumerations."""

from dataclasses import FrozenInstanceError

import pytest

from finance_mapping.domain.values import (
    AccountingRuleVariant,
    ChargeRef,
    LedgerAccountRef,
    MappingRow,
    PaymentChannelRef,
    ProductCategory,
    RowKind,
)
from finance_mapping.exceptions import (
    UnknownAccountingVariantError,
    UnknownCategoryError,
)


class TestProductCategory:

    def test_persisted_values(self):
        assert ProductCategory.LOAN.persisted_value == 1
        assert ProductCategory.SAVINGS.persisted_value == 2
        assert ProductCategory.SHARES.persisted_value == 4

    @pytest.mark.parametrize(
        "value, expected",
        [
            (ProductCategory.LOAN, ProductCategory.LOAN),
            ("loan", ProductCategory.LOAN),
            ("SAVINGS", ProductCategory.SAVINGS),
            (" Shares ", ProductCategory.SHARES),
            (2, ProductCategory.SAVINGS),
            (4, ProductCategory.SHARES),
        ],
    )
    def test_from_value(self, value, expected):
        assert ProductCategory.from_value(value) is expected

    @pytest.mark.parametrize("value", [3, 0, "client", None, True])
    def test_from_value_rejects_unknown(self, value):
        with pytest.raises(UnknownCategoryError) as exc_info:
            ProductCategory.from_value(value)
        assert exc_info.value.value == value
        assert exc_info.value.code == "UNKNOWN_PRODUCT_CATEGORY"


class TestAccountingRuleVariant:

    def test_persisted_values(self):
        assert AccountingRuleVariant.NONE.persisted_value == 1
        assert AccountingRuleVariant.CASH_BASED.persisted_value == 2
        assert AccountingRuleVariant.ACCRUAL_PERIODIC.persisted_value == 3
        assert AccountingRuleVariant.ACCRUAL_UPFRONT.persisted_value == 4

    def test_from_value(self):
        assert AccountingRuleVariant.from_value(2) is AccountingRuleVariant.CASH_BASED
        assert AccountingRuleVariant.from_value("ACCRUAL_UPFRONT") is (
            AccountingRuleVariant.ACCRUAL_UPFRONT
        )
        assert AccountingRuleVariant.from_value(
            AccountingRuleVariant.ACCRUAL_PERIODIC
        ) is AccountingRuleVariant.ACCRUAL_PERIODIC

    @pytest.mark.parametrize("value", [0, 5, "accrual", 2.0])
    def test_from_value_rejects_unknown(self, value):
        with pytest.raises(UnknownAccountingVariantError):
            AccountingRuleVariant.from_value(value)

    def test_is_accrual(self):
        assert AccountingRuleVariant.ACCRUAL_PERIODIC.is_accrual
        assert AccountingRuleVariant.ACCRUAL_UPFRONT.is_accrual
        assert not AccountingRuleVariant.CASH_BASED.is_accrual
        assert not AccountingRuleVariant.NONE.is_accrual


class TestMappingRow:

    def _row(self, **overrides) -> MappingRow:
        fields = dict(
            id=1,
            product_id=7,
            product_category=ProductCategory.LOAN,
            role_code=1,
            ledger_account_id=10,
            ledger_account_name="Cash",
            ledger_account_code="1000",
        )
        fields.update(overrides)
        return MappingRow(**fields)

    def test_role_row(self):
        row = self._row()
        assert row.kind is RowKind.ROLE
        assert row.payment_channel() is None
        assert row.charge() is None
        assert row.ledger_account() == LedgerAccountRef(id=10, name="Cash", code="1000")

    def test_payment_channel_row(self):
        row = self._row(payment_type_id=3, payment_type_name="Cheque")
        assert row.kind is RowKind.PAYMENT_CHANNEL
        assert row.payment_channel() == PaymentChannelRef(id=3, name="Cheque")

    def test_charge_row(self):
        row = self._row(charge_id=5, charge_name="Late fee", is_penalty_charge=True)
        assert row.kind is RowKind.CHARGE
        assert row.charge() == ChargeRef(id=5, name="Late fee", is_penalty=True)

    def test_charge_row_missing_penalty_flag_is_fee(self):
        row = self._row(charge_id=5, charge_name="Processing")
        assert row.charge().is_penalty is False

    def test_payment_type_and_charge_are_exclusive(self):
        with pytest.raises(ValueError):
            self._row(payment_type_id=3, charge_id=5)

    def test_dangling_ledger_reference(self):
        row = self._row(ledger_account_name=None, ledger_account_code=None)
        assert not row.has_ledger_account
        assert row.ledger_account() is None
        assert row.ledger_account_id == 10

    def test_frozen(self):
        row = self._row()
        with pytest.raises(FrozenInstanceError):
            row.role_code = 2  # type: ignore[misc]
