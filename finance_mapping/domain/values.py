"""
Values -- Immutable domain value objects for product account mapping.

Responsibility:
    Provides the reference enumerations (ProductCategory,
    AccountingRuleVariant, RowKind) and the frozen value types that flow
    between the store reader, the resolver and the assembler:
    LedgerAccountRef, PaymentChannelRef, ChargeRef and MappingRow.

Architecture position:
    Mapping > Domain -- pure functional core, zero I/O.
    Imported by every other layer. No outward dependencies except
    finance_mapping.exceptions.

Invariants enforced:
    - A MappingRow is exactly one of: role row, payment-channel row, charge
      row. A row carrying both a payment type and a charge is rejected at
      construction.
    - Enum persisted values are stable; they match the integers stored in
      product_account_mappings.product_type and product accounting rules.

Failure modes:
    - ValueError on a MappingRow with both payment_type_id and charge_id.
    - UnknownCategoryError / UnknownAccountingVariantError from from_value()
      for unrecognised names or integers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from finance_mapping.exceptions import (
    UnknownAccountingVariantError,
    UnknownCategoryError,
)


class ProductCategory(str, Enum):
    """Financial product family a mapping belongs to."""

    LOAN = "loan"
    SAVINGS = "savings"
    SHARES = "shares"

    @property
    def persisted_value(self) -> int:
        """Integer stored in product_account_mappings.product_type."""
        return _CATEGORY_VALUES[self]

    @classmethod
    def from_value(cls, value: ProductCategory | str | int) -> ProductCategory:
        """Coerce an enum, name (any case) or persisted integer."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise UnknownCategoryError(value)
        if isinstance(value, int):
            for category, persisted in _CATEGORY_VALUES.items():
                if persisted == value:
                    return category
            raise UnknownCategoryError(value)
        if isinstance(value, str):
            normalized = value.strip().lower()
            for category in cls:
                if category.value == normalized:
                    return category
        raise UnknownCategoryError(value)


_CATEGORY_VALUES: dict[ProductCategory, int] = {
    ProductCategory.LOAN: 1,
    ProductCategory.SAVINGS: 2,
    ProductCategory.SHARES: 4,
}


class AccountingRuleVariant(str, Enum):
    """Accounting rule configured on a product."""

    NONE = "none"
    CASH_BASED = "cash_based"
    ACCRUAL_PERIODIC = "accrual_periodic"
    ACCRUAL_UPFRONT = "accrual_upfront"

    @property
    def persisted_value(self) -> int:
        return _VARIANT_VALUES[self]

    @property
    def is_accrual(self) -> bool:
        return self in (
            AccountingRuleVariant.ACCRUAL_PERIODIC,
            AccountingRuleVariant.ACCRUAL_UPFRONT,
        )

    @classmethod
    def from_value(
        cls, value: AccountingRuleVariant | str | int
    ) -> AccountingRuleVariant:
        """Coerce an enum, name (any case) or persisted integer."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise UnknownAccountingVariantError(value)
        if isinstance(value, int):
            for variant, persisted in _VARIANT_VALUES.items():
                if persisted == value:
                    return variant
            raise UnknownAccountingVariantError(value)
        if isinstance(value, str):
            normalized = value.strip().lower()
            for variant in cls:
                if variant.value == normalized:
                    return variant
        raise UnknownAccountingVariantError(value)


_VARIANT_VALUES: dict[AccountingRuleVariant, int] = {
    AccountingRuleVariant.NONE: 1,
    AccountingRuleVariant.CASH_BASED: 2,
    AccountingRuleVariant.ACCRUAL_PERIODIC: 3,
    AccountingRuleVariant.ACCRUAL_UPFRONT: 4,
}


class RowKind(str, Enum):
    """The three mutually exclusive kinds of mapping row."""

    ROLE = "role"
    PAYMENT_CHANNEL = "payment_channel"
    CHARGE = "charge"


@dataclass(frozen=True, slots=True)
class LedgerAccountRef:
    """A bound general ledger account."""

    id: int
    name: str
    code: str


@dataclass(frozen=True, slots=True)
class PaymentChannelRef:
    """A payment method (cash, bank transfer, ...)."""

    id: int
    name: str | None


@dataclass(frozen=True, slots=True)
class ChargeRef:
    """A fee or penalty charge definition."""

    id: int
    name: str | None
    is_penalty: bool


@dataclass(frozen=True, slots=True)
class MappingRow:
    """
    One persisted product-to-ledger configuration entry.

    Contract:
        Raw, read-only record produced by the store reader.
        ledger_account_id is the stored reference; ledger name and code are
        None when that GL account no longer exists.  The resolver decides
        whether that is fatal.

    Guarantees:
        - Immutable (frozen dataclass with slots).
        - payment_type_id and charge_id are never both set.
    """

    id: int
    product_id: int
    product_category: ProductCategory
    role_code: int
    ledger_account_id: int | None = None
    ledger_account_name: str | None = None
    ledger_account_code: str | None = None
    payment_type_id: int | None = None
    payment_type_name: str | None = None
    charge_id: int | None = None
    charge_name: str | None = None
    is_penalty_charge: bool | None = None

    def __post_init__(self) -> None:
        if self.payment_type_id is not None and self.charge_id is not None:
            raise ValueError(
                f"Mapping row {self.id} has both a payment type and a charge"
            )

    @property
    def kind(self) -> RowKind:
        if self.payment_type_id is not None:
            return RowKind.PAYMENT_CHANNEL
        if self.charge_id is not None:
            return RowKind.CHARGE
        return RowKind.ROLE

    @property
    def has_ledger_account(self) -> bool:
        """True when all three ledger fields were resolved by the join."""
        return (
            self.ledger_account_id is not None
            and self.ledger_account_name is not None
            and self.ledger_account_code is not None
        )

    def ledger_account(self) -> LedgerAccountRef | None:
        if not self.has_ledger_account:
            return None
        return LedgerAccountRef(
            id=self.ledger_account_id,
            name=self.ledger_account_name,
            code=self.ledger_account_code,
        )

    def payment_channel(self) -> PaymentChannelRef | None:
        if self.payment_type_id is None:
            return None
        return PaymentChannelRef(id=self.payment_type_id, name=self.payment_type_name)

    def charge(self) -> ChargeRef | None:
        if self.charge_id is None:
            return None
        return ChargeRef(
            id=self.charge_id,
            name=self.charge_name,
            is_penalty=bool(self.is_penalty_charge),
        )
