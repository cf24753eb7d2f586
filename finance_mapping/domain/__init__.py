"""
Pure domain layer.

Reference enumerations, value objects and the role code registry, with NO
dependencies on the ORM, the database or I/O.
"""

from finance_mapping.domain.role_registry import (
    AccrualLoanRole,
    CashLoanRole,
    CashSavingsRole,
    CashSharesRole,
    RoleDefinition,
    lookup,
)
from finance_mapping.domain.values import (
    AccountingRuleVariant,
    ChargeRef,
    LedgerAccountRef,
    MappingRow,
    PaymentChannelRef,
    ProductCategory,
    RowKind,
)

__all__ = [
    "AccountingRuleVariant",
    "ProductCategory",
    "RowKind",
    "LedgerAccountRef",
    "PaymentChannelRef",
    "ChargeRef",
    "MappingRow",
    "RoleDefinition",
    "CashLoanRole",
    "AccrualLoanRole",
    "CashSavingsRole",
    "CashSharesRole",
    "lookup",
]
