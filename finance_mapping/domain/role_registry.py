"""
RoleRegistry -- Financial account role codes per product category and
accounting rule.

Responsibility:
    Single source of truth translating a
    ``(ProductCategory, AccountingRuleVariant, role_code)`` triple into the
    output key used in resolved role maps (e.g. ``"fundSourceAccountId"``).

Architecture position:
    Mapping > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Role codes are only meaningful within a (category, variant) pair;
      code 1 is FUND_SOURCE for loans but SAVINGS_REFERENCE for savings.
    - The registry is built once at import and exposed read-only.
    - Accrual variants are registered for loans only.  Savings and shares
      under an accrual rule (or any product under NONE) have no roles.

Failure modes:
    (none -- ``lookup`` returns None for any unregistered triple)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from finance_mapping.domain.values import AccountingRuleVariant, ProductCategory
from finance_mapping.logging_config import get_logger

logger = get_logger("domain.role_registry")


class CashLoanRole(IntEnum):
    """Role codes for loan products under cash-based accounting."""

    FUND_SOURCE = 1
    LOAN_PORTFOLIO = 2
    INTEREST_ON_LOANS = 3
    INCOME_FROM_FEES = 4
    INCOME_FROM_PENALTIES = 5
    LOSSES_WRITTEN_OFF = 6
    TRANSFERS_SUSPENSE = 10
    OVERPAYMENT = 11
    INCOME_FROM_RECOVERY = 12


class AccrualLoanRole(IntEnum):
    """Role codes for loan products under either accrual rule."""

    FUND_SOURCE = 1
    LOAN_PORTFOLIO = 2
    INTEREST_ON_LOANS = 3
    INCOME_FROM_FEES = 4
    INCOME_FROM_PENALTIES = 5
    LOSSES_WRITTEN_OFF = 6
    INTEREST_RECEIVABLE = 7
    FEES_RECEIVABLE = 8
    PENALTIES_RECEIVABLE = 9
    TRANSFERS_SUSPENSE = 10
    OVERPAYMENT = 11
    INCOME_FROM_RECOVERY = 12


class CashSavingsRole(IntEnum):
    """Role codes for savings products under cash-based accounting."""

    SAVINGS_REFERENCE = 1
    SAVINGS_CONTROL = 2
    INTEREST_ON_SAVINGS = 3
    INCOME_FROM_FEES = 4
    INCOME_FROM_PENALTIES = 5
    TRANSFERS_SUSPENSE = 10
    OVERDRAFT_PORTFOLIO_CONTROL = 11
    INCOME_FROM_INTEREST = 12
    LOSSES_WRITTEN_OFF = 13
    ESCHEAT_LIABILITY = 14


class CashSharesRole(IntEnum):
    """Role codes for share products under cash-based accounting."""

    SHARES_REFERENCE = 1
    SHARES_SUSPENSE = 2
    INCOME_FROM_FEES = 3
    SHARES_EQUITY = 4


# Output keys, by role name, per product category
_LOAN_OUTPUT_KEYS: dict[str, str] = {
    "FUND_SOURCE": "fundSourceAccountId",
    "LOAN_PORTFOLIO": "loanPortfolioAccountId",
    "INTEREST_ON_LOANS": "interestOnLoanAccountId",
    "INCOME_FROM_FEES": "incomeFromFeeAccountId",
    "INCOME_FROM_PENALTIES": "incomeFromPenaltyAccountId",
    "LOSSES_WRITTEN_OFF": "writeOffAccountId",
    "INTEREST_RECEIVABLE": "interestReceivableAccountId",
    "FEES_RECEIVABLE": "feesReceivableAccountId",
    "PENALTIES_RECEIVABLE": "penaltiesReceivableAccountId",
    "TRANSFERS_SUSPENSE": "transfersInSuspenseAccountId",
    "OVERPAYMENT": "overpaymentLiabilityAccountId",
    "INCOME_FROM_RECOVERY": "incomeFromRecoveryAccountId",
}

_SAVINGS_OUTPUT_KEYS: dict[str, str] = {
    "SAVINGS_REFERENCE": "savingsReferenceAccountId",
    "SAVINGS_CONTROL": "savingsControlAccountId",
    "INTEREST_ON_SAVINGS": "interestOnSavingsAccountId",
    "INCOME_FROM_FEES": "incomeFromFeeAccountId",
    "INCOME_FROM_PENALTIES": "incomeFromPenaltyAccountId",
    "TRANSFERS_SUSPENSE": "transfersInSuspenseAccountId",
    "OVERDRAFT_PORTFOLIO_CONTROL": "overdraftPortfolioControlId",
    "INCOME_FROM_INTEREST": "incomeFromInterestId",
    "LOSSES_WRITTEN_OFF": "writeOffAccountId",
    "ESCHEAT_LIABILITY": "escheatLiabilityId",
}

_SHARES_OUTPUT_KEYS: dict[str, str] = {
    "SHARES_REFERENCE": "shareReferenceId",
    "SHARES_SUSPENSE": "shareSuspenseId",
    "INCOME_FROM_FEES": "incomeFromFeeAccountId",
    "SHARES_EQUITY": "shareEquityId",
}


@dataclass(frozen=True)
class RoleDefinition:
    """
    A registered financial account role.

    Guarantees:
        Frozen dataclass -- immutable after construction.

    Attributes:
        role_code: Persisted integer (financial_account_type column)
        output_key: Key used in the resolved role map
        role_name: Enum member name (e.g. "FUND_SOURCE")
        applicable_categories: Product categories the code applies to
        applicable_variants: Accounting rules the code applies to
    """

    role_code: int
    output_key: str
    role_name: str
    applicable_categories: frozenset[ProductCategory]
    applicable_variants: frozenset[AccountingRuleVariant]


# (category, variants, role enum, output keys) -- one entry per table
_ROLE_TABLES: tuple[
    tuple[ProductCategory, frozenset[AccountingRuleVariant], type[IntEnum], dict[str, str]],
    ...,
] = (
    (
        ProductCategory.LOAN,
        frozenset({AccountingRuleVariant.CASH_BASED}),
        CashLoanRole,
        _LOAN_OUTPUT_KEYS,
    ),
    (
        ProductCategory.LOAN,
        frozenset({
            AccountingRuleVariant.ACCRUAL_PERIODIC,
            AccountingRuleVariant.ACCRUAL_UPFRONT,
        }),
        AccrualLoanRole,
        _LOAN_OUTPUT_KEYS,
    ),
    (
        ProductCategory.SAVINGS,
        frozenset({AccountingRuleVariant.CASH_BASED}),
        CashSavingsRole,
        _SAVINGS_OUTPUT_KEYS,
    ),
    (
        ProductCategory.SHARES,
        frozenset({AccountingRuleVariant.CASH_BASED}),
        CashSharesRole,
        _SHARES_OUTPUT_KEYS,
    ),
)


def _build_registry() -> tuple[
    Mapping[tuple[ProductCategory, AccountingRuleVariant, int], RoleDefinition],
    tuple[RoleDefinition, ...],
]:
    entries: dict[tuple[ProductCategory, AccountingRuleVariant, int], RoleDefinition] = {}
    definitions: list[RoleDefinition] = []
    for category, variants, role_enum, output_keys in _ROLE_TABLES:
        for role in role_enum:
            definition = RoleDefinition(
                role_code=int(role),
                output_key=output_keys[role.name],
                role_name=role.name,
                applicable_categories=frozenset({category}),
                applicable_variants=variants,
            )
            definitions.append(definition)
            for variant in variants:
                key = (category, variant, int(role))
                if key in entries:
                    raise RuntimeError(f"Role code registered twice: {key}")
                entries[key] = definition
    return MappingProxyType(entries), tuple(definitions)


_REGISTRY, _DEFINITIONS = _build_registry()


def lookup(
    category: ProductCategory,
    variant: AccountingRuleVariant,
    code: int,
) -> str | None:
    """
    Translate a role code into its output key.

    Args:
        category: Product category owning the mapping.
        variant: Accounting rule configured on the product.
        code: Persisted role code.

    Returns:
        The output key, or None when the triple is not registered.
    """
    definition = _REGISTRY.get((category, variant, code))
    if definition is None:
        return None
    return definition.output_key


def lookup_definition(
    category: ProductCategory,
    variant: AccountingRuleVariant,
    code: int,
) -> RoleDefinition | None:
    """Like lookup(), returning the full RoleDefinition."""
    return _REGISTRY.get((category, variant, code))


def is_supported(category: ProductCategory, variant: AccountingRuleVariant) -> bool:
    """True when at least one role is registered for the pair."""
    return any(
        category in d.applicable_categories and variant in d.applicable_variants
        for d in _DEFINITIONS
    )


def definitions_for(
    category: ProductCategory,
    variant: AccountingRuleVariant,
) -> tuple[RoleDefinition, ...]:
    """Registered roles for a pair, ordered by role code."""
    found = tuple(
        d
        for d in _DEFINITIONS
        if category in d.applicable_categories and variant in d.applicable_variants
    )
    if not found:
        logger.debug(
            "role_variant_unregistered",
            extra={"category": category.value, "variant": variant.value},
        )
    return tuple(sorted(found, key=lambda d: d.role_code))


def all_definitions() -> tuple[RoleDefinition, ...]:
    """Every registered role definition, in table order."""
    return _DEFINITIONS


def registered_triples() -> frozenset[
    tuple[ProductCategory, AccountingRuleVariant, int]
]:
    return frozenset(_REGISTRY.keys())
