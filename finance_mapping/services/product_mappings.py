"""
ProductAccountMappings -- Per-product entry points over the resolver.

Responsibility:
    Exposes the lookups product setup and journal generation call for a
    given product family (role map, payment channels, fees, penalties) and
    a combined snapshot of all of them.

Architecture position:
    Mapping > Services.  Thin wrappers over AccountMappingResolver.

Non-goals:
    - Shares have no penalty charges and only cash-based accounting; no
      penalty lookup is offered for share products.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from finance_mapping.config import MappingSettings
from finance_mapping.domain.values import AccountingRuleVariant, ProductCategory
from finance_mapping.selectors.mapping_selector import MappingSelector
from finance_mapping.services.mapping_resolver import AccountMappingResolver
from finance_mapping.services.result_assembler import (
    ChargeMapping,
    PaymentChannelMapping,
    ProductAccountingSnapshot,
    RoleAccountMap,
)


class ProductAccountMappings:
    """Per-product-family facade over an AccountMappingResolver."""

    def __init__(self, resolver: AccountMappingResolver):
        self._resolver = resolver

    @property
    def resolver(self) -> AccountMappingResolver:
        return self._resolver

    # Loans

    def for_loan_product(
        self, product_id: int, variant: AccountingRuleVariant | str | int
    ) -> RoleAccountMap:
        return self._resolver.resolve_role_accounts(
            product_id, ProductCategory.LOAN, variant
        )

    def payment_channels_for_loan_product(
        self, product_id: int
    ) -> list[PaymentChannelMapping]:
        return self._resolver.resolve_payment_channel_accounts(
            product_id, ProductCategory.LOAN
        )

    def fees_for_loan_product(self, product_id: int) -> list[ChargeMapping]:
        return self._resolver.resolve_charge_accounts(
            product_id, ProductCategory.LOAN, want_penalty=False
        )

    def penalties_for_loan_product(self, product_id: int) -> list[ChargeMapping]:
        return self._resolver.resolve_charge_accounts(
            product_id, ProductCategory.LOAN, want_penalty=True
        )

    # Savings

    def for_savings_product(
        self, product_id: int, variant: AccountingRuleVariant | str | int
    ) -> RoleAccountMap:
        return self._resolver.resolve_role_accounts(
            product_id, ProductCategory.SAVINGS, variant
        )

    def payment_channels_for_savings_product(
        self, product_id: int
    ) -> list[PaymentChannelMapping]:
        return self._resolver.resolve_payment_channel_accounts(
            product_id, ProductCategory.SAVINGS
        )

    def fees_for_savings_product(self, product_id: int) -> list[ChargeMapping]:
        return self._resolver.resolve_charge_accounts(
            product_id, ProductCategory.SAVINGS, want_penalty=False
        )

    def penalties_for_savings_product(self, product_id: int) -> list[ChargeMapping]:
        return self._resolver.resolve_charge_accounts(
            product_id, ProductCategory.SAVINGS, want_penalty=True
        )

    # Shares

    def for_share_product(
        self, product_id: int, variant: AccountingRuleVariant | str | int
    ) -> RoleAccountMap:
        return self._resolver.resolve_role_accounts(
            product_id, ProductCategory.SHARES, variant
        )

    def payment_channels_for_share_product(
        self, product_id: int
    ) -> list[PaymentChannelMapping]:
        return self._resolver.resolve_payment_channel_accounts(
            product_id, ProductCategory.SHARES
        )

    def fees_for_share_product(self, product_id: int) -> list[ChargeMapping]:
        return self._resolver.resolve_charge_accounts(
            product_id, ProductCategory.SHARES, want_penalty=False
        )

    def resolve_all(
        self,
        product_id: int,
        category: ProductCategory | str | int,
        variant: AccountingRuleVariant | str | int,
    ) -> ProductAccountingSnapshot:
        """Resolve roles, payment channels, fees and penalties together."""
        category = ProductCategory.from_value(category)
        return ProductAccountingSnapshot(
            roles=self._resolver.resolve_role_accounts(product_id, category, variant),
            payment_channels=self._resolver.resolve_payment_channel_accounts(
                product_id, category
            ),
            fees=self._resolver.resolve_charge_accounts(
                product_id, category, want_penalty=False
            ),
            penalties=self._resolver.resolve_charge_accounts(
                product_id, category, want_penalty=True
            ),
        )


def resolver_for(
    session: Session, settings: MappingSettings | None = None
) -> AccountMappingResolver:
    """Build a resolver reading through the caller's session."""
    warn = settings.warn_on_unregistered_codes if settings is not None else False
    return AccountMappingResolver(
        MappingSelector(session), warn_on_unregistered_codes=warn
    )


def mappings_for(
    session: Session, settings: MappingSettings | None = None
) -> ProductAccountMappings:
    """Build the per-product facade over the caller's session."""
    return ProductAccountMappings(resolver_for(session, settings))
