"""
AccountMappingResolver -- Classifies product mapping rows into role,
payment-channel and charge bindings.

Responsibility:
    Joins the raw rows returned by a MappingStore against the role registry
    to produce the role map of a product, and produces the payment-channel
    and charge/penalty sub-mappings.

Architecture position:
    Mapping > Services.  Depends on the MappingStore protocol
    (selectors/base.py), the role registry (domain/role_registry.py) and
    the result assembler.  Holds no state between calls.

Invariants enforced:
    - A role code is interpreted only within the requested
      (category, variant) pair.  Codes not registered for the pair are
      skipped, never promoted to an error.
    - Two role rows resolving to the same output key: the later row in
      store order wins; the collision is logged and reported.
    - Results of one row kind never contain rows of another kind, even if
      the store returns them.
    - A row that is used in a result must reference an existing ledger
      account.

Failure modes:
    - MappingIntegrityError when a used row has no resolvable ledger account.
    - StorageUnavailableError propagates unchanged from the store.
    - UnknownCategoryError / UnknownAccountingVariantError for unrecognised
      category or variant inputs.
"""

from __future__ import annotations

import logging

from finance_mapping.domain import role_registry
from finance_mapping.domain.values import (
    AccountingRuleVariant,
    ChargeRef,
    LedgerAccountRef,
    MappingRow,
    PaymentChannelRef,
    ProductCategory,
    RowKind,
)
from finance_mapping.exceptions import MappingIntegrityError
from finance_mapping.logging_config import LogContext, get_logger
from finance_mapping.selectors.base import MappingStore
from finance_mapping.services.result_assembler import (
    ChargeMapping,
    PaymentChannelMapping,
    RoleAccountMap,
    assemble_charges,
    assemble_payment_channels,
    assemble_role_map,
)

logger = get_logger("services.mapping_resolver")


class AccountMappingResolver:
    """
    Resolves a product's account mappings from a MappingStore.

    Contract:
        Every call performs its own store read and returns a fresh result.
        Nothing is cached, retried or mutated.

    Guarantees:
        - resolve_role_accounts() returns an empty RoleAccountMap (never an
          error) for a product with no role rows or an unsupported
          (category, variant) pair.
        - Payment-channel and charge results preserve store order.

    Non-goals:
        - Does NOT validate that a product's role map is complete.
        - Does NOT post journal entries.
    """

    def __init__(
        self,
        store: MappingStore,
        *,
        warn_on_unregistered_codes: bool = False,
    ):
        """
        Args:
            store: Source of mapping rows.
            warn_on_unregistered_codes: Log skipped role codes at WARNING
                instead of DEBUG.
        """
        self._store = store
        self._skip_level = (
            logging.WARNING if warn_on_unregistered_codes else logging.DEBUG
        )

    def resolve_role_accounts(
        self,
        product_id: int,
        category: ProductCategory | str | int,
        variant: AccountingRuleVariant | str | int,
    ) -> RoleAccountMap:
        """
        Resolve the role -> ledger account map of a product.

        Args:
            product_id: Product whose mappings are resolved.
            category: Product category (enum, name or persisted value).
            variant: Accounting rule (enum, name or persisted value).

        Returns:
            RoleAccountMap keyed by output key (e.g. "fundSourceAccountId").

        Raises:
            MappingIntegrityError: If a registered role row points at a
                missing ledger account.
            StorageUnavailableError: If the store read fails.
        """
        category = ProductCategory.from_value(category)
        variant = AccountingRuleVariant.from_value(variant)

        with LogContext.bind(
            product_id=str(product_id),
            category=category.value,
            variant=variant.value,
        ):
            if not role_registry.is_supported(category, variant):
                logger.info(
                    "role_variant_unsupported",
                    extra={"reason": "no roles registered for category/variant"},
                )
                return assemble_role_map(
                    {},
                    product_id=product_id,
                    category=category,
                    variant=variant,
                    supported=False,
                )

            rows = self._store.fetch_rows(product_id, category, RowKind.ROLE)

            accounts: dict[str, LedgerAccountRef] = {}
            skipped: list[int] = []
            duplicates: list[str] = []

            for row in rows:
                if row.kind is not RowKind.ROLE:
                    continue

                output_key = role_registry.lookup(category, variant, row.role_code)
                if output_key is None:
                    skipped.append(row.role_code)
                    logger.log(
                        self._skip_level,
                        "role_code_unregistered",
                        extra={"mapping_id": row.id, "role_code": row.role_code},
                    )
                    continue

                account = self._require_account(row)

                if output_key in accounts:
                    duplicates.append(output_key)
                    logger.warning(
                        "role_mapping_duplicate",
                        extra={
                            "mapping_id": row.id,
                            "output_key": output_key,
                            "replaced_ledger_account_id": accounts[output_key].id,
                            "ledger_account_id": account.id,
                        },
                    )
                accounts[output_key] = account

            logger.info(
                "role_accounts_resolved",
                extra={
                    "row_count": len(rows),
                    "role_count": len(accounts),
                    "skipped_count": len(skipped),
                    "duplicate_count": len(duplicates),
                },
            )

            return assemble_role_map(
                accounts,
                product_id=product_id,
                category=category,
                variant=variant,
                skipped_role_codes=skipped,
                duplicate_output_keys=duplicates,
            )

    def resolve_payment_channel_accounts(
        self,
        product_id: int,
        category: ProductCategory | str | int,
    ) -> list[PaymentChannelMapping]:
        """
        Resolve payment channel -> fund source ledger account bindings.

        Independent of the accounting rule.  One entry per payment-channel
        row, in store order.
        """
        category = ProductCategory.from_value(category)

        with LogContext.bind(product_id=str(product_id), category=category.value):
            rows = self._store.fetch_rows(
                product_id, category, RowKind.PAYMENT_CHANNEL
            )
            pairs: list[tuple[PaymentChannelRef, LedgerAccountRef]] = []
            for row in rows:
                channel = row.payment_channel()
                if channel is None:
                    continue
                pairs.append((channel, self._require_account(row)))

            logger.debug(
                "payment_channel_accounts_resolved",
                extra={"mapping_count": len(pairs)},
            )
            return assemble_payment_channels(pairs)

    def resolve_charge_accounts(
        self,
        product_id: int,
        category: ProductCategory | str | int,
        want_penalty: bool,
    ) -> list[ChargeMapping]:
        """
        Resolve charge -> income ledger account bindings.

        Args:
            product_id: Product whose mappings are resolved.
            category: Product category.
            want_penalty: True for penalty charges, False for fee charges.

        Returns:
            One ChargeMapping per matching charge row, in store order.
        """
        category = ProductCategory.from_value(category)

        with LogContext.bind(product_id=str(product_id), category=category.value):
            rows = self._store.fetch_rows(
                product_id, category, RowKind.CHARGE, is_penalty=want_penalty
            )
            pairs: list[tuple[ChargeRef, LedgerAccountRef]] = []
            for row in rows:
                charge = row.charge()
                if charge is None or charge.is_penalty != want_penalty:
                    continue
                pairs.append((charge, self._require_account(row)))

            logger.debug(
                "charge_accounts_resolved",
                extra={"want_penalty": want_penalty, "mapping_count": len(pairs)},
            )
            return assemble_charges(pairs)

    @staticmethod
    def _require_account(row: MappingRow) -> LedgerAccountRef:
        account = row.ledger_account()
        if account is None:
            logger.error(
                "mapping_integrity_violation",
                extra={
                    "mapping_id": row.id,
                    "row_kind": row.kind.value,
                    "ledger_account_id": row.ledger_account_id,
                },
            )
            raise MappingIntegrityError(
                mapping_id=row.id,
                product_id=row.product_id,
                ledger_account_id=row.ledger_account_id,
                reason="referenced ledger account does not exist",
            )
        return account
