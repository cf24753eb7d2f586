"""
ResultAssembler -- Caller-facing result shapes for mapping resolution.

Responsibility:
    Wraps resolver output in the three public shapes: a read-only role map
    (output key -> LedgerAccountRef), a list of payment-channel mappings and
    a list of charge mappings.  Always produces an empty collection, never
    None, when nothing matched.

Architecture position:
    Mapping > Services -- pure shaping, zero I/O.

Invariants enforced:
    - An unsupported (category, variant) combination and a product with no
      role rows both yield an empty role map.  They differ only in the
      ``supported`` diagnostic flag, never in return type.
    - RoleAccountMap compares equal to a plain dict with the same items.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from finance_mapping.domain.values import (
    AccountingRuleVariant,
    ChargeRef,
    LedgerAccountRef,
    PaymentChannelRef,
    ProductCategory,
)


class RoleAccountMap(Mapping[str, LedgerAccountRef]):
    """
    Resolved role map for one product.

    Behaves as an immutable ``Mapping[str, LedgerAccountRef]`` and carries
    the diagnostics gathered while resolving:

    Attributes:
        product_id: Product the map was resolved for.
        category: Product category.
        variant: Accounting rule used to interpret role codes.
        supported: False when no roles are registered for (category, variant).
        skipped_role_codes: Role codes present in storage but not registered
            for (category, variant), in store order.
        duplicate_output_keys: Output keys that more than one row resolved to.
    """

    __slots__ = (
        "_accounts",
        "product_id",
        "category",
        "variant",
        "supported",
        "skipped_role_codes",
        "duplicate_output_keys",
    )

    def __init__(
        self,
        accounts: Mapping[str, LedgerAccountRef],
        *,
        product_id: int,
        category: ProductCategory,
        variant: AccountingRuleVariant,
        supported: bool = True,
        skipped_role_codes: Iterable[int] = (),
        duplicate_output_keys: Iterable[str] = (),
    ):
        self._accounts = MappingProxyType(dict(accounts))
        self.product_id = product_id
        self.category = category
        self.variant = variant
        self.supported = supported
        self.skipped_role_codes = tuple(skipped_role_codes)
        self.duplicate_output_keys = tuple(duplicate_output_keys)

    def __getitem__(self, key: str) -> LedgerAccountRef:
        return self._accounts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __repr__(self) -> str:
        return (
            f"RoleAccountMap({dict(self._accounts)!r}, "
            f"category={self.category.value}, variant={self.variant.value})"
        )

    @property
    def has_anomalies(self) -> bool:
        """True when rows were skipped or collided on an output key."""
        return bool(self.skipped_role_codes or self.duplicate_output_keys)

    def as_dict(self) -> dict[str, LedgerAccountRef]:
        return dict(self._accounts)


@dataclass(frozen=True)
class PaymentChannelMapping:
    """A payment channel bound to its fund-source ledger account."""

    payment_channel: PaymentChannelRef
    ledger_account: LedgerAccountRef


@dataclass(frozen=True)
class ChargeMapping:
    """A fee or penalty charge bound to its income ledger account."""

    charge: ChargeRef
    ledger_account: LedgerAccountRef


@dataclass(frozen=True)
class ProductAccountingSnapshot:
    """Every mapping configured for one product, resolved together."""

    roles: RoleAccountMap
    payment_channels: list[PaymentChannelMapping] = field(default_factory=list)
    fees: list[ChargeMapping] = field(default_factory=list)
    penalties: list[ChargeMapping] = field(default_factory=list)


def assemble_role_map(
    accounts: Mapping[str, LedgerAccountRef],
    *,
    product_id: int,
    category: ProductCategory,
    variant: AccountingRuleVariant,
    supported: bool = True,
    skipped_role_codes: Iterable[int] = (),
    duplicate_output_keys: Iterable[str] = (),
) -> RoleAccountMap:
    return RoleAccountMap(
        accounts,
        product_id=product_id,
        category=category,
        variant=variant,
        supported=supported,
        skipped_role_codes=skipped_role_codes,
        duplicate_output_keys=duplicate_output_keys,
    )


def assemble_payment_channels(
    pairs: Iterable[tuple[PaymentChannelRef, LedgerAccountRef]],
) -> list[PaymentChannelMapping]:
    return [
        PaymentChannelMapping(payment_channel=channel, ledger_account=account)
        for channel, account in pairs
    ]


def assemble_charges(
    pairs: Iterable[tuple[ChargeRef, LedgerAccountRef]],
) -> list[ChargeMapping]:
    return [
        ChargeMapping(charge=charge, ledger_account=account)
        for charge, account in pairs
    ]
