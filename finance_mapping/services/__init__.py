"""Services for product account mapping resolution."""

from finance_mapping.services.mapping_resolver import AccountMappingResolver
from finance_mapping.services.product_mappings import (
    ProductAccountMappings,
    mappings_for,
    resolver_for,
)
from finance_mapping.services.result_assembler import (
    ChargeMapping,
    PaymentChannelMapping,
    ProductAccountingSnapshot,
    RoleAccountMap,
)

__all__ = [
    "AccountMappingResolver",
    "ProductAccountMappings",
    "resolver_for",
    "mappings_for",
    "RoleAccountMap",
    "PaymentChannelMapping",
    "ChargeMapping",
    "ProductAccountingSnapshot",
]
