"""ORM models for product account mapping."""

from finance_mapping.models.product_mapping import ProductAccountMapping
from finance_mapping.models.reference import Charge, GLAccount, PaymentType

__all__ = [
    "GLAccount",
    "PaymentType",
    "Charge",
    "ProductAccountMapping",
]
