"""
Module: finance_mapping.models.product_mapping
Responsibility: ORM persistence for product-to-GL-account mapping entries --
    the configuration that binds a product's financial account roles,
    payment channels and charges to ledger accounts.
Architecture position: Mapping > Models.  May import from db/base.py and
    models/reference.py.

Invariants enforced:
    - A row is a role row (no payment type, no charge), a payment-channel row
      (payment_type_id set) or a charge row (charge_id set); never both
      payment type and charge (ck_mapping_single_kind).
    - financial_account_type is a role code whose meaning depends on
      product_type AND the product's accounting rule.  It is never
      interpreted here.
    - gl_account_id carries no foreign key.  A GL account deleted after the
      mapping was written must still be readable so the resolver can report
      the dangling reference.

Failure modes:
    - IntegrityError when a row sets both payment_type_id and charge_id.
"""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from finance_mapping.db.base import Identifier, TrackedBase


class ProductAccountMapping(TrackedBase):
    """
    One product-to-GL-account configuration entry.

    Contract:
        Rows are written by product setup and only read by this package.
        product_type stores ProductCategory.persisted_value.
    """

    __tablename__ = "product_account_mappings"

    __table_args__ = (
        CheckConstraint(
            "payment_type_id IS NULL OR charge_id IS NULL",
            name="ck_mapping_single_kind",
        ),
        Index("idx_mapping_product", "product_type", "product_id"),
    )

    product_id: Mapped[int] = mapped_column(
        Identifier,
        nullable=False,
    )

    # ProductCategory.persisted_value
    product_type: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Role code, scoped to (product_type, accounting rule)
    financial_account_type: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    gl_account_id: Mapped[int] = mapped_column(
        Identifier,
        nullable=False,
    )

    payment_type_id: Mapped[int | None] = mapped_column(
        Identifier,
        ForeignKey("payment_types.id"),
        nullable=True,
    )

    charge_id: Mapped[int | None] = mapped_column(
        Identifier,
        ForeignKey("charges.id"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<ProductAccountMapping {self.id}: product={self.product_id} "
            f"type={self.product_type} role={self.financial_account_type}>"
        )
