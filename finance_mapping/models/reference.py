"""
Module: finance_mapping.models.reference
Responsibility: ORM persistence for the reference data a product mapping
    points at: general ledger accounts, payment types and charges.
Architecture position: Mapping > Models.  May import from db/base.py only.

Invariants enforced:
    - GLAccount.code is unique (uq_gl_account_code).
    - Charge.is_penalty separates penalty charges from fee charges; the
      resolver filters charge mappings on it.
"""

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from finance_mapping.db.base import TrackedBase


class GLAccount(TrackedBase):
    """A general ledger account that product mappings bind roles to."""

    __tablename__ = "gl_accounts"

    __table_args__ = (
        UniqueConstraint("code", name="uq_gl_account_code"),
    )

    # Human-readable GL code
    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<GLAccount {self.code}: {self.name}>"


class PaymentType(TrackedBase):
    """A payment channel (cash, cheque, bank transfer, ...)."""

    __tablename__ = "payment_types"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PaymentType {self.id}: {self.name}>"


class Charge(TrackedBase):
    """A fee or penalty charge definition."""

    __tablename__ = "charges"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    is_penalty: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        kind = "penalty" if self.is_penalty else "fee"
        return f"<Charge {self.id}: {self.name} ({kind})>"
