"""
Module: finance_mapping.selectors.mapping_selector
Responsibility: Read-only access to product mapping rows.  Left-joins GL
    account, payment type and charge reference data so every returned
    MappingRow is fully populated.  Performs no role interpretation.
Architecture position: Mapping > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from services/.

Invariants enforced:
    - One query shape per row kind: role rows (payment type AND charge
      absent), payment-channel rows (payment type present), charge rows
      (charge present, optionally filtered on the charge's penalty flag).
    - Rows are returned in mapping id order.
    - A mapping whose GL account no longer exists is returned with None
      ledger name and code; the read itself never fails on it.

Failure modes:
    - StorageUnavailableError wrapping any SQLAlchemyError raised by the
      query.  No retry is attempted.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_mapping.domain.values import MappingRow, ProductCategory, RowKind
from finance_mapping.exceptions import StorageUnavailableError
from finance_mapping.logging_config import get_logger
from finance_mapping.models.product_mapping import ProductAccountMapping
from finance_mapping.models.reference import Charge, GLAccount, PaymentType
from finance_mapping.selectors.base import BaseSelector

logger = get_logger("selectors.mapping")


class MappingSelector(BaseSelector):
    """
    Selector for product mapping rows -- the MappingStore over SQLAlchemy.

    Contract:
        fetch_rows() filters by product id and product category, then by row
        kind when one is given.  is_penalty only applies to charge rows.

    Guarantees:
        - ledger_account_id always carries the stored reference.  Name and
          code are both set when the GL join matched and both None when the
          referenced account no longer exists.
        - Never writes to the session.

    Non-goals:
        - Does NOT translate role codes (see domain/role_registry.py).
        - Does NOT cache results between calls.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _base_query(self, product_id: int, category: ProductCategory):
        return (
            select(
                ProductAccountMapping,
                GLAccount.id,
                GLAccount.name,
                GLAccount.code,
                PaymentType.name,
                Charge.name,
                Charge.is_penalty,
            )
            .outerjoin(GLAccount, ProductAccountMapping.gl_account_id == GLAccount.id)
            .outerjoin(PaymentType, ProductAccountMapping.payment_type_id == PaymentType.id)
            .outerjoin(Charge, ProductAccountMapping.charge_id == Charge.id)
            .where(
                ProductAccountMapping.product_type == category.persisted_value,
                ProductAccountMapping.product_id == product_id,
            )
        )

    def fetch_rows(
        self,
        product_id: int,
        category: ProductCategory,
        kind: RowKind | None = None,
        is_penalty: bool | None = None,
    ) -> list[MappingRow]:
        """
        Fetch mapping rows for a product.

        Args:
            product_id: Owning product.
            category: Product category the mapping belongs to.
            kind: Restrict to one row kind; None returns all rows.
            is_penalty: For charge rows, restrict to penalty (True) or fee
                (False) charges.

        Returns:
            List of MappingRow DTOs in mapping id order.

        Raises:
            StorageUnavailableError: If the query fails.
        """
        query = self._base_query(product_id, category)

        if kind is RowKind.ROLE:
            query = query.where(
                ProductAccountMapping.payment_type_id.is_(None),
                ProductAccountMapping.charge_id.is_(None),
            )
        elif kind is RowKind.PAYMENT_CHANNEL:
            query = query.where(ProductAccountMapping.payment_type_id.is_not(None))
        elif kind is RowKind.CHARGE:
            query = query.where(ProductAccountMapping.charge_id.is_not(None))
            if is_penalty is not None:
                query = query.where(Charge.is_penalty == is_penalty)

        query = query.order_by(ProductAccountMapping.id)

        try:
            results = self.session.execute(query).all()
        except SQLAlchemyError as exc:
            logger.error(
                "mapping_store_unavailable",
                extra={
                    "product_id": product_id,
                    "category": category.value,
                    "kind": kind.value if kind else None,
                },
                exc_info=True,
            )
            raise StorageUnavailableError(
                product_id, category.value, "fetch_rows"
            ) from exc

        rows = [
            self._to_row(category, *result)
            for result in results
        ]
        logger.debug(
            "mapping_rows_fetched",
            extra={
                "product_id": product_id,
                "category": category.value,
                "kind": kind.value if kind else None,
                "row_count": len(rows),
            },
        )
        return rows

    @staticmethod
    def _to_row(
        category: ProductCategory,
        mapping: ProductAccountMapping,
        gl_id: int | None,
        gl_name: str | None,
        gl_code: str | None,
        payment_type_name: str | None,
        charge_name: str | None,
        charge_is_penalty: bool | None,
    ) -> MappingRow:
        return MappingRow(
            id=mapping.id,
            product_id=mapping.product_id,
            product_category=category,
            role_code=mapping.financial_account_type,
            ledger_account_id=mapping.gl_account_id,
            ledger_account_name=gl_name if gl_id is not None else None,
            ledger_account_code=gl_code if gl_id is not None else None,
            payment_type_id=mapping.payment_type_id,
            payment_type_name=payment_type_name,
            charge_id=mapping.charge_id,
            charge_name=charge_name,
            is_penalty_charge=charge_is_penalty,
        )
