"""
Module: finance_mapping.selectors.base
Responsibility: Abstract base class for read-only query selectors, and the
    MappingStore protocol the resolver depends on.
Architecture position: Mapping > Selectors.  May import from db/, models/ and
    domain/values.py.  MUST NOT import from services/.

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - DTO return convention: Selectors return frozen dataclasses, NOT raw ORM
      model instances.
    - Session ownership: the caller owns the session and its transaction scope.
"""

from abc import ABC
from typing import Protocol, Sequence

from sqlalchemy.orm import Session

from finance_mapping.domain.values import MappingRow, ProductCategory, RowKind


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return DTOs.  They MUST NOT mutate any data.
    """

    def __init__(self, session: Session):
        """
        Initialize the selector.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session


class MappingStore(Protocol):
    """
    Read-only source of mapping rows.

    Implemented by MappingSelector over SQLAlchemy; tests substitute
    in-memory stubs with a controlled row order.
    """

    def fetch_rows(
        self,
        product_id: int,
        category: ProductCategory,
        kind: RowKind | None = None,
        is_penalty: bool | None = None,
    ) -> Sequence[MappingRow]:
        ...
