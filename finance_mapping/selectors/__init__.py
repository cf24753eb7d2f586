"""Selectors for product account mappings (read side)."""

from finance_mapping.selectors.base import BaseSelector, MappingStore
from finance_mapping.selectors.mapping_selector import MappingSelector

__all__ = [
    "BaseSelector",
    "MappingStore",
    "MappingSelector",
]
