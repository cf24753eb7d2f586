"""
Finance Mapping - product-to-ledger account mapping resolution.

Resolves, for a loan, savings or share product, which general ledger
account each financial account role, payment channel and charge posts to:
- Role codes interpreted per product category and accounting rule
- Payment channel fund-source bindings
- Fee and penalty income bindings
"""

from finance_mapping.config import MappingSettings, get_settings
from finance_mapping.db.engine import init_engine_from_url
from finance_mapping.logging_config import configure_logging

__version__ = "0.1.0"


def bootstrap(settings: MappingSettings | None = None) -> MappingSettings:
    """
    Configure logging and the database engine from settings.

    Returns the settings used, so callers can pass them to resolver_for().
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)
    init_engine_from_url(
        settings.database_url,
        echo=settings.echo,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )
    return settings
