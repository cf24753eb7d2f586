"""
Typed Exception Hierarchy for the Finance Mapping engine.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from FinanceMappingError:

    FinanceMappingError (base)
    |
    +-- MappingError
    |   +-- MappingIntegrityError
    |
    +-- StorageError
    |   +-- StorageUnavailableError
    |
    +-- ConfigurationError
    |   +-- InvalidSettingsError
    |
    +-- ReferenceValueError
        +-- UnknownCategoryError
        +-- UnknownAccountingVariantError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Mapping         | MAPPING_INTEGRITY           | Row references a ledger account that
                |                             | no longer exists
----------------|-----------------------------|-----------------------------------------
Storage         | STORAGE_UNAVAILABLE         | Query failed or store unreachable
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_SETTINGS            | Settings file/env value is invalid
----------------|-----------------------------|-----------------------------------------
Reference       | UNKNOWN_PRODUCT_CATEGORY    | Category name/value not recognised
                | UNKNOWN_ACCOUNTING_VARIANT  | Accounting rule name/value not recognised

===============================================================================
HANDLING PATTERNS
===============================================================================

An unregistered role code is NOT an error. The resolver skips the row and
reports it through the result diagnostics and the log.

    try:
        roles = resolver.resolve_role_accounts(product_id, category, variant)
    except MappingIntegrityError as e:
        # Product configuration points at a deleted GL account
        alert_setup_team(e.product_id, e.mapping_id)
    except StorageUnavailableError as e:
        # No retry here; the caller decides
        return api_response(code=e.code, product=e.product_id)
"""


class FinanceMappingError(Exception):
    """
    Base exception for all finance mapping errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FINANCE_MAPPING_ERROR"


# Mapping-related exceptions


class MappingError(FinanceMappingError):
    """Base exception for mapping resolution errors."""

    code: str = "MAPPING_ERROR"


class MappingIntegrityError(MappingError):
    """
    A mapping row references a ledger account that cannot be resolved.

    A referenced ledger account must exist. A dangling reference is a
    data-integrity fault, not a normal absence.
    """

    code: str = "MAPPING_INTEGRITY"

    def __init__(
        self,
        mapping_id: object,
        product_id: object,
        ledger_account_id: object | None,
        reason: str,
    ):
        self.mapping_id = mapping_id
        self.product_id = product_id
        self.ledger_account_id = ledger_account_id
        self.reason = reason
        super().__init__(
            f"Mapping {mapping_id} for product {product_id} is invalid: {reason}"
        )


# Storage-related exceptions


class StorageError(FinanceMappingError):
    """Base exception for storage collaborator errors."""

    code: str = "STORAGE_ERROR"


class StorageUnavailableError(StorageError):
    """The mapping store query failed (connectivity, SQL error, ...)."""

    code: str = "STORAGE_UNAVAILABLE"

    def __init__(self, product_id: object, category: str, operation: str):
        self.product_id = product_id
        self.category = category
        self.operation = operation
        super().__init__(
            f"Mapping store unavailable during {operation} "
            f"for {category} product {product_id}"
        )


# Configuration-related exceptions


class ConfigurationError(FinanceMappingError):
    """Base exception for settings errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidSettingsError(ConfigurationError):
    """A setting has an invalid or missing value."""

    code: str = "INVALID_SETTINGS"

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(f"Invalid setting '{setting}': {reason}")


# Reference value exceptions


class ReferenceValueError(FinanceMappingError):
    """Base exception for unrecognised enumeration values."""

    code: str = "REFERENCE_VALUE_ERROR"


class UnknownCategoryError(ReferenceValueError):
    """Product category name or persisted value is not recognised."""

    code: str = "UNKNOWN_PRODUCT_CATEGORY"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown product category: {value!r}")


class UnknownAccountingVariantError(ReferenceValueError):
    """Accounting rule variant name or persisted value is not recognised."""

    code: str = "UNKNOWN_ACCOUNTING_VARIANT"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown accounting rule variant: {value!r}")
