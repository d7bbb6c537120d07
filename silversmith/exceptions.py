"""
Silversmith Exceptions.

All silversmith errors are wrapped in SilversmithError for consistent handling.
"""

from typing import Any


class SilversmithError(Exception):
    """
    Base exception for all Silversmith errors.

    Usage:
        raise SilversmithError('UNRECOGNIZED_CODE', raw='ZZ100')

    Attributes:
        code: Error code (UNRECOGNIZED_CODE, INVALID_SPLIT_QUANTITY, etc.)
        details: Additional context as keyword arguments
    """

    def __init__(self, code: str, /, **details: Any):
        self.code = code
        self.details = details
        message = f"{code}: {details}" if details else code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {**self.details, "code": self.code}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"SilversmithError({self.code}: {details_str})"
        return f"SilversmithError({self.code})"


class SplitInvariantViolation(AssertionError):
    """Quantities of a split batch no longer add up to the original."""


# Error codes
# UNRECOGNIZED_CODE: No catalog master is a prefix of the scanned code
# AMBIGUOUS_RESIDUE: Suffix left unmatched characters (logged, not raised)
# MISMATCHED_RANGE_PREFIX: Range sides have different prefixes/suffixes
# INVALID_RANGE_ORDER: Range end is lower than range start
# RANGE_TOO_LARGE: Range expands past RANGE_LIMIT
# INVALID_CIPHER_KEYWORD: Price keyword is not ten distinct letters
# INVALID_PRICE_CODE: Cipher text contains letters outside the keyword
# INVALID_SPLIT_QUANTITY: Move quantity outside 1..batch.quantity
# STAGE_TRANSITION_NOT_ALLOWED: Target stage not reachable from current
# BATCH_ON_HOLD: Batch is on hold and cannot move
# BATCH_NOT_FOUND: ProductionBatch does not exist
# LINE_ITEM_UNRESOLVABLE: Order line SKU/variant no longer in catalog
# INVALID_STATUS: Order status does not allow the operation
# INVALID_QUANTITY: Requested send quantity outside what remains
# NOTHING_TO_SEND: Every order line is already in production
