"""Validation and transaction building package."""

from fiado.validation.validator import (
    RecordValidationError,
    RecordValidator,
    get_user_friendly_summary,
    parse_amount,
)
from fiado.validation.builder import (
    Cart,
    CartLine,
    TransactionBuilder,
    stamp_entry_date,
)

__all__ = [
    "Cart",
    "CartLine",
    "RecordValidationError",
    "RecordValidator",
    "TransactionBuilder",
    "get_user_friendly_summary",
    "parse_amount",
    "stamp_entry_date",
]
