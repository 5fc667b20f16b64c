"""
Data Models Package

This package contains all Pydantic models used in Fiado Digital.
All data flowing through the system must conform to these schemas.
"""

from fiado.models.ledger import (
    DashboardStats,
    Debtor,
    DebtorBalance,
    DebtorStatus,
    Product,
    Transaction,
    TransactionItem,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    default_product_catalog,
    new_record_id,
)
from fiado.models.audit import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Ledger models
    "DashboardStats",
    "Debtor",
    "DebtorBalance",
    "DebtorStatus",
    "Product",
    "Transaction",
    "TransactionItem",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "default_product_catalog",
    "new_record_id",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
