"""
Activity Models for Fiado Digital

Every mutation of the book is described by an activity event that goes to
the local structured log. This provides:
1. Traceability of what the shop owner did and when
2. Debugging information when things go wrong

DESIGN DECISION: Events are only logged, never persisted next to the
ledger. The transaction log itself is the only durable history.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Customers
    DEBTOR_CREATED = "debtor_created"
    DEBTOR_UPDATED = "debtor_updated"
    DEBTOR_DELETED = "debtor_deleted"

    # Catalog
    PRODUCT_CREATED = "product_created"
    PRODUCT_UPDATED = "product_updated"
    PRODUCT_DELETED = "product_deleted"

    # Ledger
    DEBT_RECORDED = "debt_recorded"
    PAYMENT_RECORDED = "payment_recorded"
    VALIDATION_FAILED = "validation_failed"

    # Reporting
    REPORT_EXPORTED = "report_exported"

    # System events
    STORE_VERSION_CHANGED = "store_version_changed"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = Field(default=ActivitySeverity.INFO)

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'debtor', 'product', 'transaction')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.debtor_saved(debtor_id, name, created=True)
        event = ActivityEventBuilder.payment_recorded(tx_id, debtor_id, "25.00", "PIX")
    """

    @staticmethod
    def debtor_saved(
        debtor_id: str,
        name: str,
        created: bool,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=(
                ActivityEventType.DEBTOR_CREATED
                if created
                else ActivityEventType.DEBTOR_UPDATED
            ),
            entity_type="debtor",
            entity_id=debtor_id,
            description=f"Debtor {'created' if created else 'updated'}: {name}",
            details={"name": name},
        )

    @staticmethod
    def debtor_deleted(debtor_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DEBTOR_DELETED,
            entity_type="debtor",
            entity_id=debtor_id,
            description=f"Debtor deleted: {name}",
            details={"name": name},
        )

    @staticmethod
    def product_saved(
        product_id: str,
        name: str,
        price: str,
        created: bool,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=(
                ActivityEventType.PRODUCT_CREATED
                if created
                else ActivityEventType.PRODUCT_UPDATED
            ),
            entity_type="product",
            entity_id=product_id,
            description=f"Product {'created' if created else 'updated'}: {name}",
            details={"name": name, "default_price": price},
        )

    @staticmethod
    def product_deleted(product_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PRODUCT_DELETED,
            entity_type="product",
            entity_id=product_id,
            description=f"Product deleted: {name}",
            details={"name": name},
        )

    @staticmethod
    def debt_recorded(
        transaction_id: str,
        debtor_id: str,
        amount: str,
        item_count: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DEBT_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Debt recorded: R$ {amount} ({item_count} items)",
            details={
                "debtor_id": debtor_id,
                "amount": amount,
                "item_count": item_count,
            },
        )

    @staticmethod
    def payment_recorded(
        transaction_id: str,
        debtor_id: str,
        amount: str,
        method: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PAYMENT_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Payment recorded: R$ {amount} via {method}",
            details={
                "debtor_id": debtor_id,
                "amount": amount,
                "payment_method": method,
            },
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        issues: list[dict],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def report_exported(filename: str, row_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.REPORT_EXPORTED,
            entity_type="report",
            description=f"Report exported: {filename}",
            details={"filename": filename, "row_count": row_count},
        )

    @staticmethod
    def store_version_changed(
        previous: Optional[str],
        current: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORE_VERSION_CHANGED,
            description=f"Updating stored data version from {previous} to {current}",
            details={"previous": previous, "current": current},
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXTERNAL_SERVICE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
        )
