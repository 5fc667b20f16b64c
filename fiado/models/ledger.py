"""
Core Data Models for Fiado Digital

These models define the strict schemas for all records kept by the shop.
They are designed to:
1. Enforce the transaction invariants at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Keep historical line items independent from the live catalog

DESIGN DECISION: Money is always Decimal. Balances are accumulated
exactly and only rounded when displayed or exported.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


def new_record_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid4())


# Text limits shared by the models and the form validator
NAME_MAX_LENGTH = 120
PHONE_MAX_LENGTH = 40
NOTES_MAX_LENGTH = 1000
DESCRIPTION_MAX_LENGTH = 500


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class DebtorStatus(str, Enum):
    """
    Advisory classification of a debtor.

    It has no effect on the ledger; it only helps the shop owner decide
    whether to keep selling on credit.
    """
    OTIMO = "OTIMO"          # Excellent payer
    BOM = "BOM"              # Pays on time
    REGULAR = "REGULAR"      # Occasional delays
    CALOTEIRO = "CALOTEIRO"  # Be careful

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    DebtorStatus.OTIMO: "Ótimo",
    DebtorStatus.BOM: "Bom",
    DebtorStatus.REGULAR: "Regular",
    DebtorStatus.CALOTEIRO: "Caloteiro",
}


class TransactionType(str, Enum):
    """Kind of ledger entry."""
    DEBT = "DEBT"        # Sale on credit
    PAYMENT = "PAYMENT"  # Amount paid toward the balance


# =============================================================================
# CATALOG AND CUSTOMERS
# =============================================================================

class Product(BaseModel):
    """A catalog item that can be sold on credit."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Immutable product identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Product name shown in the catalog"
    )
    default_price: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Price used when the product is added to a cart"
    )


def default_product_catalog() -> list[Product]:
    """Starter catalog used on first run."""
    return [
        Product(id="1", name="Cerveja Lata", default_price=Decimal("4.50")),
        Product(id="2", name="Refrigerante 2L", default_price=Decimal("9.00")),
        Product(id="3", name="Salgadinho", default_price=Decimal("7.00")),
        Product(id="4", name="Pão (kg)", default_price=Decimal("12.00")),
    ]


class Debtor(BaseModel):
    """
    A customer who buys on credit.

    `created_at` is set once, when the debtor is first registered.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Immutable debtor identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Customer name"
    )
    phone: str = Field(
        ...,
        min_length=1,
        max_length=PHONE_MAX_LENGTH,
        description="Contact phone (used for WhatsApp reminders)"
    )
    status: Optional[DebtorStatus] = Field(
        default=None,
        description="Advisory classification; unset for older records"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=NOTES_MAX_LENGTH,
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="When the debtor was registered"
    )


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionItem(BaseModel):
    """
    One line of a DEBT transaction.

    Name and price are snapshots taken when the sale was recorded, so
    later catalog edits or deletions never change historical figures.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0, decimal_places=2)
    total: Decimal = Field(..., ge=0)

    @model_validator(mode='after')
    def validate_total(self) -> 'TransactionItem':
        if self.total != self.quantity * self.unit_price:
            raise ValueError("Line total must equal quantity times unit price")
        return self


class Transaction(BaseModel):
    """
    A single append-only ledger entry.

    CRITICAL: DEBT entries carry their line items and a total equal to
    the sum of those lines. PAYMENT entries carry a positive amount and
    a payment method, never line items.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
    )
    debtor_id: str = Field(..., min_length=1)
    type: TransactionType
    date: datetime = Field(
        ...,
        description="User-chosen calendar date combined with the time of entry"
    )
    total_amount: Decimal = Field(..., ge=0, decimal_places=2)
    items: Optional[list[TransactionItem]] = None
    payment_method: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    sequence: int = Field(
        default=0,
        ge=0,
        description="Entry counter, breaks ties between equal timestamps"
    )

    @model_validator(mode='after')
    def validate_shape(self) -> 'Transaction':
        """Enforce the DEBT / PAYMENT invariants."""
        if self.type == TransactionType.DEBT:
            if not self.items:
                raise ValueError("A debt must have at least one item")
            if self.payment_method is not None:
                raise ValueError("A debt cannot have a payment method")
            items_total = sum((item.total for item in self.items), Decimal("0"))
            if self.total_amount != items_total:
                raise ValueError("Debt total must equal the sum of its items")
        else:
            if self.items is not None:
                raise ValueError("A payment cannot have items")
            if self.total_amount <= 0:
                raise ValueError("Payment amount must be greater than zero")
            if not self.payment_method:
                raise ValueError("A payment must have a payment method")
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Contribution to the debtor balance."""
        if self.type == TransactionType.DEBT:
            return self.total_amount
        return -self.total_amount

    @property
    def label(self) -> str:
        if self.type == TransactionType.DEBT:
            return "Compra Fiado"
        return f"Pagamento via {self.payment_method}"

    @property
    def items_summary(self) -> str:
        if not self.items:
            return ""
        return ", ".join(f"{i.quantity}x {i.product_name}" for i in self.items)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class DebtorBalance(BaseModel):
    """A debtor paired with its computed balance (never persisted)."""

    debtor: Debtor
    balance: Decimal


class DashboardStats(BaseModel):
    """Aggregates shown on the dashboard."""

    total_debtors: int = Field(ge=0)
    total_products: int = Field(ge=0)
    total_outstanding: Decimal
    recent_transactions: list[Transaction] = Field(default_factory=list)
    top_debtors: list[DebtorBalance] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one form submission."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
