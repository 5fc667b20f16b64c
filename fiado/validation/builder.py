"""
Transaction Builder

Turns a validated form into a Transaction record.

- DEBT: built from a cart of (product, quantity) lines. Each line
  snapshots the product's current name and default price, so later
  catalog edits never alter the recorded sale.
- PAYMENT: built from an amount typed by the user and a payment method.

Timestamp policy: the user only picks a calendar date (old entries can
be back-dated). The entry is stamped with that date plus the current
time of day, so entries made on the same day keep their insertion order.
The caller also supplies a per-book sequence number that breaks ties
between identical timestamps.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fiado.models.ledger import (
    Product,
    Transaction,
    TransactionItem,
    TransactionType,
    ValidationResult,
)
from fiado.validation.validator import (
    RecordValidationError,
    RecordValidator,
    parse_amount,
)


def stamp_entry_date(entry_date: date, now: Optional[datetime] = None) -> datetime:
    """Combine the user's calendar date with the current time of day."""
    now = now or datetime.now()
    return datetime.combine(entry_date, now.time())


class CartLine(BaseModel):
    """One product line waiting to be recorded as a debt."""

    product: Product
    quantity: int = Field(ge=1)

    @property
    def total(self) -> Decimal:
        return self.quantity * self.product.default_price


class Cart:
    """
    Ordered list of product lines for a sale on credit.

    The same product may appear on more than one line.
    """

    def __init__(self, validator: Optional[RecordValidator] = None):
        self._validator = validator or RecordValidator()
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def total(self) -> Decimal:
        return sum((line.total for line in self._lines), Decimal("0"))

    def add(self, product: Product, quantity: int) -> CartLine:
        """
        Append a line to the cart.

        Raises:
            RecordValidationError: If quantity is not a whole number >= 1
        """
        result = self._validator.validate_quantity(quantity)
        if not result.is_valid:
            raise RecordValidationError("cart", result)
        line = CartLine(product=product, quantity=quantity)
        self._lines.append(line)
        return line

    def remove(self, index: int) -> CartLine:
        """Remove the line at `index`."""
        return self._lines.pop(index)

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


class TransactionBuilder:
    """
    Builds DEBT and PAYMENT transactions from form input.

    NEVER returns a partial record: invalid input raises
    RecordValidationError before anything is constructed.
    """

    def __init__(self, validator: Optional[RecordValidator] = None):
        self._validator = validator or RecordValidator()

    @property
    def validator(self) -> RecordValidator:
        return self._validator

    @staticmethod
    def _raise_if_invalid(entity_type: str, result: ValidationResult) -> None:
        if not result.is_valid:
            raise RecordValidationError(entity_type, result)

    def build_debt(
        self,
        debtor_id: str,
        cart: Cart,
        entry_date: date,
        sequence: int = 0,
        now: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """
        Build a sale on credit from the cart.

        Raises:
            RecordValidationError: If the cart is empty
        """
        self._raise_if_invalid(
            "debt",
            self._validator.validate_cart(cart, description),
        )

        items = [
            TransactionItem(
                product_id=line.product.id,
                product_name=line.product.name,
                quantity=line.quantity,
                unit_price=line.product.default_price,
                total=line.total,
            )
            for line in cart.lines
        ]

        return Transaction(
            debtor_id=debtor_id,
            type=TransactionType.DEBT,
            date=stamp_entry_date(entry_date, now),
            total_amount=sum((item.total for item in items), Decimal("0")),
            items=items,
            description=description,
            sequence=sequence,
        )

    def build_payment(
        self,
        debtor_id: str,
        amount_text: Optional[str],
        method: Optional[str],
        entry_date: date,
        sequence: int = 0,
        now: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """
        Build a payment toward the debtor's balance.

        Raises:
            RecordValidationError: If the amount is missing, not a number,
                                   not positive, or the method is unknown
        """
        self._raise_if_invalid(
            "payment",
            self._validator.validate_payment(amount_text, method, description),
        )

        return Transaction(
            debtor_id=debtor_id,
            type=TransactionType.PAYMENT,
            date=stamp_entry_date(entry_date, now),
            total_amount=parse_amount(amount_text),
            payment_method=method,
            description=description,
            sequence=sequence,
        )
