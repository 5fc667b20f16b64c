"""
Tests for Fiado Digital

Test strategy:
1. Unit tests for individual components (models, validators, ledger)
2. Integration tests for LedgerBook flows (with in-memory storage)
3. No real API calls in tests (use fake models)
"""

import pytest
from datetime import datetime
from decimal import Decimal

from fiado.models.ledger import (
    Debtor,
    DebtorStatus,
    Product,
    Transaction,
    TransactionItem,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    default_product_catalog,
)
from fiado.models.audit import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

from factories import DAY, make_debt, make_payment


class TestCatalogModels:
    """Tests for products and debtors."""

    def test_product_creation(self):
        """Test Product model creation."""
        product = Product(name="Refrigerante 2L", default_price=Decimal("9.00"))
        assert product.name == "Refrigerante 2L"
        assert product.default_price == Decimal("9.00")
        assert product.id

    def test_product_rejects_zero_price(self):
        """Test that a product must have a positive price."""
        with pytest.raises(ValueError):
            Product(name="Brinde", default_price=Decimal("0"))

    def test_product_strips_whitespace(self):
        """Test that whitespace is stripped from product name."""
        product = Product(name="  Salgadinho  ", default_price=Decimal("7"))
        assert product.name == "Salgadinho"

    def test_default_catalog(self):
        """Test the starter catalog has the four seed products."""
        catalog = default_product_catalog()
        assert [p.id for p in catalog] == ["1", "2", "3", "4"]
        assert catalog[0].name == "Cerveja Lata"
        assert catalog[0].default_price == Decimal("4.50")

    def test_debtor_creation(self):
        """Test Debtor model creation."""
        debtor = Debtor(name="José", phone="11988887777")
        assert debtor.status is None
        assert isinstance(debtor.created_at, datetime)

    def test_debtor_requires_name(self):
        with pytest.raises(ValueError):
            Debtor(name="   ", phone="11988887777")

    def test_status_labels(self):
        """Test status display labels."""
        assert DebtorStatus.OTIMO.label == "Ótimo"
        assert DebtorStatus.CALOTEIRO.label == "Caloteiro"
        assert DebtorStatus("BOM") is DebtorStatus.BOM


class TestTransactionModels:
    """Tests for the DEBT / PAYMENT invariants."""

    def test_line_item_total_must_match(self):
        """Test that a line total must equal quantity times price."""
        with pytest.raises(ValueError, match="Line total"):
            TransactionItem(
                product_id="1",
                product_name="Cerveja Lata",
                quantity=2,
                unit_price=Decimal("4.50"),
                total=Decimal("10.00"),
            )

    def test_line_item_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            TransactionItem(
                product_id="1",
                product_name="Cerveja Lata",
                quantity=0,
                unit_price=Decimal("4.50"),
                total=Decimal("0"),
            )

    def test_debt_requires_items(self):
        """Test that a debt cannot be empty."""
        with pytest.raises(ValueError, match="at least one item"):
            Transaction(
                debtor_id="d1",
                type=TransactionType.DEBT,
                date=DAY,
                total_amount=Decimal("10"),
                items=[],
            )

    def test_debt_total_must_match_items(self):
        item = TransactionItem(
            product_id="1",
            product_name="Cerveja Lata",
            quantity=2,
            unit_price=Decimal("4.50"),
            total=Decimal("9.00"),
        )
        with pytest.raises(ValueError, match="sum of its items"):
            Transaction(
                debtor_id="d1",
                type=TransactionType.DEBT,
                date=DAY,
                total_amount=Decimal("10.00"),
                items=[item],
            )

    def test_payment_cannot_have_items(self):
        item = TransactionItem(
            product_id="1",
            product_name="Cerveja Lata",
            quantity=1,
            unit_price=Decimal("4.50"),
            total=Decimal("4.50"),
        )
        with pytest.raises(ValueError, match="cannot have items"):
            Transaction(
                debtor_id="d1",
                type=TransactionType.PAYMENT,
                date=DAY,
                total_amount=Decimal("4.50"),
                items=[item],
                payment_method="PIX",
            )

    def test_payment_requires_positive_amount(self):
        with pytest.raises(ValueError):
            make_payment("d1", "0")

    def test_payment_requires_method(self):
        with pytest.raises(ValueError, match="payment method"):
            Transaction(
                debtor_id="d1",
                type=TransactionType.PAYMENT,
                date=DAY,
                total_amount=Decimal("5"),
            )

    def test_signed_amount_and_labels(self):
        """Test display helpers."""
        debt = make_debt("d1", "12.00")
        payment = make_payment("d1", "5.00", method="PIX")
        assert debt.signed_amount == Decimal("12.00")
        assert payment.signed_amount == Decimal("-5.00")
        assert debt.label == "Compra Fiado"
        assert payment.label == "Pagamento via PIX"
        assert debt.items_summary == "1x Item"
        assert payment.items_summary == ""


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.DEBTOR_CREATED,
            description="Debtor created: Maria",
        )
        assert event.severity == ActivitySeverity.INFO

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEventBuilder.payment_recorded(
            transaction_id="t1",
            debtor_id="d1",
            amount="25.00",
            method="PIX",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "payment_recorded"
        assert log_dict["entity_id"] == "t1"
        assert log_dict["details"]["payment_method"] == "PIX"

    def test_builder_debtor_saved(self):
        created = ActivityEventBuilder.debtor_saved("d1", "Maria", created=True)
        updated = ActivityEventBuilder.debtor_saved("d1", "Maria", created=False)
        assert created.event_type == ActivityEventType.DEBTOR_CREATED
        assert updated.event_type == ActivityEventType.DEBTOR_UPDATED

    def test_builder_validation_failed_is_warning(self):
        event = ActivityEventBuilder.validation_failed(
            "payment",
            [{"field": "total_amount", "issue_type": "missing"}],
        )
        assert event.severity == ActivitySeverity.WARNING
        assert "1 issues" in event.description


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="total_amount",
                    issue_type="missing",
                    message="Informe o valor",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="phone",
                    issue_type="short",
                    message="Telefone curto",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
