"""Tests for input validation and the transaction builder."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from fiado.models.ledger import TransactionType
from fiado.validation import (
    Cart,
    RecordValidationError,
    RecordValidator,
    TransactionBuilder,
    get_user_friendly_summary,
    parse_amount,
    stamp_entry_date,
)

from factories import make_product


NOW = datetime(2026, 10, 19, 14, 5, 33, 120000)


class TestParseAmount:

    @pytest.mark.parametrize("text,expected", [
        ("25.00", Decimal("25.00")),
        ("25,00", Decimal("25.00")),
        ("  7 ", Decimal("7")),
        ("1.234,50", Decimal("1234.50")),
        ("12.345.678,9", Decimal("12345678.9")),
        ("-5,00", Decimal("-5.00")),
    ])
    def test_accepted_formats(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", [
        None, "", "   ", "abc", "NaN", "Infinity", "1,2,3",
        "1,5.3", "1.2.3,4", "12.34,5", "1e3", "1_000", "+5", ",50",
    ])
    def test_rejected_formats(self, text):
        assert parse_amount(text) is None


class TestRecordValidator:

    def test_debtor_requires_name_and_phone(self):
        result = RecordValidator().validate_debtor("", "  ")
        assert not result.is_valid
        assert {i.field for i in result.issues} == {"name", "phone"}

    def test_valid_debtor(self):
        assert RecordValidator().validate_debtor("Maria", "11999990000").is_valid

    @pytest.mark.parametrize("amount,issue_type", [
        (None, "missing"),
        ("", "missing"),
        ("dez reais", "invalid_format"),
        ("0", "not_positive"),
        ("-5", "not_positive"),
        ("1.005", "too_many_decimals"),
        ("1,5.3", "invalid_format"),
        ("1.2.3,4", "invalid_format"),
    ])
    def test_payment_amount_issues(self, amount, issue_type):
        result = RecordValidator().validate_payment(amount, "PIX")
        assert not result.is_valid
        assert result.issues[0].issue_type == issue_type

    def test_payment_method_must_be_known(self):
        result = RecordValidator().validate_payment("10", "Cheque")
        assert not result.is_valid
        assert result.issues[0].field == "payment_method"

    def test_payment_methods_are_configurable(self):
        validator = RecordValidator(["Dinheiro", "Cheque"])
        assert validator.validate_payment("10", "Cheque").is_valid
        assert not validator.validate_payment("10", "PIX").is_valid

    def test_default_payment_methods(self):
        assert RecordValidator().payment_methods == [
            "Dinheiro", "PIX", "Cartão", "Serviço/Troca",
        ]

    def test_product_price_must_be_positive(self):
        result = RecordValidator().validate_product("Brinde", "0")
        assert not result.is_valid
        assert result.issues[0].field == "default_price"

    @pytest.mark.parametrize("name,phone,notes,field", [
        ("x" * 121, "11999990000", None, "name"),
        ("Maria", "1" * 41, None, "phone"),
        ("Maria", "11999990000", "n" * 1001, "notes"),
    ])
    def test_debtor_text_limits(self, name, phone, notes, field):
        result = RecordValidator().validate_debtor(name, phone, notes)
        assert not result.is_valid
        assert [(i.field, i.issue_type) for i in result.issues] == [(field, "too_long")]

    def test_limits_apply_after_stripping(self):
        name = "  " + "x" * 120 + "  "
        assert RecordValidator().validate_debtor(name, "11999990000").is_valid
        assert RecordValidator().validate_product(name, "1").is_valid

    def test_product_name_limit(self):
        result = RecordValidator().validate_product("x" * 121, "4.50")
        assert result.issues[0].issue_type == "too_long"

    def test_summary_lists_each_error(self):
        result = RecordValidator().validate_debtor("", "")
        summary = get_user_friendly_summary(result)
        assert summary.startswith("❌")
        assert "nome" in summary
        assert "telefone" in summary


class TestCart:

    def test_add_and_total(self):
        cart = Cart()
        cart.add(make_product(price="4.50"), 2)
        cart.add(make_product(name="Refrigerante 2L", price="9.00"), 1)
        assert len(cart) == 2
        assert cart.total == Decimal("18.00")

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_rejects_invalid_quantity(self, quantity):
        cart = Cart()
        with pytest.raises(RecordValidationError):
            cart.add(make_product(), quantity)
        assert cart.is_empty

    def test_remove_and_clear(self):
        cart = Cart()
        beer = make_product()
        cart.add(beer, 1)
        cart.add(beer, 3)
        removed = cart.remove(0)
        assert removed.quantity == 1
        assert [line.quantity for line in cart.lines] == [3]
        cart.clear()
        assert cart.is_empty


class TestTransactionBuilder:

    def test_build_debt(self):
        """Test cart [(A, 4.50, x2), (B, 9.00, x1)] gives a debt of 18.00."""
        product_a = make_product(name="Cerveja Lata", price="4.50")
        product_b = make_product(name="Refrigerante 2L", price="9.00")
        cart = Cart()
        cart.add(product_a, 2)
        cart.add(product_b, 1)

        debt = TransactionBuilder().build_debt("d1", cart, date(2026, 10, 1), sequence=7, now=NOW)

        assert debt.type == TransactionType.DEBT
        assert debt.total_amount == Decimal("18.00")
        assert [item.total for item in debt.items] == [Decimal("9.00"), Decimal("9.00")]
        assert debt.items[0].product_id == product_a.id
        assert debt.items[0].product_name == "Cerveja Lata"
        assert debt.items[0].unit_price == Decimal("4.50")
        assert debt.items[0].quantity == 2
        assert debt.payment_method is None
        assert debt.sequence == 7

    def test_build_debt_rejects_empty_cart(self):
        """Test an empty cart never produces a transaction."""
        with pytest.raises(RecordValidationError) as exc_info:
            TransactionBuilder().build_debt("d1", Cart(), date(2026, 10, 1))
        assert exc_info.value.entity_type == "debt"
        assert exc_info.value.result.issues[0].issue_type == "empty_cart"

    def test_build_payment(self):
        """Test a 25.00 PIX payment."""
        payment = TransactionBuilder().build_payment(
            "d1", "25.00", "PIX", date(2026, 10, 1), now=NOW
        )
        assert payment.type == TransactionType.PAYMENT
        assert payment.total_amount == Decimal("25.00")
        assert payment.payment_method == "PIX"
        assert payment.items is None

    @pytest.mark.parametrize("amount", [None, "", "abc", "0", "-3"])
    def test_build_payment_rejects_bad_amount(self, amount):
        with pytest.raises(RecordValidationError):
            TransactionBuilder().build_payment("d1", amount, "PIX", date(2026, 10, 1))

    def test_long_description_is_rejected(self):
        cart = Cart()
        cart.add(make_product(), 1)
        builder = TransactionBuilder()
        with pytest.raises(RecordValidationError):
            builder.build_debt("d1", cart, date(2026, 10, 1), description="d" * 501)
        with pytest.raises(RecordValidationError):
            builder.build_payment("d1", "5", "PIX", date(2026, 10, 1), description="d" * 501)

    def test_entry_date_keeps_time_of_day(self):
        """Test the chosen date is combined with the current time."""
        stamped = stamp_entry_date(date(2025, 12, 24), NOW)
        assert stamped == datetime(2025, 12, 24, 14, 5, 33, 120000)

    def test_snapshot_survives_product_edit(self):
        """Test line items keep the price from build time."""
        product = make_product(price="4.50")
        cart = Cart()
        cart.add(product, 1)
        debt = TransactionBuilder().build_debt("d1", cart, date(2026, 10, 1))

        product.default_price = Decimal("6.00")

        assert debt.items[0].unit_price == Decimal("4.50")
        assert debt.total_amount == Decimal("4.50")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
