"""Tests for money formatting and the CSV debtor report."""

import pytest
from datetime import date
from decimal import Decimal

from fiado.models.ledger import DebtorStatus
from fiado.reports import (
    REPORT_HEADER,
    build_debtor_report,
    format_currency,
    format_decimal_comma,
    report_filename,
    round_money,
)

from factories import make_debt, make_debtor, make_payment


class TestFormatting:

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1234.5"), "1234,50"),
        (Decimal("0"), "0,00"),
        (Decimal("-40"), "-40,00"),
        (Decimal("2.005"), "2,01"),
    ])
    def test_decimal_comma(self, value, expected):
        assert format_decimal_comma(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1234.5"), "R$ 1.234,50"),
        (Decimal("7"), "R$ 7,00"),
        (Decimal("1000000"), "R$ 1.000.000,00"),
    ])
    def test_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_round_money_is_half_up(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")
        assert round_money(Decimal("0.124")) == Decimal("0.12")


class TestDebtorReport:

    def _lines(self, report):
        text = report.content.decode("utf-8-sig")
        return text.split("\n")

    def test_report_row(self):
        """Test José with a balance of 1234.5 exports as 1234,50."""
        jose = make_debtor(name="José", phone="21988887777", status=DebtorStatus.BOM)
        transactions = [make_debt(jose.id, "1300.00"), make_payment(jose.id, "65.50")]

        report = build_debtor_report([jose], transactions, today=date(2026, 10, 19))

        lines = self._lines(report)
        assert lines[0] == ";".join(REPORT_HEADER)
        assert lines[1] == "José;21988887777;BOM;1234,50"
        assert lines[2] == ""
        assert report.row_count == 1

    def test_content_has_byte_order_mark(self):
        report = build_debtor_report([], [], today=date(2026, 10, 19))
        assert report.content.startswith(b"\xef\xbb\xbf")
        assert report.content.decode("utf-8-sig") == (
            "Nome do Cliente;Telefone;Classificação;Saldo Atual (R$)\n"
        )

    def test_missing_status_exports_as_regular(self):
        maria = make_debtor(name="Maria")
        report = build_debtor_report([maria], [], today=date(2026, 10, 19))
        assert self._lines(report)[1] == "Maria;11999990000;REGULAR;0,00"

    def test_rows_follow_debtor_order(self):
        debtors = [make_debtor(name="B"), make_debtor(name="A")]
        report = build_debtor_report(debtors, [make_debt(debtors[1].id, "10")])
        lines = self._lines(report)
        assert lines[1].startswith("B;")
        assert lines[2] == "A;11999990000;REGULAR;10,00"

    def test_filename(self):
        assert report_filename(date(2026, 10, 19)) == "relatorio_fiado_digital_2026-10-19.csv"
        report = build_debtor_report([], [], today=date(2026, 1, 5))
        assert report.filename == "relatorio_fiado_digital_2026-01-05.csv"
        assert report.mime_type == "text/csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
