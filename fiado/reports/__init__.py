"""Reporting package."""

from fiado.reports.export import (
    REPORT_HEADER,
    DebtorReport,
    build_debtor_report,
    report_filename,
)
from fiado.reports.formatting import (
    format_currency,
    format_decimal_comma,
    round_money,
)

__all__ = [
    "REPORT_HEADER",
    "DebtorReport",
    "build_debtor_report",
    "format_currency",
    "format_decimal_comma",
    "report_filename",
    "round_money",
]
