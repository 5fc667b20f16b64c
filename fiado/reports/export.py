"""
Debtor Report Export

Produces the spreadsheet-friendly CSV the shop owner downloads: one row
per debtor with the current balance.

Format:
- `;` delimiter, `\n` line endings
- header `Nome do Cliente;Telefone;Classificação;Saldo Atual (R$)`
- balance with a decimal comma and two fraction digits
- UTF-8 with a byte-order mark so spreadsheet apps keep the accents
- filename `relatorio_fiado_digital_<ISO date>.csv`

Balances come from the ledger engine; nothing is recomputed here.
"""

import csv
import io
from datetime import date
from typing import Optional, Sequence

from pydantic import BaseModel

from fiado.models.ledger import Debtor, DebtorStatus, Transaction
from fiado.queries.ledger import ZERO, balances_by_debtor
from fiado.reports.formatting import format_decimal_comma


REPORT_HEADER = [
    "Nome do Cliente",
    "Telefone",
    "Classificação",
    "Saldo Atual (R$)",
]


class DebtorReport(BaseModel):
    """A generated report, ready to be written or downloaded."""

    filename: str
    content: bytes
    row_count: int

    mime_type: str = "text/csv"


def report_filename(today: date) -> str:
    return f"relatorio_fiado_digital_{today.isoformat()}.csv"


def build_debtor_report(
    debtors: Sequence[Debtor],
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> DebtorReport:
    """Build the per-debtor balance report."""
    today = today or date.today()
    balances = balances_by_debtor(transactions)

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for debtor in debtors:
        status = debtor.status or DebtorStatus.REGULAR
        writer.writerow([
            debtor.name,
            debtor.phone,
            status.value,
            format_decimal_comma(balances.get(debtor.id, ZERO)),
        ])

    return DebtorReport(
        filename=report_filename(today),
        content=buffer.getvalue().encode("utf-8-sig"),
        row_count=len(debtors),
    )
