"""
Ledger Engine

Pure functions over the debtor, product and transaction collections.

GUARANTEES:
- A balance is always recomputed from the transaction log, never stored,
  so it cannot drift from the entries that produced it
- Accumulation is exact (Decimal); rounding only happens on display
- A debtor without transactions has a balance of exactly zero
- Transactions pointing at an unknown debtor are ignored by every
  debtor-keyed view
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from fiado.models.ledger import (
    DashboardStats,
    Debtor,
    DebtorBalance,
    Product,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")


def debtor_balance(transactions: Iterable[Transaction], debtor_id: str) -> Decimal:
    """
    Outstanding balance of one debtor.

    Sum of +total_amount for DEBT and -total_amount for PAYMENT over
    the debtor's transactions. Positive means the debtor owes the shop.
    """
    return sum(
        (t.signed_amount for t in transactions if t.debtor_id == debtor_id),
        ZERO,
    )


def balances_by_debtor(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Balance of every debtor id found in the log, computed in one pass."""
    balances: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        balances[t.debtor_id] += t.signed_amount
    return dict(balances)


def rank_debtors(
    debtors: Sequence[Debtor],
    transactions: Iterable[Transaction],
    limit: Optional[int] = None,
) -> list[DebtorBalance]:
    """
    Debtors ordered by descending balance.

    The sort is stable: debtors with equal balances keep their original
    relative order.
    """
    balances = balances_by_debtor(transactions)
    ranked = sorted(
        (DebtorBalance(debtor=d, balance=balances.get(d.id, ZERO)) for d in debtors),
        key=lambda row: row.balance,
        reverse=True,
    )
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def top_debtors(
    debtors: Sequence[Debtor],
    transactions: Iterable[Transaction],
    limit: int = 5,
) -> list[DebtorBalance]:
    """The `limit` debtors that owe the most."""
    return rank_debtors(debtors, transactions, limit=limit)


def total_outstanding(
    debtors: Sequence[Debtor],
    transactions: Iterable[Transaction],
) -> Decimal:
    """Sum of the balances of all known debtors."""
    balances = balances_by_debtor(transactions)
    return sum((balances.get(d.id, ZERO) for d in debtors), ZERO)


def _chronological_key(t: Transaction):
    return (t.date, t.sequence)


def debtor_statement(
    transactions: Iterable[Transaction],
    debtor_id: str,
) -> list[Transaction]:
    """A debtor's transactions, newest first."""
    return sorted(
        (t for t in transactions if t.debtor_id == debtor_id),
        key=_chronological_key,
        reverse=True,
    )


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 5,
) -> list[Transaction]:
    """The newest transactions across all debtors."""
    return sorted(transactions, key=_chronological_key, reverse=True)[:limit]


def recent_history(
    transactions: Iterable[Transaction],
    debtor_id: str,
    limit: int = 5,
) -> tuple[list[Transaction], list[Transaction]]:
    """
    The last `limit` debts and payments of a debtor, in entry order.

    Used to give the analysis assistant a short view of the debtor's
    behaviour.
    """
    own = [t for t in transactions if t.debtor_id == debtor_id]
    debts = [t for t in own if t.type == TransactionType.DEBT][-limit:]
    payments = [t for t in own if t.type == TransactionType.PAYMENT][-limit:]
    return debts, payments


def search_debtors(debtors: Sequence[Debtor], term: str) -> list[Debtor]:
    """Debtors whose name (case-insensitive) or phone contains `term`."""
    term = term.strip()
    if not term:
        return list(debtors)
    lowered = term.lower()
    return [d for d in debtors if lowered in d.name.lower() or term in d.phone]


def dashboard_stats(
    debtors: Sequence[Debtor],
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    top_limit: int = 5,
    recent_limit: int = 5,
) -> DashboardStats:
    """Aggregates for the dashboard, all derived from the current collections."""
    return DashboardStats(
        total_debtors=len(debtors),
        total_products=len(products),
        total_outstanding=total_outstanding(debtors, transactions),
        recent_transactions=recent_transactions(transactions, recent_limit),
        top_debtors=top_debtors(debtors, transactions, top_limit),
    )
