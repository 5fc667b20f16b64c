"""Ledger queries package."""

from fiado.queries.ledger import (
    balances_by_debtor,
    dashboard_stats,
    debtor_balance,
    debtor_statement,
    rank_debtors,
    recent_history,
    recent_transactions,
    search_debtors,
    top_debtors,
    total_outstanding,
)

__all__ = [
    "balances_by_debtor",
    "dashboard_stats",
    "debtor_balance",
    "debtor_statement",
    "rank_debtors",
    "recent_history",
    "recent_transactions",
    "search_debtors",
    "top_debtors",
    "total_outstanding",
]
