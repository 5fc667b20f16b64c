"""Tests for the ledger engine (balances, rankings, statements)."""

import pytest
from datetime import timedelta
from decimal import Decimal

from fiado.models.ledger import TransactionType
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

from factories import DAY, make_debt, make_debtor, make_payment, make_product


class TestDebtorBalance:
    """Signed accumulation of DEBT and PAYMENT totals."""

    def test_balance_is_debts_minus_payments(self):
        """Test balance == Σ debts − Σ payments for the debtor."""
        transactions = [
            make_debt("d1", "18.00"),
            make_payment("d1", "5.50"),
            make_debt("d1", "7.00"),
            make_debt("d2", "100.00"),
            make_payment("d1", "2.25"),
        ]
        assert debtor_balance(transactions, "d1") == Decimal("17.25")
        assert debtor_balance(transactions, "d2") == Decimal("100.00")

    def test_balance_without_transactions_is_zero(self):
        """Test a debtor with no transactions has a balance of exactly 0."""
        assert debtor_balance([], "d1") == Decimal("0")
        assert debtor_balance([make_debt("d2", "3")], "d1") == Decimal("0")

    def test_balance_can_be_negative(self):
        """Test overpayment leaves a credit (negative balance)."""
        transactions = [make_debt("d1", "10"), make_payment("d1", "50")]
        assert debtor_balance(transactions, "d1") == Decimal("-40")

    def test_accumulation_is_exact(self):
        """Test no rounding happens while accumulating."""
        transactions = [make_debt("d1", "0.10") for _ in range(3)]
        assert debtor_balance(transactions, "d1") == Decimal("0.30")

    def test_balances_by_debtor_matches_single_balance(self):
        transactions = [
            make_debt("d1", "10"),
            make_debt("d2", "20"),
            make_payment("d1", "4"),
        ]
        balances = balances_by_debtor(transactions)
        assert balances == {
            "d1": debtor_balance(transactions, "d1"),
            "d2": debtor_balance(transactions, "d2"),
        }


class TestRanking:
    """Top debtors and total outstanding."""

    def _book(self, amounts):
        debtors = [make_debtor(name=f"Cliente {i}") for i in range(len(amounts))]
        transactions = []
        for debtor, amount in zip(debtors, amounts):
            if amount > 0:
                transactions.append(make_debt(debtor.id, amount))
            elif amount < 0:
                transactions.append(make_payment(debtor.id, -amount))
        return debtors, transactions

    def test_top_debtors_is_stable_on_ties(self):
        """Test top 5 of [120, 300, 0, -40, 300, 50] keeps tie order."""
        debtors, transactions = self._book([120, 300, 0, -40, 300, 50])

        top = top_debtors(debtors, transactions, 5)

        assert [row.balance for row in top] == [
            Decimal("300"), Decimal("300"), Decimal("120"), Decimal("50"), Decimal("0"),
        ]
        assert top[0].debtor.id == debtors[1].id
        assert top[1].debtor.id == debtors[4].id

    def test_rank_without_limit_returns_everyone(self):
        debtors, transactions = self._book([5, 10])
        ranked = rank_debtors(debtors, transactions)
        assert [row.debtor.id for row in ranked] == [debtors[1].id, debtors[0].id]

    def test_total_outstanding(self):
        """Test total outstanding is the sum of all balances."""
        debtors, transactions = self._book([120, 300, 0, -40, 300, 50])
        assert total_outstanding(debtors, transactions) == Decimal("730")

    def test_orphaned_transactions_are_excluded(self):
        """Test transactions of an unknown debtor don't count."""
        debtors, transactions = self._book([100])
        transactions.append(make_debt("removed-debtor", "999"))

        assert total_outstanding(debtors, transactions) == Decimal("100")
        assert [row.debtor.id for row in top_debtors(debtors, transactions)] == [
            debtors[0].id
        ]


class TestStatements:
    """Ordering and history views."""

    def test_statement_is_newest_first(self):
        older = make_debt("d1", "1", when=DAY - timedelta(days=2), sequence=2)
        newer = make_payment("d1", "1", when=DAY, sequence=1)
        other = make_debt("d2", "1", when=DAY + timedelta(days=1), sequence=3)

        statement = debtor_statement([older, newer, other], "d1")

        assert [t.id for t in statement] == [newer.id, older.id]

    def test_same_timestamp_uses_sequence(self):
        """Test entries stamped with the same instant keep entry order."""
        first = make_debt("d1", "1", when=DAY, sequence=1)
        second = make_debt("d1", "2", when=DAY, sequence=2)

        statement = debtor_statement([second, first], "d1")

        assert [t.id for t in statement] == [second.id, first.id]

    def test_recent_history_takes_last_five_of_each_kind(self):
        transactions = []
        for i in range(7):
            transactions.append(make_debt("d1", i + 1, sequence=2 * i))
            transactions.append(make_payment("d1", i + 1, sequence=2 * i + 1))

        debts, payments = recent_history(transactions, "d1", limit=5)

        assert [t.total_amount for t in debts] == [Decimal(n) for n in range(3, 8)]
        assert all(t.type == TransactionType.DEBT for t in debts)
        assert len(payments) == 5

    def test_recent_transactions(self):
        transactions = [
            make_debt("d1", "1", when=DAY + timedelta(hours=h), sequence=h)
            for h in range(8)
        ]
        recent = recent_transactions(transactions, limit=3)
        assert [t.sequence for t in recent] == [7, 6, 5]


class TestSearchAndDashboard:

    def test_search_by_name_or_phone(self):
        maria = make_debtor(name="Maria Silva", phone="11999990000")
        jose = make_debtor(name="José", phone="21988887777")

        assert search_debtors([maria, jose], "maria") == [maria]
        assert search_debtors([maria, jose], "2198") == [jose]
        assert search_debtors([maria, jose], "  ") == [maria, jose]
        assert search_debtors([maria, jose], "Pedro") == []

    def test_dashboard_stats(self):
        maria = make_debtor(name="Maria")
        jose = make_debtor(name="José")
        transactions = [
            make_debt(maria.id, "30", sequence=1),
            make_debt(jose.id, "10", sequence=2),
            make_payment(maria.id, "5", sequence=3),
        ]

        stats = dashboard_stats(
            [maria, jose],
            [make_product()],
            transactions,
            top_limit=1,
            recent_limit=2,
        )

        assert stats.total_debtors == 2
        assert stats.total_products == 1
        assert stats.total_outstanding == Decimal("35")
        assert [row.debtor.id for row in stats.top_debtors] == [maria.id]
        assert [t.sequence for t in stats.recent_transactions] == [3, 2]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
