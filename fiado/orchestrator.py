"""
Main Orchestrator for Fiado Digital

This module ties together all the components and defines the two flows
the interface drives:
1. Book keeping (validate → build record → update collection → persist)
2. Assistant requests (ledger data → text-generation → reply text)

DESIGN DECISION: LedgerBook is the single mutation choke point.
- No record is built from invalid input
- Every mutation is persisted before the call returns
- Every mutation is logged
- Balances are always derived from the transaction log

This is the "glue" that keeps the collections consistent even though
storage itself has no transactions.
"""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from pydantic import BaseModel

from fiado import __version__
from fiado.agents import (
    ANALYSIS_EMPTY_FALLBACK,
    ANALYSIS_ERROR_FALLBACK,
    REMINDER_EMPTY_FALLBACK,
    REMINDER_ERROR_FALLBACK,
    CollectionAgent,
    ReminderTone,
)
from fiado.audit import ActivityLogger
from fiado.config import get_settings
from fiado.models.ledger import (
    DashboardStats,
    Debtor,
    DebtorBalance,
    DebtorStatus,
    Product,
    Transaction,
    ValidationResult,
)
from fiado.queries import ledger
from fiado.reports import DebtorReport, build_debtor_report
from fiado.services.storage import (
    JsonFileRecordStore,
    NotFoundError,
    RecordKind,
    RecordStoreInterface,
    ReferentialIntegrityError,
)
from fiado.validation import (
    Cart,
    RecordValidationError,
    RecordValidator,
    TransactionBuilder,
    parse_amount,
)


Amount = Union[str, Decimal, int, float]


class LedgerBook:
    """
    Owns the three collections and every change made to them.

    Flow for each mutation:
    1. Validate input (reject → nothing changes)
    2. Build the new record
    3. Replace the in-memory collection
    4. Save the whole collection
    5. Log the activity
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        builder: Optional[TransactionBuilder] = None,
        activity_logger: Optional[ActivityLogger] = None,
        top_debtors_limit: int = 5,
        recent_transactions_limit: int = 5,
    ):
        self._store = store
        self._builder = builder or TransactionBuilder()
        self._activity = activity_logger or ActivityLogger()
        self._top_debtors_limit = top_debtors_limit
        self._recent_transactions_limit = recent_transactions_limit
        self._collections: dict[RecordKind, list] = {
            kind: store.load(kind) for kind in RecordKind
        }

    @classmethod
    def open(
        cls,
        store: RecordStoreInterface,
        version: str = __version__,
        **kwargs,
    ) -> "LedgerBook":
        """Load the book and check the stored version marker."""
        book = cls(store, **kwargs)
        book.check_version(version)
        return book

    def check_version(self, version: str) -> bool:
        """
        Compare the stored version marker with the running version.

        On mismatch a notice is logged and the marker is updated.
        No data migration is performed.

        Returns:
            True if the marker changed
        """
        stored = self._store.load_version()
        if stored == version:
            return False
        self._activity.log_version_changed(stored, version)
        self._store.save_version(version)
        return True

    @property
    def validator(self) -> RecordValidator:
        return self._builder.validator

    @property
    def payment_methods(self) -> list[str]:
        return self.validator.payment_methods

    # -------------------------------------------------------------------------
    # Choke point
    # -------------------------------------------------------------------------

    def _mutate(self, kind: RecordKind, records: list) -> None:
        """Replace a collection in memory and persist it."""
        self._store.save(kind, records)
        self._collections[kind] = records

    def _reject(self, entity_type: str, result: ValidationResult) -> None:
        """Raise RecordValidationError if the form was invalid."""
        if not result.is_valid:
            error = RecordValidationError(entity_type, result)
            self._log_rejection(error)
            raise error

    def _log_rejection(self, error: RecordValidationError) -> None:
        self._activity.log_validation_failed(
            error.entity_type,
            [issue.model_dump() for issue in error.result.issues],
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def debtors(self) -> list[Debtor]:
        return list(self._collections[RecordKind.DEBTORS])

    @property
    def products(self) -> list[Product]:
        return list(self._collections[RecordKind.PRODUCTS])

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._collections[RecordKind.TRANSACTIONS])

    def get_debtor(self, debtor_id: str) -> Optional[Debtor]:
        return next((d for d in self.debtors if d.id == debtor_id), None)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def require_debtor(self, debtor_id: str) -> Debtor:
        debtor = self.get_debtor(debtor_id)
        if debtor is None:
            raise NotFoundError(f"Debtor not found: {debtor_id}")
        return debtor

    def require_product(self, product_id: str) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    def balance(self, debtor_id: str) -> Decimal:
        return ledger.debtor_balance(self.transactions, debtor_id)

    def top_debtors(self, limit: Optional[int] = None) -> list[DebtorBalance]:
        return ledger.top_debtors(
            self.debtors,
            self.transactions,
            limit if limit is not None else self._top_debtors_limit,
        )

    def total_outstanding(self) -> Decimal:
        return ledger.total_outstanding(self.debtors, self.transactions)

    def statement(self, debtor_id: str) -> list[Transaction]:
        """The debtor's entries, newest first."""
        return ledger.debtor_statement(self.transactions, debtor_id)

    def recent_history(
        self,
        debtor_id: str,
        limit: int = 5,
    ) -> tuple[list[Transaction], list[Transaction]]:
        return ledger.recent_history(self.transactions, debtor_id, limit)

    def search_debtors(self, term: str) -> list[Debtor]:
        return ledger.search_debtors(self.debtors, term)

    def dashboard(self) -> DashboardStats:
        return ledger.dashboard_stats(
            self.debtors,
            self.products,
            self.transactions,
            top_limit=self._top_debtors_limit,
            recent_limit=self._recent_transactions_limit,
        )

    def build_report(self, today: Optional[date] = None) -> DebtorReport:
        """Build the CSV balance report without logging an export."""
        return build_debtor_report(self.debtors, self.transactions, today)

    def mark_report_exported(self, report: DebtorReport) -> None:
        """Log that a built report was handed to the user."""
        self._activity.log_report_exported(report.filename, report.row_count)

    def export_report(self, today: Optional[date] = None) -> DebtorReport:
        """Build the CSV balance report and log the export."""
        report = self.build_report(today)
        self.mark_report_exported(report)
        return report

    # -------------------------------------------------------------------------
    # Debtors
    # -------------------------------------------------------------------------

    def add_debtor(
        self,
        name: str,
        phone: str,
        status: Optional[DebtorStatus] = None,
        notes: Optional[str] = None,
    ) -> Debtor:
        """Register a new customer."""
        self._reject("debtor", self.validator.validate_debtor(name, phone, notes))

        debtor = Debtor(name=name, phone=phone, status=status, notes=notes or None)
        self._mutate(RecordKind.DEBTORS, self.debtors + [debtor])
        self._activity.log_debtor_saved(debtor.id, debtor.name, created=True)
        return debtor

    def update_debtor(
        self,
        debtor_id: str,
        name: str,
        phone: str,
        status: Optional[DebtorStatus] = None,
        notes: Optional[str] = None,
    ) -> Debtor:
        """Replace a customer's editable fields; id and created_at are kept."""
        existing = self.require_debtor(debtor_id)
        self._reject("debtor", self.validator.validate_debtor(name, phone, notes))

        updated = Debtor(
            id=existing.id,
            name=name,
            phone=phone,
            status=status,
            notes=notes or None,
            created_at=existing.created_at,
        )
        self._mutate(
            RecordKind.DEBTORS,
            [updated if d.id == debtor_id else d for d in self.debtors],
        )
        self._activity.log_debtor_saved(updated.id, updated.name, created=False)
        return updated

    def delete_debtor(self, debtor_id: str) -> Debtor:
        """
        Remove a customer.

        Raises:
            NotFoundError: If the debtor doesn't exist
            ReferentialIntegrityError: If the debtor has any transaction
        """
        debtor = self.require_debtor(debtor_id)
        if any(t.debtor_id == debtor_id for t in self.transactions):
            raise ReferentialIntegrityError(
                f"Debtor {debtor.name} has ledger entries and cannot be deleted"
            )

        self._mutate(
            RecordKind.DEBTORS,
            [d for d in self.debtors if d.id != debtor_id],
        )
        self._activity.log_debtor_deleted(debtor.id, debtor.name)
        return debtor

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def add_product(self, name: str, price: Amount) -> Product:
        """Add a product to the catalog."""
        price_text = str(price) if price is not None else None
        self._reject("product", self.validator.validate_product(name, price_text))

        product = Product(name=name, default_price=parse_amount(price_text))
        self._mutate(RecordKind.PRODUCTS, self.products + [product])
        self._activity.log_product_saved(
            product.id, product.name, str(product.default_price), created=True
        )
        return product

    def update_product(self, product_id: str, name: str, price: Amount) -> Product:
        """
        Replace a product's name and price.

        Recorded debts keep the name and price they were sold with.
        """
        self.require_product(product_id)
        price_text = str(price) if price is not None else None
        self._reject("product", self.validator.validate_product(name, price_text))

        updated = Product(
            id=product_id,
            name=name,
            default_price=parse_amount(price_text),
        )
        self._mutate(
            RecordKind.PRODUCTS,
            [updated if p.id == product_id else p for p in self.products],
        )
        self._activity.log_product_saved(
            updated.id, updated.name, str(updated.default_price), created=False
        )
        return updated

    def delete_product(self, product_id: str) -> Product:
        """
        Remove a product from the catalog.

        Always allowed: line items of recorded debts carry their own
        snapshot of the product name and price.
        """
        product = self.require_product(product_id)
        self._mutate(
            RecordKind.PRODUCTS,
            [p for p in self.products if p.id != product_id],
        )
        self._activity.log_product_deleted(product.id, product.name)
        return product

    # -------------------------------------------------------------------------
    # Transactions (append-only)
    # -------------------------------------------------------------------------

    def _next_sequence(self) -> int:
        return max((t.sequence for t in self.transactions), default=0) + 1

    def _append_transaction(self, transaction: Transaction) -> None:
        self._mutate(RecordKind.TRANSACTIONS, self.transactions + [transaction])

    def new_cart(self) -> Cart:
        return Cart(self.validator)

    def record_debt(
        self,
        debtor_id: str,
        cart: Cart,
        entry_date: Optional[date] = None,
        now: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """
        Record a sale on credit from the cart.

        Raises:
            NotFoundError: If the debtor doesn't exist
            RecordValidationError: If the cart is empty
        """
        self.require_debtor(debtor_id)
        try:
            transaction = self._builder.build_debt(
                debtor_id=debtor_id,
                cart=cart,
                entry_date=entry_date or date.today(),
                sequence=self._next_sequence(),
                now=now,
                description=description,
            )
        except RecordValidationError as e:
            self._log_rejection(e)
            raise

        self._append_transaction(transaction)
        self._activity.log_debt_recorded(
            transaction_id=transaction.id,
            debtor_id=debtor_id,
            amount=str(transaction.total_amount),
            item_count=len(transaction.items),
        )
        return transaction

    def record_payment(
        self,
        debtor_id: str,
        amount: Optional[Amount],
        method: Optional[str],
        entry_date: Optional[date] = None,
        now: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """
        Record a payment toward the debtor's balance.

        Raises:
            NotFoundError: If the debtor doesn't exist
            RecordValidationError: If the amount or method is invalid
        """
        self.require_debtor(debtor_id)
        try:
            transaction = self._builder.build_payment(
                debtor_id=debtor_id,
                amount_text=str(amount) if amount is not None else None,
                method=method,
                entry_date=entry_date or date.today(),
                sequence=self._next_sequence(),
                now=now,
                description=description,
            )
        except RecordValidationError as e:
            self._log_rejection(e)
            raise

        self._append_transaction(transaction)
        self._activity.log_payment_recorded(
            transaction_id=transaction.id,
            debtor_id=debtor_id,
            amount=str(transaction.total_amount),
            method=transaction.payment_method,
        )
        return transaction


class AssistantReply(BaseModel):
    """Terminal state of one assistant request."""

    text: str
    succeeded: bool


ASSISTANT_ERROR_TEXT = "Ocorreu um erro ao consultar a IA."
ASSISTANT_BUSY_TEXT = "Aguarde: a IA ainda está respondendo ao pedido anterior."

_FALLBACK_TEXTS = {
    ANALYSIS_EMPTY_FALLBACK,
    ANALYSIS_ERROR_FALLBACK,
    REMINDER_EMPTY_FALLBACK,
    REMINDER_ERROR_FALLBACK,
}


class AssistantFlow:
    """
    Orchestrates requests to the text-generation assistant.

    The flow owns a loading flag for the view:
    - set when a request starts, cleared when it finishes or fails
    - a second request while loading is refused, never queued
    - no retries, no cancellation; one terminal reply per request
    """

    def __init__(
        self,
        book: LedgerBook,
        agent: Optional[CollectionAgent] = None,
        activity_logger: Optional[ActivityLogger] = None,
        history_limit: int = 5,
    ):
        self._book = book
        self._agent = agent
        self._activity = activity_logger or ActivityLogger()
        self._history_limit = history_limit
        self._loading = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    def _get_agent(self) -> CollectionAgent:
        # Created on first use so the ledger works without a Gemini key
        if self._agent is None:
            self._agent = CollectionAgent()
        return self._agent

    async def _run(
        self,
        request: Callable[[CollectionAgent], Awaitable[str]],
    ) -> AssistantReply:
        if self._loading:
            return AssistantReply(text=ASSISTANT_BUSY_TEXT, succeeded=False)

        self._loading = True
        try:
            text = await request(self._get_agent())
        except Exception as e:
            self._activity.log_external_service_error("gemini", str(e))
            return AssistantReply(text=ASSISTANT_ERROR_TEXT, succeeded=False)
        finally:
            self._loading = False

        succeeded = text not in _FALLBACK_TEXTS
        if not succeeded:
            self._activity.log_external_service_error("gemini", text)
        return AssistantReply(text=text, succeeded=succeeded)

    async def request_reminder(
        self,
        debtor_id: str,
        tone: ReminderTone,
    ) -> AssistantReply:
        """Draft a collection reminder for the debtor's current balance."""
        debtor = self._book.require_debtor(debtor_id)
        balance = self._book.balance(debtor_id)
        return await self._run(
            lambda agent: agent.generate_reminder(debtor.name, balance, tone)
        )

    async def request_analysis(self, debtor_id: str) -> AssistantReply:
        """Summarize the debtor's recent purchases and payments."""
        debtor = self._book.require_debtor(debtor_id)
        debts, payments = self._book.recent_history(debtor_id, self._history_limit)
        return await self._run(
            lambda agent: agent.analyze_payment_behavior(debtor.name, debts, payments)
        )


def create_app_components(
    data_dir: Optional[Path] = None,
    store: Optional[RecordStoreInterface] = None,
) -> tuple[LedgerBook, AssistantFlow]:
    """
    Factory function to create all application components.

    Args:
        data_dir: Where the JSON files live. Defaults to the configured dir.
        store: Explicit store (tests); takes precedence over data_dir.

    Returns:
        (ledger_book, assistant_flow)
    """
    app_settings = get_settings().app
    activity_logger = ActivityLogger()

    if store is None:
        store = JsonFileRecordStore(data_dir or app_settings.data_dir)

    builder = TransactionBuilder(RecordValidator(app_settings.payment_methods_list))
    book = LedgerBook.open(
        store,
        builder=builder,
        activity_logger=activity_logger,
        top_debtors_limit=app_settings.top_debtors_limit,
        recent_transactions_limit=app_settings.recent_transactions_limit,
    )
    assistant = AssistantFlow(
        book,
        activity_logger=activity_logger,
        history_limit=app_settings.recent_transactions_limit,
    )
    return book, assistant


__all__ = [
    "ASSISTANT_BUSY_TEXT",
    "ASSISTANT_ERROR_TEXT",
    "AssistantFlow",
    "AssistantReply",
    "LedgerBook",
    "create_app_components",
]
