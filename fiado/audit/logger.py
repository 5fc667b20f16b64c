"""
Activity Logger

DESIGN DECISION: Every mutation of the book is logged locally.
This provides:
1. Traceability of the shop owner's actions
2. Debugging capability
3. A visible notice when stored data comes from another app version

The activity logger:
- Writes structured JSON lines through structlog
- Never persists events next to the ledger data
"""

import logging
import sys
from typing import Optional

import structlog

from fiado.models.audit import ActivityEvent, ActivityEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(debug: bool = False) -> None:
    """Route structlog output to stderr at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if debug else logging.INFO,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Every LedgerBook mutation goes through one of the `log_*` helpers.
    """

    def __init__(self, logger_name: str = "fiado.activity"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("activity_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("activity_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_debtor_saved(self, debtor_id: str, name: str, created: bool) -> None:
        self.log(ActivityEventBuilder.debtor_saved(debtor_id, name, created))

    def log_debtor_deleted(self, debtor_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.debtor_deleted(debtor_id, name))

    def log_product_saved(
        self,
        product_id: str,
        name: str,
        price: str,
        created: bool,
    ) -> None:
        self.log(ActivityEventBuilder.product_saved(product_id, name, price, created))

    def log_product_deleted(self, product_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.product_deleted(product_id, name))

    def log_debt_recorded(
        self,
        transaction_id: str,
        debtor_id: str,
        amount: str,
        item_count: int,
    ) -> None:
        """Log a sale on credit."""
        self.log(ActivityEventBuilder.debt_recorded(
            transaction_id=transaction_id,
            debtor_id=debtor_id,
            amount=amount,
            item_count=item_count,
        ))

    def log_payment_recorded(
        self,
        transaction_id: str,
        debtor_id: str,
        amount: str,
        method: str,
    ) -> None:
        """Log a payment."""
        self.log(ActivityEventBuilder.payment_recorded(
            transaction_id=transaction_id,
            debtor_id=debtor_id,
            amount=amount,
            method=method,
        ))

    def log_validation_failed(self, entity_type: str, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.validation_failed(entity_type, issues))

    def log_report_exported(self, filename: str, row_count: int) -> None:
        self.log(ActivityEventBuilder.report_exported(filename, row_count))

    def log_version_changed(self, previous: Optional[str], current: str) -> None:
        self.log(ActivityEventBuilder.store_version_changed(previous, current))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.external_service_error(service, error_message))
