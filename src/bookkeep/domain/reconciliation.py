"""Bank reconciliation domain service."""

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, Optional, Union

from bookkeep.database.base import Database
from bookkeep.domain.catalog import CatalogService
from bookkeep.domain.entities import ReconciliationSummary, Transaction
from bookkeep.domain.errors import NotFoundError, ValidationError, transaction_not_found
from bookkeep.domain.normalization import ZERO, signed_amount

logger = logging.getLogger(__name__)


def _sum_signed(transactions: Iterable[Transaction]) -> Decimal:
    return sum((signed_amount(t.type, t.total) for t in transactions), ZERO)


class ReconciliationService:
    """Service for reconciling payment forms against bank statements."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db
        self.catalog_service = CatalogService(db)

    def get_balances(
        self,
        account_id: int,
        account_payment_form_id: int,
        date_from: date,
        date_to: date,
    ) -> ReconciliationSummary:
        """Compute reconciliation balances for one payment form.

        Every balance is a direction-signed sum of transaction totals:
        the current balance covers all active transactions posted to the
        form, the previous balance those reconciled before ``date_from``,
        and the in-window balance those reconciled between ``date_from``
        and the end of ``date_to``.

        Args:
            account_id: Tenant account ID
            account_payment_form_id: Payment form to reconcile
            date_from: First day of the window
            date_to: Last day of the window (inclusive)

        Returns:
            ReconciliationSummary for the window

        Raises:
            ValidationError: If ``date_from`` is after ``date_to``
            NotFoundError: If the payment form doesn't exist for the tenant
        """
        if date_from > date_to:
            raise ValidationError("date_from must not be after date_to")
        self.catalog_service.require_payment_form(account_id, account_payment_form_id)

        transactions = self.db.list_transactions(
            account_id=account_id,
            account_payment_form_id=account_payment_form_id,
            active_only=True,
        )
        window_start = datetime.combine(date_from, time.min)
        window_end = datetime.combine(date_to, time.max)
        reconciled = [t for t in transactions if t.is_reconciled and t.reconciled_at is not None]

        return ReconciliationSummary(
            account_payment_form_id=account_payment_form_id,
            date_from=date_from,
            date_to=date_to,
            current_balance=_sum_signed(transactions),
            previous_balance=_sum_signed(t for t in reconciled if t.reconciled_at < window_start),
            reconciled_balance_as_of_date=_sum_signed(
                t for t in reconciled if window_start <= t.reconciled_at <= window_end
            ),
            transactions_in_range=tuple(t for t in transactions if date_from <= t.date <= date_to),
        )

    def reconcile_transaction(
        self,
        account_id: int,
        transaction_id: int,
        reconciled_at: Union[date, datetime, None] = None,
    ) -> Transaction:
        """Mark a transaction reconciled. The transition is one-way.

        Args:
            account_id: Tenant account ID
            transaction_id: Transaction to reconcile
            reconciled_at: Statement date; a plain date means its midnight.
                Defaults to today.

        Raises:
            NotFoundError: If the transaction doesn't exist for the tenant
            ValidationError: If it is inactive or already reconciled
        """
        stamp = _as_datetime(reconciled_at)
        with self.db.transaction():
            txn = self.db.get_transaction_for_update(transaction_id)
            if txn is None or txn.account_id != account_id:
                raise NotFoundError(transaction_not_found(transaction_id))
            if not txn.is_active:
                raise ValidationError(f"Transaction {transaction_id} is inactive")
            if txn.is_reconciled:
                raise ValidationError(f"Transaction {transaction_id} is already reconciled")
            self.db.mark_transaction_reconciled(transaction_id, stamp)

        logger.info("Reconciled transaction %s at %s", transaction_id, stamp.isoformat())
        return self.db.get_transaction(transaction_id)


def _as_datetime(value: Optional[Union[date, datetime]]) -> datetime:
    if value is None:
        return datetime.combine(date.today(), time.min)
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)
