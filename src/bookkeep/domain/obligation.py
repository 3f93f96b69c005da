"""Internal obligation domain service.

An internal obligation is a payable purchase with no counterparty. Its
total is the only money field editable after creation; edits re-derive the
balance from the payments already registered against it.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Transaction, TransactionDraft, TransactionType
from bookkeep.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    total_below_payments,
    transaction_not_found,
)
from bookkeep.domain.normalization import ZERO, remaining_balance, to_decimal, to_money

logger = logging.getLogger(__name__)

DEFAULT_OBLIGATION_NAME = "Internal obligation"


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class ObligationService:
    """Service for internal obligations."""

    def __init__(self, db: Database):
        """Initialize obligation service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_internal_obligation(
        self,
        account_id: int,
        total: Decimal | int | str,
        txn_date: date,
        name: Optional[str] = None,
        reference_number: Optional[str] = None,
        currency_id: Optional[int] = None,
        account_payment_form_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> Transaction:
        """Create an internal obligation with its whole total outstanding.

        Raises:
            NotFoundError: If the tenant account doesn't exist
            ValidationError: If the total is zero
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        amount = to_money(abs(to_decimal(total)))
        if amount == ZERO:
            raise ValidationError("Obligation total must be greater than zero")

        draft = TransactionDraft(
            account_id=account_id,
            type=TransactionType.PURCHASE,
            date=txn_date,
            name=_clean(name) or DEFAULT_OBLIGATION_NAME,
            reference_number=_clean(reference_number),
            person_id=None,
            net=amount,
            total=amount,
            payments=ZERO,
            balance=amount,
            is_account_payable=True,
            is_internal_obligation=True,
            currency_id=currency_id,
            account_payment_form_id=account_payment_form_id,
            created_by_id=created_by_id,
        )
        with self.db.transaction():
            obligation_id = self.db.create_transaction(draft)

        logger.info("Created internal obligation %s for %s", obligation_id, amount)
        return self.db.get_transaction(obligation_id)

    def update_internal_obligation(
        self,
        account_id: int,
        obligation_id: int,
        total: Decimal | int | str,
        txn_date: date,
        name: Optional[str] = None,
        reference_number: Optional[str] = None,
        currency_id: Optional[int] = None,
        account_payment_form_id: Optional[int] = None,
    ) -> Transaction:
        """Edit an internal obligation, keeping its registered payments.

        Raises:
            NotFoundError: If the obligation doesn't exist for the tenant
            ValidationError: If the new total is below the payments already
                registered; the stored total is left unchanged
        """
        amount = to_money(abs(to_decimal(total)))

        with self.db.transaction():
            current = self.db.get_transaction_for_update(obligation_id)
            if (
                current is None
                or current.account_id != account_id
                or not current.is_internal_obligation
            ):
                raise NotFoundError(transaction_not_found(obligation_id))

            payments = abs(to_decimal(current.payments))
            if amount < payments:
                logger.warning(
                    "Rejected obligation %s total %s below payments %s",
                    obligation_id,
                    amount,
                    payments,
                )
                raise ValidationError(total_below_payments(amount, payments))

            self.db.update_transaction_header(
                obligation_id,
                date=txn_date,
                name=_clean(name) or DEFAULT_OBLIGATION_NAME,
                reference_number=_clean(reference_number),
                currency_id=currency_id,
                account_payment_form_id=account_payment_form_id,
                net=amount,
                total=amount,
                balance=to_money(remaining_balance(amount, payments)),
            )

        logger.info("Updated internal obligation %s to total %s", obligation_id, amount)
        return self.db.get_transaction(obligation_id)

    def list_internal_obligations(self, account_id: int) -> list[Transaction]:
        """List active internal obligations, newest first."""
        obligations = self.db.list_transactions(
            account_id=account_id, active_only=True, is_internal_obligation=True
        )
        return sorted(obligations, key=lambda t: t.id, reverse=True)

    def list_internal_obligations_for_report(
        self,
        account_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        currency_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List active internal obligations inside a report window, by date descending."""
        return self.db.list_transactions(
            account_id=account_id,
            active_only=True,
            is_internal_obligation=True,
            start_date=date_from,
            end_date=date_to,
            currency_id=currency_id,
        )
