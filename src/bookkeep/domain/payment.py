"""Payment domain service.

Applies payments against the outstanding balance of credit transactions.
The paid row is re-read under a row lock and the three writes (payment
transaction, payment detail, paid-row update) share one unit of work, so
a failure at any step leaves no payment behind.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.concept import ConceptService
from bookkeep.domain.entities import (
    DetailDraft,
    PaymentDirection,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from bookkeep.domain.errors import (
    InvalidAmountError,
    NotFoundError,
    ValidationError,
    payment_detail_mismatch,
    payment_exceeds_balance,
    transaction_not_found,
)
from bookkeep.domain.normalization import (
    ZERO,
    amounts_equal,
    remaining_balance,
    to_decimal,
    to_money,
)

logger = logging.getLogger(__name__)

PAYMENT_TYPES = {
    PaymentDirection.INCOMING: TransactionType.INCOMING_PAYMENT,
    PaymentDirection.OUTGOING: TransactionType.OUTGOING_PAYMENT,
}


def payment_direction_for(txn: Transaction) -> str:
    """Return the direction money moves when ``txn`` is paid down.

    Receivables are collected (incoming); payables are settled (outgoing).
    """
    if txn.is_account_receivable or txn.type == TransactionType.SALE:
        return PaymentDirection.INCOMING
    return PaymentDirection.OUTGOING


class PaymentService:
    """Service for registering payments against open balances."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db
        self.concept_service = ConceptService(db)

    def register_payment_for_transaction(
        self,
        paid_transaction_id: int,
        payment_transaction: TransactionDraft,
        payment_detail: DetailDraft,
    ) -> Transaction:
        """Register a payment against a transaction's current balance.

        Args:
            paid_transaction_id: ID of the transaction being paid down
            payment_transaction: Incoming or outgoing payment draft
            payment_detail: Line payload for the payment. Its concept is
                replaced with the tenant's system payment concept and its
                amounts are stored as one unit priced at the payment amount

        Returns:
            The created payment transaction

        Raises:
            NotFoundError: If the paid transaction doesn't exist for the tenant
            ValidationError: If the draft is not a payment or the tenant has
                no system payment concept for its direction
            InvalidAmountError: If the amount is not in (0, current balance]
                or the detail total differs from it
            PersistenceError: If any write fails; all writes are rolled back
        """
        payment_type = TransactionType(payment_transaction.type)
        if payment_type not in PAYMENT_TYPES.values():
            raise ValidationError(
                f"Payment transactions must be incoming or outgoing payments, not {payment_type.name.lower()}"
            )
        direction = (
            PaymentDirection.INCOMING
            if payment_type == TransactionType.INCOMING_PAYMENT
            else PaymentDirection.OUTGOING
        )
        account_id = payment_transaction.account_id
        concept = self.concept_service.require_system_payment_concept(account_id, direction)
        amount = to_decimal(payment_transaction.total)
        if not amounts_equal(payment_detail.total, amount):
            raise InvalidAmountError(payment_detail_mismatch(to_decimal(payment_detail.total), amount))

        with self.db.transaction():
            paid = self.db.get_transaction_for_update(paid_transaction_id)
            if paid is None or paid.account_id != account_id or not paid.is_active:
                raise NotFoundError(transaction_not_found(paid_transaction_id))

            if amount <= ZERO or amount > to_decimal(paid.balance):
                logger.warning(
                    "Rejected payment of %s against transaction %s (balance %s)",
                    amount,
                    paid.id,
                    paid.balance,
                )
                raise InvalidAmountError(payment_exceeds_balance(amount, paid.balance))

            draft = _settled_payment_draft(payment_transaction, direction, amount)
            payment_id = self.db.create_transaction(draft)
            self.db.create_transaction_details(
                [
                    (
                        payment_id,
                        DetailDraft(
                            concept_id=concept.id,
                            quantity=Decimal("1"),
                            price=amount,
                            net=amount,
                            total=amount,
                            seller_id=payment_detail.seller_id,
                            transaction_paid_id=paid.id,
                            created_by_id=payment_detail.created_by_id,
                        ),
                    )
                ]
            )

            payments = to_money(to_decimal(paid.payments) + amount)
            balance = to_money(remaining_balance(paid.total, payments))
            self.db.update_transaction_payments(paid.id, payments=payments, balance=balance)

        logger.info(
            "Registered %s payment %s of %s against transaction %s (balance now %s)",
            direction,
            payment_id,
            amount,
            paid_transaction_id,
            balance,
        )
        return self.db.get_transaction(payment_id)

    def register_payment(
        self,
        account_id: int,
        paid_transaction_id: int,
        amount: Decimal | int | str,
        payment_date: date,
        payment_method_id: Optional[int] = None,
        account_payment_form_id: Optional[int] = None,
        name: Optional[str] = None,
        reference_number: Optional[str] = None,
        created_by_id: Optional[str] = None,
    ) -> Transaction:
        """Build and register a payment the way the payment form does.

        The direction follows the paid transaction: receivables produce an
        incoming payment, payables an outgoing one. Counterparty and
        currency are copied from the paid transaction.
        """
        paid = self.db.get_transaction(paid_transaction_id)
        if paid is None or paid.account_id != account_id:
            raise NotFoundError(transaction_not_found(paid_transaction_id))

        direction = payment_direction_for(paid)
        concept = self.concept_service.require_system_payment_concept(account_id, direction)
        value = to_money(amount)
        draft = TransactionDraft(
            account_id=account_id,
            type=PAYMENT_TYPES[direction],
            date=payment_date,
            person_id=paid.person_id,
            name=name.strip() if name and name.strip() else None,
            reference_number=reference_number.strip() if reference_number and reference_number.strip() else None,
            net=value,
            total=value,
            payments=value,
            balance=ZERO,
            currency_id=paid.currency_id,
            payment_method_id=payment_method_id,
            account_payment_form_id=account_payment_form_id,
            created_by_id=created_by_id,
        )
        detail = DetailDraft(
            concept_id=concept.id,
            quantity=Decimal("1"),
            price=value,
            net=value,
            total=value,
            created_by_id=created_by_id,
        )
        return self.register_payment_for_transaction(paid_transaction_id, draft, detail)


def _settled_payment_draft(
    draft: TransactionDraft, direction: str, amount: Decimal
) -> TransactionDraft:
    """Return ``draft`` forced into a self-settled payment shape."""
    return TransactionDraft(
        account_id=draft.account_id,
        type=PAYMENT_TYPES[direction],
        date=draft.date,
        total=amount,
        payments=amount,
        balance=ZERO,
        net=amount,
        discounts=draft.discounts,
        taxes=draft.taxes,
        additional_charges=draft.additional_charges,
        person_id=draft.person_id,
        employee_id=draft.employee_id,
        name=draft.name,
        reference_number=draft.reference_number,
        status=draft.status,
        is_incoming_payment=direction == PaymentDirection.INCOMING,
        is_outcoming_payment=direction == PaymentDirection.OUTGOING,
        account_payment_form_id=draft.account_payment_form_id,
        payment_method_id=draft.payment_method_id,
        currency_id=draft.currency_id,
        project_id=draft.project_id,
        created_by_id=draft.created_by_id,
    )
