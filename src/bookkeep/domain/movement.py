"""Compound movement domain service.

Bank deposits (cashbox to bank) and bank transfers (bank to bank) are
stored as two linked, fully settled legs: an outgoing payment drawn from
the source form and an incoming payment credited to the destination form.
The incoming leg is inserted second and points back at the outgoing leg
through ``source_transaction_id``.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.catalog import CatalogService
from bookkeep.domain.concept import ConceptService
from bookkeep.domain.entities import (
    DetailDraft,
    PaymentDirection,
    PaymentFormKind,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from bookkeep.domain.errors import NotFoundError, ValidationError, transaction_not_found
from bookkeep.domain.normalization import ZERO, to_decimal, to_money

logger = logging.getLogger(__name__)

DEFAULT_DEPOSIT_NAME = "Bank deposit"
DEFAULT_TRANSFER_NAME = "Bank transfer"
CASH_METHOD_CODE = "cash"
TRANSFER_METHOD_CODE = "bank_transfer"


class MovementService:
    """Service for bank deposits and bank transfers."""

    def __init__(self, db: Database):
        """Initialize movement service.

        Args:
            db: Database instance
        """
        self.db = db
        self.catalog_service = CatalogService(db)
        self.concept_service = ConceptService(db)

    def create_bank_deposit(
        self,
        account_id: int,
        amount: Decimal | int | str,
        txn_date: date,
        from_cash_form_id: int,
        to_bank_form_id: int,
        currency_id: Optional[int] = None,
        reference_number: Optional[str] = None,
        description: Optional[str] = None,
        cash_payment_method_id: Optional[int] = None,
        transfer_payment_method_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> tuple[Transaction, Transaction]:
        """Move cash from a cashbox into a bank account.

        Returns:
            Tuple of (outgoing leg, incoming leg)

        Raises:
            ValidationError: If the amount is zero, the forms are the same
                or of the wrong kind, or system payment concepts are missing
            NotFoundError: If a payment form doesn't exist for the tenant
        """
        from_form = self.catalog_service.require_payment_form(account_id, from_cash_form_id)
        to_form = self.catalog_service.require_payment_form(account_id, to_bank_form_id)
        if from_form.kind != PaymentFormKind.CASHBOX:
            raise ValidationError(f"Deposits must be drawn from a cashbox, not '{from_form.name}'")
        if to_form.kind != PaymentFormKind.BANK_ACCOUNT:
            raise ValidationError(f"Deposits must be credited to a bank account, not '{to_form.name}'")

        return self._create_compound_movement(
            account_id=account_id,
            amount=amount,
            txn_date=txn_date,
            from_form_id=from_form.id,
            to_form_id=to_form.id,
            is_deposit=True,
            base_name=(description or "").strip() or DEFAULT_DEPOSIT_NAME,
            outgoing_method_id=cash_payment_method_id
            or self._method_id(account_id, CASH_METHOD_CODE),
            incoming_method_id=transfer_payment_method_id
            or self._method_id(account_id, TRANSFER_METHOD_CODE),
            currency_id=currency_id,
            reference_number=reference_number,
            created_by_id=created_by_id,
        )

    def create_bank_transfer(
        self,
        account_id: int,
        amount: Decimal | int | str,
        txn_date: date,
        from_bank_form_id: int,
        to_bank_form_id: int,
        currency_id: Optional[int] = None,
        reference_number: Optional[str] = None,
        description: Optional[str] = None,
        transfer_payment_method_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> tuple[Transaction, Transaction]:
        """Move money between two bank accounts.

        Returns:
            Tuple of (outgoing leg, incoming leg)

        Raises:
            ValidationError: If the amount is zero, both forms are the same
                account, a form is not a bank account, or system payment
                concepts are missing
            NotFoundError: If a payment form doesn't exist for the tenant
        """
        if from_bank_form_id == to_bank_form_id:
            raise ValidationError("Source and destination accounts must be different")

        from_form = self.catalog_service.require_payment_form(account_id, from_bank_form_id)
        to_form = self.catalog_service.require_payment_form(account_id, to_bank_form_id)
        for form in (from_form, to_form):
            if form.kind != PaymentFormKind.BANK_ACCOUNT:
                raise ValidationError(f"Transfers require bank accounts, '{form.name}' is a {form.kind}")

        method_id = transfer_payment_method_id or self._method_id(account_id, TRANSFER_METHOD_CODE)
        return self._create_compound_movement(
            account_id=account_id,
            amount=amount,
            txn_date=txn_date,
            from_form_id=from_form.id,
            to_form_id=to_form.id,
            is_deposit=False,
            base_name=(description or "").strip() or DEFAULT_TRANSFER_NAME,
            outgoing_method_id=method_id,
            incoming_method_id=method_id,
            currency_id=currency_id,
            reference_number=reference_number,
            created_by_id=created_by_id,
        )

    def _create_compound_movement(
        self,
        account_id: int,
        amount: Decimal | int | str,
        txn_date: date,
        from_form_id: int,
        to_form_id: int,
        is_deposit: bool,
        base_name: str,
        outgoing_method_id: Optional[int],
        incoming_method_id: Optional[int],
        currency_id: Optional[int],
        reference_number: Optional[str],
        created_by_id: Optional[str],
    ) -> tuple[Transaction, Transaction]:
        value = to_money(abs(to_decimal(amount)))
        if value == ZERO:
            raise ValidationError("Amount must be greater than zero")
        if from_form_id == to_form_id:
            raise ValidationError("Source and destination accounts must be different")

        incoming_concept = self.concept_service.require_system_payment_concept(
            account_id, PaymentDirection.INCOMING
        )
        outgoing_concept = self.concept_service.require_system_payment_concept(
            account_id, PaymentDirection.OUTGOING
        )
        reference = (reference_number or "").strip() or None

        def leg(
            transaction_type: TransactionType,
            suffix: str,
            method_id: Optional[int],
            form_id: int,
            source_id: Optional[int] = None,
        ) -> TransactionDraft:
            return TransactionDraft(
                account_id=account_id,
                type=transaction_type,
                date=txn_date,
                name=f"{base_name} ({suffix})",
                reference_number=reference,
                net=value,
                total=value,
                payments=value,
                balance=ZERO,
                is_incoming_payment=transaction_type == TransactionType.INCOMING_PAYMENT,
                is_outcoming_payment=transaction_type == TransactionType.OUTGOING_PAYMENT,
                is_internal_transfer=True,
                is_deposit=is_deposit,
                source_transaction_id=source_id,
                payment_method_id=method_id,
                account_payment_form_id=form_id,
                currency_id=currency_id,
                created_by_id=created_by_id,
            )

        def line(concept_id: int) -> DetailDraft:
            return DetailDraft(
                concept_id=concept_id,
                quantity=Decimal("1"),
                price=value,
                net=value,
                total=value,
                created_by_id=created_by_id,
            )

        with self.db.transaction():
            outgoing_id = self.db.create_transaction(
                leg(TransactionType.OUTGOING_PAYMENT, "out", outgoing_method_id, from_form_id)
            )
            incoming_id = self.db.create_transaction(
                leg(
                    TransactionType.INCOMING_PAYMENT,
                    "in",
                    incoming_method_id,
                    to_form_id,
                    source_id=outgoing_id,
                )
            )
            self.db.create_transaction_details(
                [(outgoing_id, line(outgoing_concept.id)), (incoming_id, line(incoming_concept.id))]
            )

        logger.info(
            "Created %s of %s from form %s to form %s (legs %s -> %s)",
            "bank deposit" if is_deposit else "bank transfer",
            value,
            from_form_id,
            to_form_id,
            outgoing_id,
            incoming_id,
        )
        return self.db.get_transaction(outgoing_id), self.db.get_transaction(incoming_id)

    def _method_id(self, account_id: int, code: str) -> Optional[int]:
        method = self.catalog_service.find_payment_method_by_code(account_id, code)
        return method.id if method else None

    def deactivate_bank_deposit_group(self, account_id: int, incoming_leg_id: int) -> list[int]:
        """Deactivate both legs of a deposit or transfer by its incoming leg.

        Returns:
            IDs of the deactivated legs

        Raises:
            NotFoundError: If the leg doesn't exist for the tenant
            ValidationError: If the transaction is not an incoming leg
        """
        incoming = self.db.get_transaction(incoming_leg_id)
        if incoming is None or incoming.account_id != account_id:
            raise NotFoundError(transaction_not_found(incoming_leg_id))
        if not incoming.is_internal_transfer or incoming.source_transaction_id is None:
            raise ValidationError(
                f"Transaction {incoming_leg_id} is not the incoming leg of a deposit or transfer"
            )

        ids = [incoming.id, incoming.source_transaction_id]
        with self.db.transaction():
            self.db.set_transactions_active(ids, False)
        logger.info("Deactivated compound movement legs %s", ids)
        return ids

    def list_bank_deposits(self, account_id: int) -> list[Transaction]:
        """List active deposits by their incoming legs, newest first."""
        return self._list_incoming_legs(account_id, is_deposit=True)

    def list_bank_transfers(self, account_id: int) -> list[Transaction]:
        """List active bank-to-bank transfers by their incoming legs, newest first."""
        return self._list_incoming_legs(account_id, is_deposit=False)

    def _list_incoming_legs(self, account_id: int, is_deposit: bool) -> list[Transaction]:
        legs = self.db.list_transactions(
            account_id=account_id,
            active_only=True,
            is_internal_transfer=True,
            is_deposit=is_deposit,
            is_incoming_payment=True,
        )
        return sorted(legs, key=lambda t: t.id, reverse=True)
