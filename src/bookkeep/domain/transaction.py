"""Transaction domain service.

Composes transactions with their line details as one unit of work and
serves the transaction read models.
"""

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Sequence

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    DetailDraft,
    InvariantViolation,
    LineAmounts,
    LineInput,
    Transaction,
    TransactionDetail,
    TransactionDraft,
    TransactionType,
)
from bookkeep.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    concept_not_found,
    transaction_not_found,
)
from bookkeep.domain.normalization import (
    ZERO,
    aggregate_lines,
    allows_negative_total,
    amounts_equal,
    balance_invariant_violations,
    calculate_line_amounts,
    normalize_amount,
    to_decimal,
    to_money,
)

logger = logging.getLogger(__name__)

CREDIT_TYPES = (TransactionType.SALE, TransactionType.PURCHASE)
SIMPLE_TYPES = (TransactionType.INCOME, TransactionType.EXPENSE, TransactionType.PURCHASE)


def build_transaction_draft(
    account_id: int,
    transaction_type: TransactionType,
    txn_date: date,
    totals: LineAmounts,
    is_credit: bool = False,
    person_id: Optional[int] = None,
    name: Optional[str] = None,
    reference_number: Optional[str] = None,
    currency_id: Optional[int] = None,
    payment_method_id: Optional[int] = None,
    account_payment_form_id: Optional[int] = None,
    project_id: Optional[int] = None,
    employee_id: Optional[int] = None,
    created_by_id: Optional[str] = None,
) -> TransactionDraft:
    """Build a transaction draft from aggregated line totals.

    Credit transactions start with the whole total outstanding; everything
    else is settled at creation. A draft posted to a payment form is
    reconciled as of its date.

    Raises:
        ValidationError: If credit is requested for a type other than sale or purchase
    """
    transaction_type = TransactionType(transaction_type)
    if is_credit and transaction_type not in CREDIT_TYPES:
        raise ValidationError("Only sales and purchases can be registered on credit")

    total = to_money(totals.total)
    auto_reconcile = account_payment_form_id is not None and not is_credit
    return TransactionDraft(
        account_id=account_id,
        type=transaction_type,
        date=txn_date,
        name=name.strip() if name and name.strip() else None,
        reference_number=reference_number.strip() if reference_number and reference_number.strip() else None,
        person_id=person_id,
        employee_id=employee_id,
        net=to_money(totals.net),
        discounts=to_money(totals.discount),
        taxes=to_money(totals.tax),
        additional_charges=to_money(totals.additional_charges),
        total=total,
        balance=total if is_credit else ZERO,
        payments=ZERO if is_credit else total,
        is_account_payable=transaction_type == TransactionType.PURCHASE and is_credit,
        is_account_receivable=transaction_type == TransactionType.SALE and is_credit,
        is_incoming_payment=transaction_type == TransactionType.INCOME,
        currency_id=currency_id,
        payment_method_id=None if is_credit else payment_method_id,
        account_payment_form_id=None if is_credit else account_payment_form_id,
        project_id=project_id,
        is_reconciled=auto_reconcile,
        reconciled_at=datetime.combine(txn_date, time.min) if auto_reconcile else None,
        created_by_id=created_by_id,
    )


class TransactionService:
    """Service for composing and reading ledger transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction_with_details(
        self, transaction: TransactionDraft, details: Sequence[DetailDraft]
    ) -> Transaction:
        """Create a transaction and all of its detail lines atomically.

        Args:
            transaction: Fully populated draft with caller-computed money fields
            details: Non-empty list of line payloads

        Returns:
            The created transaction

        Raises:
            NotFoundError: If the tenant account doesn't exist
            ValidationError: If no details are given, a concept is not the
                tenant's, or the money fields are inconsistent
            PersistenceError: If the store fails; nothing is left behind
        """
        self.validate_draft(transaction)
        self._validate_details(transaction.account_id, details)

        with self.db.transaction():
            transaction_id = self.db.create_transaction(transaction)
            self.db.create_transaction_details([(transaction_id, detail) for detail in details])

        logger.info(
            "Created transaction %s (type=%s, total=%s) with %d detail(s)",
            transaction_id,
            TransactionType(transaction.type).name,
            transaction.total,
            len(details),
        )
        return self.db.get_transaction(transaction_id)

    def create_transaction_with_detail(
        self, transaction: TransactionDraft, detail: DetailDraft
    ) -> Transaction:
        """Create a transaction with a single detail line."""
        return self.create_transaction_with_details(transaction, [detail])

    def create_simple_transaction(
        self,
        account_id: int,
        transaction_type: TransactionType,
        concept_id: int,
        amount: Decimal | int | str,
        txn_date: date,
        additional_charges: Decimal | int | str = 0,
        is_credit: bool = False,
        person_id: Optional[int] = None,
        name: Optional[str] = None,
        reference_number: Optional[str] = None,
        currency_id: Optional[int] = None,
        payment_method_id: Optional[int] = None,
        account_payment_form_id: Optional[int] = None,
        project_id: Optional[int] = None,
        employee_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> Transaction:
        """Create a single-concept income, expense or purchase.

        The entered amounts are magnitudes; the storage sign is applied here.

        Raises:
            ValidationError: If the type is not income/expense/purchase, the
                amount is zero, or a purchase has no provider
        """
        transaction_type = TransactionType(transaction_type)
        if transaction_type not in SIMPLE_TYPES:
            raise ValidationError(
                f"Simple transactions must be income, expense or purchase, not {transaction_type.name.lower()}"
            )
        if to_decimal(amount) == ZERO:
            raise ValidationError("Transaction amount must not be zero")
        if transaction_type == TransactionType.PURCHASE and person_id is None:
            raise ValidationError("A provider is required for purchases")

        base_amount = normalize_amount(transaction_type, amount)
        charges = (
            normalize_amount(transaction_type, additional_charges)
            if to_decimal(additional_charges) != ZERO
            else ZERO
        )
        totals = LineAmounts(
            net=base_amount,
            tax=ZERO,
            discount=ZERO,
            additional_charges=charges,
            total=base_amount + charges,
        )
        draft = build_transaction_draft(
            account_id=account_id,
            transaction_type=transaction_type,
            txn_date=txn_date,
            totals=totals,
            is_credit=is_credit,
            person_id=person_id,
            name=name,
            reference_number=reference_number,
            currency_id=currency_id,
            payment_method_id=payment_method_id,
            account_payment_form_id=account_payment_form_id,
            project_id=project_id,
            employee_id=employee_id,
            created_by_id=created_by_id,
        )
        detail = DetailDraft(
            concept_id=concept_id,
            quantity=Decimal("1"),
            price=to_money(base_amount),
            net=to_money(base_amount),
            total=to_money(totals.total),
            additional_charges=to_money(charges),
            created_by_id=created_by_id,
        )
        return self.create_transaction_with_detail(draft, detail)

    def create_sale(
        self,
        account_id: int,
        lines: Sequence[LineInput],
        txn_date: date,
        is_credit: bool = False,
        person_id: Optional[int] = None,
        name: Optional[str] = None,
        reference_number: Optional[str] = None,
        currency_id: Optional[int] = None,
        payment_method_id: Optional[int] = None,
        account_payment_form_id: Optional[int] = None,
        project_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> Transaction:
        """Create a multi-line sale.

        Raises:
            ValidationError: If there are no lines, a credit sale has no
                client, or a cash sale has no payment method
        """
        if not lines:
            raise ValidationError("A sale needs at least one line")
        if is_credit and person_id is None:
            raise ValidationError("A client is required for credit sales")
        if not is_credit and payment_method_id is None:
            raise ValidationError("A payment method is required for cash sales")

        details = []
        amounts = []
        for line in lines:
            line_amounts = calculate_line_amounts(
                quantity=line.quantity,
                price=line.price,
                tax_percentage=line.tax_percentage,
                discount_percentage=line.discount_percentage,
                additional_charges=line.additional_charges,
            )
            amounts.append(line_amounts)
            details.append(
                DetailDraft(
                    concept_id=line.concept_id,
                    quantity=to_decimal(line.quantity),
                    price=to_money(line.price),
                    net=line_amounts.net,
                    tax_percentage=to_decimal(line.tax_percentage),
                    tax=line_amounts.tax,
                    discount_percentage=to_decimal(line.discount_percentage),
                    discount=line_amounts.discount,
                    total=line_amounts.total,
                    additional_charges=line_amounts.additional_charges,
                    seller_id=line.seller_id,
                    created_by_id=created_by_id,
                )
            )

        draft = build_transaction_draft(
            account_id=account_id,
            transaction_type=TransactionType.SALE,
            txn_date=txn_date,
            totals=aggregate_lines(amounts),
            is_credit=is_credit,
            person_id=person_id,
            name=name,
            reference_number=reference_number,
            currency_id=currency_id,
            payment_method_id=payment_method_id,
            account_payment_form_id=account_payment_form_id,
            project_id=project_id,
            created_by_id=created_by_id,
        )
        return self.create_transaction_with_details(draft, details)

    def validate_draft(self, transaction: TransactionDraft) -> None:
        """Check a draft's tenant and money fields before any write.

        Raises:
            NotFoundError: If the tenant account doesn't exist
            ValidationError: If the counterparty is not the tenant's or the
                money fields are inconsistent
        """
        if self.db.get_account(transaction.account_id) is None:
            raise NotFoundError(account_not_found(transaction.account_id))
        if transaction.person_id is not None:
            person = self.db.get_person(transaction.person_id)
            if person is None or person.account_id != transaction.account_id:
                raise ValidationError(f"Person {transaction.person_id} not found")

        transaction_type = TransactionType(transaction.type)
        total = to_decimal(transaction.total)
        if total < ZERO and not allows_negative_total(transaction_type):
            raise ValidationError(
                f"Total cannot be negative for {transaction_type.name.lower()} transactions"
            )
        reasons = balance_invariant_violations(total, transaction.payments, transaction.balance)
        if reasons:
            raise ValidationError(f"Inconsistent money fields: {'; '.join(reasons)}")
        if not transaction.is_credit and not amounts_equal(transaction.balance, ZERO):
            raise ValidationError("Only credit transactions can leave an outstanding balance")

    def _validate_details(self, account_id: int, details: Sequence[DetailDraft]) -> None:
        if not details:
            raise ValidationError("At least one detail line is required")

        concept_ids = [detail.concept_id for detail in details]
        concepts = {c.id: c for c in self.db.get_concepts(concept_ids)}
        for detail in details:
            concept = concepts.get(detail.concept_id)
            if concept is None or concept.account_id != account_id:
                raise ValidationError(concept_not_found(detail.concept_id))
            if detail.transaction_paid_id is not None:
                raise ValidationError("Payment lines must be registered as payments")

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, account_id: int, transaction_id: int) -> Transaction:
        """Get a tenant's transaction or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.account_id != account_id:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        account_id: int,
        transaction_type: Optional[TransactionType] = None,
        exclude_internal_obligations: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List a tenant's transactions, newest first."""
        return self.db.list_transactions(
            account_id=account_id,
            transaction_type=transaction_type,
            exclude_internal_obligations=exclude_internal_obligations,
            start_date=start_date,
            end_date=end_date,
        )

    def list_transactions_by_project(
        self,
        account_id: int,
        project_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        """List a project's active transactions inside an optional window."""
        return self.db.list_transactions(
            account_id=account_id,
            project_id=project_id,
            start_date=date_from,
            end_date=date_to,
            active_only=True,
        )

    def list_transaction_details(self, account_id: int, transaction_id: int) -> list[TransactionDetail]:
        """List the lines of one transaction."""
        self.require_transaction(account_id, transaction_id)
        return self.db.list_transaction_details([transaction_id])

    def list_payments_for_transaction(
        self, account_id: int, transaction_id: int
    ) -> list[tuple[TransactionDetail, Optional[Transaction]]]:
        """List payments applied to a transaction with their payment transactions."""
        self.require_transaction(account_id, transaction_id)
        payments = []
        for detail in self.db.list_payment_details(transaction_id):
            payments.append((detail, self.db.get_transaction(detail.transaction_id)))
        return payments

    def primary_concepts_by_transaction_ids(
        self, transaction_ids: Sequence[int]
    ) -> dict[int, Optional[str]]:
        """Map each transaction ID to the name of its first line's concept."""
        details = self.db.list_transaction_details(transaction_ids)
        concepts = {c.id: c for c in self.db.get_concepts([d.concept_id for d in details])}
        result: dict[int, Optional[str]] = {}
        for detail in details:
            if detail.transaction_id in result:
                continue
            concept = concepts.get(detail.concept_id)
            result[detail.transaction_id] = concept.name if concept else None
        return result

    def compound_group_ids(self, txn: Transaction) -> list[int]:
        """Return the IDs of both legs when ``txn`` belongs to a compound movement."""
        if txn.source_transaction_id is not None:
            return [txn.id, txn.source_transaction_id]
        if txn.is_internal_transfer:
            for candidate in self.db.list_transactions(
                account_id=txn.account_id, is_internal_transfer=True
            ):
                if candidate.source_transaction_id == txn.id:
                    return [candidate.id, txn.id]
        return [txn.id]

    def deactivate_transaction(self, account_id: int, transaction_id: int) -> list[int]:
        """Deactivate a transaction; compound movements are deactivated as a unit.

        Returns:
            IDs of all deactivated transactions
        """
        txn = self.require_transaction(account_id, transaction_id)
        ids = self.compound_group_ids(txn)
        with self.db.transaction():
            self.db.set_transactions_active(ids, False)
        logger.info("Deactivated transaction(s) %s", ids)
        return ids

    def find_invariant_violations(self, account_id: int) -> list[InvariantViolation]:
        """Return active transactions whose payments/balance disagree with their total."""
        violations = []
        for txn in self.db.list_transactions(account_id=account_id, active_only=True):
            reasons = balance_invariant_violations(txn.total, txn.payments, txn.balance)
            if txn.is_credit:
                applied = sum(
                    (d.total for d in self.db.list_payment_details(txn.id)), ZERO
                )
                if abs(applied) > abs(txn.total) and not amounts_equal(applied, txn.total):
                    reasons.append("applied payments exceed total")
            if reasons:
                logger.warning(
                    "Transaction %s violates balance invariant: %s", txn.id, "; ".join(reasons)
                )
                violations.append(
                    InvariantViolation(
                        transaction_id=txn.id,
                        total=txn.total,
                        payments=txn.payments,
                        balance=txn.balance,
                        reasons=tuple(reasons),
                    )
                )
        return violations
