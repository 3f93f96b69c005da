"""Tests for payment registration against open balances."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from bookkeep.domain.entities import DetailDraft, LineInput, TransactionDraft, TransactionType
from bookkeep.domain.errors import (
    InvalidAmountError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


@pytest.fixture
def credit_sale(transaction_service, ledger):
    """A credit sale of 100 to the ledger's client."""
    return transaction_service.create_sale(
        ledger.account_id,
        [LineInput(ledger.catering, Decimal("1"), Decimal("100"))],
        txn_date=date(2024, 6, 1),
        is_credit=True,
        person_id=ledger.client,
    )


def test_partial_payment_reduces_balance(payment_service, transaction_service, ledger, credit_sale):
    """Paying 60 of 100 leaves 40 outstanding."""
    payment = payment_service.register_payment(
        ledger.account_id, credit_sale.id, "60", date(2024, 6, 10), payment_method_id=ledger.cash
    )

    assert payment.type == TransactionType.INCOMING_PAYMENT
    assert payment.is_incoming_payment
    assert payment.total == Decimal("60")
    assert payment.balance == Decimal("0")
    assert payment.person_id == ledger.client

    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.payments == Decimal("60")
    assert paid.balance == Decimal("40")

    applied = transaction_service.list_payments_for_transaction(ledger.account_id, credit_sale.id)
    assert len(applied) == 1
    detail, payment_txn = applied[0]
    assert detail.transaction_paid_id == credit_sale.id
    assert detail.concept_id == ledger.incoming_concept
    assert payment_txn.id == payment.id


def test_overpayment_is_rejected_and_leaves_row_unchanged(
    payment_service, transaction_service, temp_db, ledger, credit_sale
):
    """A payment above the remaining balance writes nothing."""
    payment_service.register_payment(ledger.account_id, credit_sale.id, 60, date(2024, 6, 10))

    with pytest.raises(InvalidAmountError):
        payment_service.register_payment(ledger.account_id, credit_sale.id, 41, date(2024, 6, 11))

    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.payments == Decimal("60")
    assert paid.balance == Decimal("40")
    payments = temp_db.list_transactions(
        ledger.account_id, transaction_type=TransactionType.INCOMING_PAYMENT
    )
    assert len(payments) == 1


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_payment_is_rejected(payment_service, ledger, credit_sale, amount):
    """Zero and negative payments are invalid amounts."""
    with pytest.raises(InvalidAmountError):
        payment_service.register_payment(ledger.account_id, credit_sale.id, amount, date(2024, 6, 10))


def test_paying_exact_balance_settles_transaction(payment_service, transaction_service, ledger, credit_sale):
    """Two payments that add up to the total leave a zero balance."""
    payment_service.register_payment(ledger.account_id, credit_sale.id, 60, date(2024, 6, 10))
    payment_service.register_payment(ledger.account_id, credit_sale.id, 40, date(2024, 6, 20))

    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.balance == Decimal("0")
    assert paid.payments == Decimal("100")
    assert transaction_service.find_invariant_violations(ledger.account_id) == []


def test_settled_transaction_accepts_no_payment(payment_service, transaction_service, ledger):
    """Cash transactions have nothing left to pay."""
    txn = transaction_service.create_simple_transaction(
        ledger.account_id, TransactionType.INCOME, ledger.catering, 80, date(2024, 6, 1)
    )
    with pytest.raises(InvalidAmountError):
        payment_service.register_payment(ledger.account_id, txn.id, 10, date(2024, 6, 2))


def test_payable_produces_outgoing_payment(payment_service, transaction_service, ledger):
    """Payables are settled with outgoing payments and the outgoing concept."""
    purchase = transaction_service.create_simple_transaction(
        ledger.account_id, TransactionType.PURCHASE, ledger.flour, 90, date(2024, 6, 1),
        is_credit=True, person_id=ledger.provider,
    )
    payment = payment_service.register_payment(
        ledger.account_id, purchase.id, 30, date(2024, 6, 3), account_payment_form_id=ledger.bank
    )

    assert payment.type == TransactionType.OUTGOING_PAYMENT
    assert payment.is_outcoming_payment
    detail, _ = transaction_service.list_payments_for_transaction(ledger.account_id, purchase.id)[0]
    assert detail.concept_id == ledger.outgoing_concept
    assert transaction_service.get_transaction(purchase.id).balance == Decimal("60")


def test_failed_balance_update_rolls_back_payment(
    payment_service, transaction_service, temp_db, ledger, credit_sale, monkeypatch
):
    """If the paid row cannot be updated, the payment and its detail are discarded."""

    def fail(transaction_id, payments, balance):
        raise SQLAlchemyError("lock timeout")

    monkeypatch.setattr(temp_db, "update_transaction_payments", fail)
    with pytest.raises(PersistenceError):
        payment_service.register_payment(ledger.account_id, credit_sale.id, 60, date(2024, 6, 10))
    monkeypatch.undo()

    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.balance == Decimal("100")
    assert paid.payments == Decimal("0")
    assert temp_db.list_payment_details(credit_sale.id) == []
    assert temp_db.list_transactions(
        ledger.account_id, transaction_type=TransactionType.INCOMING_PAYMENT
    ) == []


def test_payment_against_other_tenant_is_not_found(payment_service, ledger, other_tenant, credit_sale):
    """A tenant cannot pay another tenant's transaction."""
    with pytest.raises(NotFoundError):
        payment_service.register_payment(other_tenant.account_id, credit_sale.id, 10, date(2024, 6, 10))


def test_payment_against_inactive_transaction_is_not_found(
    payment_service, transaction_service, ledger, credit_sale
):
    """Deactivated transactions cannot be paid."""
    transaction_service.deactivate_transaction(ledger.account_id, credit_sale.id)
    with pytest.raises(NotFoundError):
        payment_service.register_payment(ledger.account_id, credit_sale.id, 10, date(2024, 6, 10))


def test_missing_system_concept_is_reported(
    payment_service, transaction_service, account_service, concept_service, catalog_service
):
    """Tenants without system payment concepts cannot register payments."""
    account_id = account_service.create_account("Fresh Start")
    flour = concept_service.create_concept(account_id, "Flour", is_expense=True)
    provider = catalog_service.create_person(account_id, "Mill", is_provider=True)
    purchase = transaction_service.create_simple_transaction(
        account_id, TransactionType.PURCHASE, flour, 50, date(2024, 6, 1),
        is_credit=True, person_id=provider,
    )

    with pytest.raises(ValidationError, match="payment concept"):
        payment_service.register_payment(account_id, purchase.id, 10, date(2024, 6, 2))


def test_non_payment_draft_is_rejected(payment_service, ledger, credit_sale):
    """Only incoming and outgoing payment drafts can be registered."""
    draft = TransactionDraft(
        account_id=ledger.account_id,
        type=TransactionType.INCOME,
        date=date(2024, 6, 10),
        total=Decimal("10"),
        payments=Decimal("10"),
        balance=Decimal("0"),
    )
    detail = DetailDraft(concept_id=ledger.catering, total=Decimal("10"))
    with pytest.raises(ValidationError, match="incoming or outgoing"):
        payment_service.register_payment_for_transaction(credit_sale.id, draft, detail)


def _incoming_payment_draft(ledger, amount):
    return TransactionDraft(
        account_id=ledger.account_id,
        type=TransactionType.INCOMING_PAYMENT,
        date=date(2024, 6, 10),
        total=Decimal(amount),
        payments=Decimal(amount),
        balance=Decimal("0"),
        person_id=ledger.client,
    )


def test_detail_total_must_match_payment_amount(
    payment_service, transaction_service, temp_db, ledger, credit_sale
):
    """A payment line larger than the payment itself is rejected before any write."""
    detail = DetailDraft(concept_id=ledger.incoming_concept, total=Decimal("1000"), price=Decimal("1000"))

    with pytest.raises(InvalidAmountError, match="does not match"):
        payment_service.register_payment_for_transaction(
            credit_sale.id, _incoming_payment_draft(ledger, "10"), detail
        )

    assert temp_db.list_payment_details(credit_sale.id) == []
    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.payments == Decimal("0")
    assert paid.balance == Decimal("100")


def test_payment_detail_is_stored_at_payment_amount(
    payment_service, transaction_service, temp_db, ledger, credit_sale
):
    """Caller line amounts are replaced by one unit priced at the payment amount."""
    detail = DetailDraft(
        concept_id=ledger.catering,
        total=Decimal("10"),
        quantity=Decimal("4"),
        price=Decimal("250"),
        net=Decimal("1000"),
    )
    payment = payment_service.register_payment_for_transaction(
        credit_sale.id, _incoming_payment_draft(ledger, "10"), detail
    )

    (stored,) = temp_db.list_payment_details(credit_sale.id)
    assert stored.transaction_id == payment.id
    assert stored.concept_id == ledger.incoming_concept
    assert stored.quantity == Decimal("1")
    assert stored.price == Decimal("10")
    assert stored.net == Decimal("10")
    assert stored.total == Decimal("10")
    assert sum(d.total for d in temp_db.list_payment_details(credit_sale.id)) <= credit_sale.total
    assert transaction_service.find_invariant_violations(ledger.account_id) == []


def test_failed_detail_insert_rolls_back_payment(
    payment_service, transaction_service, temp_db, ledger, credit_sale, monkeypatch
):
    """If the payment line cannot be written, no payment survives and the paid row is untouched."""

    def fail(rows):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(temp_db, "create_transaction_details", fail)
    with pytest.raises(PersistenceError):
        payment_service.register_payment(ledger.account_id, credit_sale.id, 60, date(2024, 6, 10))
    monkeypatch.undo()

    paid = transaction_service.get_transaction(credit_sale.id)
    assert paid.balance == Decimal("100")
    assert paid.payments == Decimal("0")
    assert temp_db.list_payment_details(credit_sale.id) == []
    assert temp_db.list_transactions(
        ledger.account_id, transaction_type=TransactionType.INCOMING_PAYMENT
    ) == []
