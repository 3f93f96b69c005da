"""Tests for internal obligations."""

from datetime import date
from decimal import Decimal

import pytest

from bookkeep.domain.entities import TransactionType
from bookkeep.domain.errors import NotFoundError, ValidationError


def test_create_internal_obligation(obligation_service, ledger):
    """Obligations are payable purchases with no counterparty."""
    obligation = obligation_service.create_internal_obligation(
        ledger.account_id, "1200", date(2024, 8, 1), reference_number="TAX-Q3"
    )

    assert obligation.type == TransactionType.PURCHASE
    assert obligation.is_internal_obligation
    assert obligation.is_account_payable
    assert obligation.person_id is None
    assert obligation.name == "Internal obligation"
    assert obligation.total == Decimal("1200")
    assert obligation.balance == Decimal("1200")
    assert obligation.payments == Decimal("0")


def test_zero_obligation_is_rejected(obligation_service, ledger):
    """Obligations need a positive total."""
    with pytest.raises(ValidationError):
        obligation_service.create_internal_obligation(ledger.account_id, 0, date(2024, 8, 1))


def test_update_recomputes_balance_from_payments(obligation_service, payment_service, ledger):
    """Editing the total keeps payments and re-derives the balance."""
    obligation = obligation_service.create_internal_obligation(
        ledger.account_id, 1000, date(2024, 8, 1), name="Payroll tax"
    )
    payment_service.register_payment(ledger.account_id, obligation.id, 400, date(2024, 8, 5))

    updated = obligation_service.update_internal_obligation(
        ledger.account_id, obligation.id, 900, date(2024, 8, 2), name="Payroll tax (revised)"
    )

    assert updated.total == Decimal("900")
    assert updated.payments == Decimal("400")
    assert updated.balance == Decimal("500")
    assert updated.name == "Payroll tax (revised)"
    assert updated.date == date(2024, 8, 2)


def test_update_below_payments_keeps_stored_total(
    obligation_service, payment_service, transaction_service, ledger
):
    """The total can never drop under what was already paid."""
    obligation = obligation_service.create_internal_obligation(
        ledger.account_id, 1000, date(2024, 8, 1)
    )
    payment_service.register_payment(ledger.account_id, obligation.id, 400, date(2024, 8, 5))

    with pytest.raises(ValidationError, match="lower than payments"):
        obligation_service.update_internal_obligation(
            ledger.account_id, obligation.id, 300, date(2024, 8, 1)
        )

    stored = transaction_service.get_transaction(obligation.id)
    assert stored.total == Decimal("1000")
    assert stored.balance == Decimal("600")


def test_update_rejects_regular_transactions(obligation_service, transaction_service, ledger):
    """Only internal obligations can be edited this way."""
    txn = transaction_service.create_simple_transaction(
        ledger.account_id, TransactionType.EXPENSE, ledger.rent, 100, date(2024, 8, 1)
    )
    with pytest.raises(NotFoundError):
        obligation_service.update_internal_obligation(
            ledger.account_id, txn.id, 50, date(2024, 8, 1)
        )


def test_list_internal_obligations(obligation_service, transaction_service, ledger):
    """Listing returns active obligations only."""
    first = obligation_service.create_internal_obligation(ledger.account_id, 100, date(2024, 8, 1))
    second = obligation_service.create_internal_obligation(ledger.account_id, 200, date(2024, 9, 1))
    transaction_service.deactivate_transaction(ledger.account_id, first.id)

    assert [o.id for o in obligation_service.list_internal_obligations(ledger.account_id)] == [second.id]


def test_obligations_for_report_window(obligation_service, ledger):
    """The report listing honours the date window."""
    obligation_service.create_internal_obligation(ledger.account_id, 100, date(2024, 7, 15))
    august = obligation_service.create_internal_obligation(ledger.account_id, 200, date(2024, 8, 15))

    found = obligation_service.list_internal_obligations_for_report(
        ledger.account_id, date_from=date(2024, 8, 1), date_to=date(2024, 8, 31)
    )
    assert [o.id for o in found] == [august.id]
