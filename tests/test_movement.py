"""Tests for bank deposits and bank transfers."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from bookkeep.domain.entities import TransactionType
from bookkeep.domain.errors import NotFoundError, PersistenceError, ValidationError


def test_bank_deposit_creates_two_linked_legs(movement_service, temp_db, ledger):
    """A deposit is an outgoing cashbox leg and an incoming bank leg."""
    outgoing, incoming = movement_service.create_bank_deposit(
        ledger.account_id, "500", date(2024, 7, 1), ledger.cashbox, ledger.bank,
        reference_number="DEP-1",
    )

    assert outgoing.type == TransactionType.OUTGOING_PAYMENT
    assert outgoing.account_payment_form_id == ledger.cashbox
    assert outgoing.payment_method_id == ledger.cash
    assert outgoing.name == "Bank deposit (out)"
    assert incoming.type == TransactionType.INCOMING_PAYMENT
    assert incoming.account_payment_form_id == ledger.bank
    assert incoming.payment_method_id == ledger.transfer
    assert incoming.name == "Bank deposit (in)"
    assert incoming.source_transaction_id == outgoing.id

    for leg in (outgoing, incoming):
        assert leg.total == Decimal("500")
        assert leg.payments == Decimal("500")
        assert leg.balance == Decimal("0")
        assert leg.is_internal_transfer
        assert leg.is_deposit
        assert leg.reference_number == "DEP-1"

    details = temp_db.list_transaction_details([outgoing.id, incoming.id])
    assert {(d.transaction_id, d.concept_id) for d in details} == {
        (outgoing.id, ledger.outgoing_concept),
        (incoming.id, ledger.incoming_concept),
    }


def test_deposit_uses_description_as_leg_name(movement_service, ledger):
    """A description replaces the default leg name."""
    outgoing, incoming = movement_service.create_bank_deposit(
        ledger.account_id, 20, date(2024, 7, 1), ledger.cashbox, ledger.bank,
        description="Friday takings",
    )
    assert outgoing.name == "Friday takings (out)"
    assert incoming.name == "Friday takings (in)"


def test_deposit_requires_cashbox_to_bank(movement_service, ledger):
    """Deposits go from a cashbox into a bank account."""
    with pytest.raises(ValidationError, match="cashbox"):
        movement_service.create_bank_deposit(
            ledger.account_id, 100, date(2024, 7, 1), ledger.bank, ledger.savings
        )
    with pytest.raises(ValidationError, match="bank account"):
        movement_service.create_bank_deposit(
            ledger.account_id, 100, date(2024, 7, 1), ledger.cashbox, ledger.cashbox
        )


def test_zero_amount_is_rejected(movement_service, temp_db, ledger):
    """Movements need a positive amount."""
    with pytest.raises(ValidationError, match="greater than zero"):
        movement_service.create_bank_deposit(
            ledger.account_id, 0, date(2024, 7, 1), ledger.cashbox, ledger.bank
        )
    assert temp_db.list_transactions(ledger.account_id) == []


def test_unknown_payment_form_is_not_found(movement_service, ledger):
    """Payment forms must exist for the tenant."""
    with pytest.raises(NotFoundError):
        movement_service.create_bank_deposit(
            ledger.account_id, 100, date(2024, 7, 1), ledger.cashbox, 9999
        )


def test_failed_second_leg_leaves_nothing(movement_service, temp_db, ledger, monkeypatch):
    """If the incoming leg cannot be written, the outgoing leg is rolled back."""
    original = temp_db.create_transaction
    calls = []

    def fail_on_second(draft):
        calls.append(draft)
        if len(calls) == 2:
            raise SQLAlchemyError("connection lost")
        return original(draft)

    monkeypatch.setattr(temp_db, "create_transaction", fail_on_second)
    with pytest.raises(PersistenceError):
        movement_service.create_bank_deposit(
            ledger.account_id, 500, date(2024, 7, 1), ledger.cashbox, ledger.bank
        )
    monkeypatch.undo()

    assert temp_db.list_transactions(ledger.account_id) == []
    assert movement_service.list_bank_deposits(ledger.account_id) == []


def test_failed_detail_insert_leaves_no_legs(movement_service, temp_db, ledger, monkeypatch):
    """If the leg details cannot be written, both legs are rolled back."""

    def fail(rows):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(temp_db, "create_transaction_details", fail)
    with pytest.raises(PersistenceError):
        movement_service.create_bank_deposit(
            ledger.account_id, 500, date(2024, 7, 1), ledger.cashbox, ledger.bank
        )
    monkeypatch.undo()

    assert temp_db.list_transactions(ledger.account_id, active_only=False) == []
    assert movement_service.list_bank_deposits(ledger.account_id) == []


def test_bank_transfer_between_bank_accounts(movement_service, ledger):
    """Transfers link two bank legs and are not deposits."""
    outgoing, incoming = movement_service.create_bank_transfer(
        ledger.account_id, 250, date(2024, 7, 2), ledger.bank, ledger.savings
    )

    assert incoming.source_transaction_id == outgoing.id
    assert not outgoing.is_deposit and not incoming.is_deposit
    assert outgoing.payment_method_id == ledger.transfer
    assert incoming.payment_method_id == ledger.transfer
    assert outgoing.name == "Bank transfer (out)"
    assert [t.id for t in movement_service.list_bank_transfers(ledger.account_id)] == [incoming.id]
    assert movement_service.list_bank_deposits(ledger.account_id) == []


def test_transfer_to_same_account_is_rejected(movement_service, temp_db, ledger):
    """Source and destination must differ."""
    with pytest.raises(ValidationError, match="must be different"):
        movement_service.create_bank_transfer(
            ledger.account_id, 250, date(2024, 7, 2), ledger.bank, ledger.bank
        )
    assert temp_db.list_transactions(ledger.account_id) == []


def test_transfer_requires_bank_accounts(movement_service, ledger):
    """Cashboxes cannot take part in bank transfers."""
    with pytest.raises(ValidationError, match="bank accounts"):
        movement_service.create_bank_transfer(
            ledger.account_id, 250, date(2024, 7, 2), ledger.cashbox, ledger.bank
        )


def test_deactivate_group_deactivates_both_legs(movement_service, transaction_service, ledger):
    """Deactivating by the incoming leg takes the outgoing leg along."""
    outgoing, incoming = movement_service.create_bank_deposit(
        ledger.account_id, 500, date(2024, 7, 1), ledger.cashbox, ledger.bank
    )

    ids = movement_service.deactivate_bank_deposit_group(ledger.account_id, incoming.id)

    assert set(ids) == {outgoing.id, incoming.id}
    assert not transaction_service.get_transaction(outgoing.id).is_active
    assert not transaction_service.get_transaction(incoming.id).is_active
    assert movement_service.list_bank_deposits(ledger.account_id) == []


def test_deactivate_group_rejects_outgoing_leg(movement_service, ledger):
    """Only the incoming leg identifies a group."""
    outgoing, _ = movement_service.create_bank_deposit(
        ledger.account_id, 500, date(2024, 7, 1), ledger.cashbox, ledger.bank
    )
    with pytest.raises(ValidationError, match="incoming leg"):
        movement_service.deactivate_bank_deposit_group(ledger.account_id, outgoing.id)


def test_deactivating_one_leg_deactivates_group(movement_service, transaction_service, ledger):
    """Generic deactivation of either leg keeps the pair together."""
    outgoing, incoming = movement_service.create_bank_deposit(
        ledger.account_id, 500, date(2024, 7, 1), ledger.cashbox, ledger.bank
    )
    ids = transaction_service.deactivate_transaction(ledger.account_id, outgoing.id)
    assert set(ids) == {outgoing.id, incoming.id}
    assert not transaction_service.get_transaction(incoming.id).is_active


def test_list_bank_deposits_newest_first(movement_service, ledger):
    """Deposits are listed by their incoming legs."""
    _, first = movement_service.create_bank_deposit(
        ledger.account_id, 100, date(2024, 7, 1), ledger.cashbox, ledger.bank
    )
    _, second = movement_service.create_bank_deposit(
        ledger.account_id, 200, date(2024, 7, 2), ledger.cashbox, ledger.bank
    )
    listed = movement_service.list_bank_deposits(ledger.account_id)
    assert [t.id for t in listed] == [second.id, first.id]
