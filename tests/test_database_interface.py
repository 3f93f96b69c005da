"""Tests for the Database interface and its units of work."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from bookkeep.domain import entities
from bookkeep.domain.errors import NotFoundError, PersistenceError


def _draft(account_id, total="100", **overrides):
    values = dict(
        account_id=account_id,
        type=entities.TransactionType.SALE,
        date=date(2024, 1, 15),
        total=Decimal(total),
        payments=Decimal("0"),
        balance=Decimal(total),
        is_account_receivable=True,
    )
    values.update(overrides)
    return entities.TransactionDraft(**values)


class TestDatabaseInterface:
    """Tests to verify the Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        """Test that get_account returns a domain Account entity."""
        account_id = temp_db.create_account(name="Corner Bakery")

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.id == account_id
        assert account.name == "Corner Bakery"
        assert isinstance(account.created_at, datetime)

    def test_get_missing_rows_return_none(self, temp_db):
        """Test that lookups of unknown IDs return None."""
        assert temp_db.get_account(404) is None
        assert temp_db.get_transaction(404) is None
        assert temp_db.get_transaction_for_update(404) is None
        assert temp_db.get_concepts([]) == []

    def test_transaction_round_trip(self, temp_db):
        """Test that drafts come back as Transaction entities with Decimal money."""
        account_id = temp_db.create_account(name="Corner Bakery")
        txn_id = temp_db.create_transaction(_draft(account_id, "99.95", name="Invoice 7"))

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.type == entities.TransactionType.SALE
        assert txn.total == Decimal("99.95")
        assert isinstance(txn.balance, Decimal)
        assert txn.is_credit
        assert txn.is_active
        assert txn.name == "Invoice 7"

    def test_details_are_written_as_one_batch(self, temp_db):
        """Test that detail rows are linked to their transaction."""
        account_id = temp_db.create_account(name="Corner Bakery")
        concept_id = temp_db.create_concept(account_id=account_id, name="Bread", is_income=True)
        txn_id = temp_db.create_transaction(_draft(account_id))

        ids = temp_db.create_transaction_details(
            [
                (txn_id, entities.DetailDraft(concept_id=concept_id, total=Decimal("60"))),
                (txn_id, entities.DetailDraft(concept_id=concept_id, total=Decimal("40"))),
            ]
        )

        details = temp_db.list_transaction_details([txn_id])
        assert [d.id for d in details] == ids
        assert all(isinstance(d, entities.TransactionDetail) for d in details)
        assert sum(d.total for d in details) == Decimal("100")

    def test_update_of_missing_transaction_raises(self, temp_db):
        """Test that updating an unknown row raises NotFoundError."""
        with pytest.raises(NotFoundError):
            temp_db.update_transaction_payments(404, payments=Decimal("1"), balance=Decimal("0"))


class TestUnitOfWork:
    """Tests for nested transaction() blocks."""

    def test_outer_block_commits_nested_writes(self, temp_db):
        """Writes inside nested blocks persist once the outer block exits."""
        with temp_db.transaction():
            account_id = temp_db.create_account(name="Corner Bakery")
            with temp_db.transaction():
                txn_id = temp_db.create_transaction(_draft(account_id))

        temp_db.disconnect()
        assert temp_db.get_transaction(txn_id) is not None

    def test_store_error_rolls_back_everything(self, temp_db):
        """A SQLAlchemy error becomes PersistenceError and discards the whole block."""
        account_id = temp_db.create_account(name="Corner Bakery")

        with pytest.raises(PersistenceError):
            with temp_db.transaction():
                temp_db.create_transaction(_draft(account_id))
                raise SQLAlchemyError("boom")

        assert temp_db.list_transactions(account_id) == []

    def test_domain_error_is_reraised_unchanged(self, temp_db):
        """Non-store errors roll back and propagate as they are."""
        account_id = temp_db.create_account(name="Corner Bakery")

        with pytest.raises(NotFoundError):
            with temp_db.transaction():
                temp_db.create_transaction(_draft(account_id))
                temp_db.update_transaction_payments(404, payments=Decimal("1"), balance=Decimal("0"))

        assert temp_db.list_transactions(account_id) == []

    def test_locked_read_sees_current_balance(self, temp_db):
        """Reads for update return the persisted balance, not a cached one."""
        account_id = temp_db.create_account(name="Corner Bakery")
        txn_id = temp_db.create_transaction(_draft(account_id))
        stale = temp_db.get_transaction(txn_id)

        temp_db.update_transaction_payments(txn_id, payments=Decimal("30"), balance=Decimal("70"))

        with temp_db.transaction():
            fresh = temp_db.get_transaction_for_update(txn_id)
        assert stale.balance == Decimal("100")
        assert fresh.balance == Decimal("70")
        assert fresh.payments == Decimal("30")
