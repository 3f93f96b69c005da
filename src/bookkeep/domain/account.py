"""Tenant account service.

Every ledger row carries the ``account_id`` of the tenant that owns it;
services check that id on each read so one tenant never sees another's rows.
"""

from typing import Optional
from bookkeep.database.base import Database
from bookkeep.domain.entities import Account as AccountEntity
from bookkeep.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found


class AccountService:
    """Service for tenant accounts."""

    def __init__(self, db: Database):
        self.db = db

    def create_account(self, name: str) -> int:
        """Create a tenant account.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If another tenant already uses the name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        if any(acc.name == name for acc in self.db.list_accounts()):
            raise ConflictError(f"Account with name '{name}' already exists")
        return self.db.create_account(name=name)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get a tenant account or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List tenant accounts by name."""
        return self.db.list_accounts()
