"""Utility for resolving tenant account names to IDs."""

from bookkeep.domain.account import AccountService
from bookkeep.domain.errors import NotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve a tenant account name or ID to its ID.

    Numeric strings are treated as IDs; anything else is matched by name.

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int) or str(account).strip().isdigit():
        account_id = int(account)
        if account_service.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return account_id

    name = str(account).strip()
    for acc in account_service.list_accounts():
        if acc.name == name:
            return acc.id
    raise NotFoundError(f"Account '{name}' not found")
