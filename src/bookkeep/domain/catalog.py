"""Reference catalog domain service.

Payment forms, payment methods, currencies and persons are simple
tenant-scoped lookups; the ledger services only read them.
"""

from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    AccountPaymentForm,
    Currency,
    PaymentFormKind,
    PaymentMethod,
    Person,
)
from bookkeep.domain.errors import NotFoundError, ValidationError, payment_form_not_found


class CatalogService:
    """Service for tenant reference data."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    # Account payment forms
    def create_payment_form(
        self,
        account_id: int,
        name: str,
        kind: str,
        provider: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> int:
        """Create an account payment form.

        Raises:
            ValidationError: If the name is blank or the kind is unknown
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Payment form name is required")
        if kind not in PaymentFormKind.ALL:
            raise ValidationError(
                f"Unknown payment form kind '{kind}'. Expected one of: {', '.join(PaymentFormKind.ALL)}"
            )
        return self.db.create_payment_form(
            account_id=account_id, name=name, kind=kind, provider=provider, reference=reference
        )

    def require_payment_form(self, account_id: int, form_id: int) -> AccountPaymentForm:
        """Get a tenant's active payment form or raise NotFoundError."""
        form = self.db.get_payment_form(form_id)
        if form is None or form.account_id != account_id or not form.is_active:
            raise NotFoundError(payment_form_not_found(form_id))
        return form

    def list_payment_forms(self, account_id: int, kind: Optional[str] = None) -> list[AccountPaymentForm]:
        """List a tenant's active payment forms."""
        return self.db.list_payment_forms(account_id, kind=kind)

    def deactivate_payment_form(self, account_id: int, form_id: int) -> None:
        """Deactivate a payment form."""
        self.require_payment_form(account_id, form_id)
        self.db.deactivate_payment_form(form_id)

    # Payment methods
    def create_payment_method(self, account_id: int, name: str, code: Optional[str] = None) -> int:
        """Create a payment method."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Payment method name is required")
        return self.db.create_payment_method(account_id=account_id, name=name, code=code)

    def list_payment_methods(self, account_id: int) -> list[PaymentMethod]:
        """List a tenant's payment methods."""
        return self.db.list_payment_methods(account_id)

    def find_payment_method_by_code(self, account_id: int, code: str) -> Optional[PaymentMethod]:
        """Return the payment method with ``code`` (e.g. 'bank_transfer')."""
        for method in self.db.list_payment_methods(account_id):
            if method.code == code:
                return method
        return None

    # Currencies
    def create_currency(self, account_id: int, code: str, name: str, is_local: bool = False) -> int:
        """Create a currency."""
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError("Currency code is required")
        return self.db.create_currency(account_id=account_id, code=code, name=name, is_local=is_local)

    def list_currencies(self, account_id: int) -> list[Currency]:
        """List a tenant's currencies."""
        return self.db.list_currencies(account_id)

    def get_local_currency(self, account_id: int) -> Optional[Currency]:
        """Return the tenant's local currency, if one is flagged."""
        for currency in self.db.list_currencies(account_id):
            if currency.is_local:
                return currency
        return None

    # Persons
    def create_person(
        self, account_id: int, name: str, is_client: bool = False, is_provider: bool = False
    ) -> int:
        """Create a client or provider."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Person name is required")
        return self.db.create_person(
            account_id=account_id, name=name, is_client=is_client, is_provider=is_provider
        )

    def list_persons(self, account_id: int) -> list[Person]:
        """List a tenant's clients and providers."""
        return self.db.list_persons(account_id)
