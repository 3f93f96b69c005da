"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bookkeep.domain.entities import (
    Account,
    AccountPaymentForm,
    Budget,
    BudgetLine,
    Concept,
    Currency,
    DetailDraft,
    PaymentMethod,
    Person,
    Project,
    Transaction,
    TransactionDetail,
    TransactionDraft,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for bookkeep.

    Every mutating method joins the unit of work opened by ``transaction()``
    when one is active, and otherwise commits on its own.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Open a unit of work.

        All writes inside the block are committed together on exit, or rolled
        back together if the block raises. Store failures surface as
        ``PersistenceError``. Nested blocks join the outermost one.
        """
        pass

    # Account (tenant) operations
    @abstractmethod
    def create_account(self, name: str) -> int:
        """Create a tenant account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get tenant account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all tenant accounts."""
        pass

    # Concept operations
    @abstractmethod
    def create_concept(
        self,
        account_id: int,
        name: str,
        parent_concept_id: Optional[int] = None,
        is_group: bool = False,
        is_income: bool = False,
        is_expense: bool = False,
        is_product: bool = False,
        is_account_payable_concept: bool = False,
        is_incoming_payment_concept: bool = False,
        is_outgoing_payment_concept: bool = False,
        is_system: bool = False,
        tax_percentage: Decimal = Decimal("0"),
        price: Decimal = Decimal("0"),
        additional_charges: Decimal = Decimal("0"),
    ) -> int:
        """Create a concept. Returns concept ID."""
        pass

    @abstractmethod
    def get_concept(self, concept_id: int) -> Optional[Concept]:
        """Get concept by ID."""
        pass

    @abstractmethod
    def get_concepts(self, concept_ids: Sequence[int]) -> list[Concept]:
        """Get the concepts with the given IDs (missing IDs are skipped)."""
        pass

    @abstractmethod
    def list_concepts(self, account_id: int) -> list[Concept]:
        """List a tenant's concepts."""
        pass

    # Account payment form operations
    @abstractmethod
    def create_payment_form(
        self,
        account_id: int,
        name: str,
        kind: str,
        provider: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> int:
        """Create an account payment form. Returns form ID."""
        pass

    @abstractmethod
    def get_payment_form(self, form_id: int) -> Optional[AccountPaymentForm]:
        """Get account payment form by ID."""
        pass

    @abstractmethod
    def list_payment_forms(self, account_id: int, kind: Optional[str] = None) -> list[AccountPaymentForm]:
        """List a tenant's active payment forms, optionally filtered by kind."""
        pass

    @abstractmethod
    def deactivate_payment_form(self, form_id: int) -> None:
        """Deactivate an account payment form."""
        pass

    # Payment method / currency / person operations
    @abstractmethod
    def create_payment_method(self, account_id: int, name: str, code: Optional[str] = None) -> int:
        """Create a payment method. Returns payment method ID."""
        pass

    @abstractmethod
    def list_payment_methods(self, account_id: int) -> list[PaymentMethod]:
        """List a tenant's active payment methods."""
        pass

    @abstractmethod
    def create_currency(self, account_id: int, code: str, name: str, is_local: bool = False) -> int:
        """Create a currency. Returns currency ID."""
        pass

    @abstractmethod
    def list_currencies(self, account_id: int) -> list[Currency]:
        """List a tenant's currencies."""
        pass

    @abstractmethod
    def create_person(
        self, account_id: int, name: str, is_client: bool = False, is_provider: bool = False
    ) -> int:
        """Create a client/provider. Returns person ID."""
        pass

    @abstractmethod
    def get_person(self, person_id: int) -> Optional[Person]:
        """Get person by ID."""
        pass

    @abstractmethod
    def list_persons(self, account_id: int) -> list[Person]:
        """List a tenant's active persons."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        account_id: int,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, account_id: int, active_only: bool = True) -> list[Project]:
        """List a tenant's projects."""
        pass

    @abstractmethod
    def deactivate_project(self, project_id: int) -> None:
        """Deactivate a project."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(
        self,
        account_id: int,
        name: str,
        period_type: Optional[str] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        project_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> int:
        """Create a budget header. Returns budget ID."""
        pass

    @abstractmethod
    def update_budget(
        self,
        budget_id: int,
        name: str,
        period_type: Optional[str],
        period_start: Optional[date],
        period_end: Optional[date],
        project_id: Optional[int],
    ) -> None:
        """Replace a budget header's fields."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(
        self, account_id: int, active_only: bool = True, project_id: Optional[int] = None
    ) -> list[Budget]:
        """List a tenant's budgets, optionally scoped to a project."""
        pass

    @abstractmethod
    def deactivate_budget(self, budget_id: int) -> None:
        """Deactivate a budget."""
        pass

    @abstractmethod
    def add_budget_lines(
        self,
        budget_id: int,
        lines: Sequence[tuple[int, Decimal]],
        created_by_id: Optional[str] = None,
    ) -> list[int]:
        """Insert ``(concept_id, amount)`` lines for a budget. Returns line IDs."""
        pass

    @abstractmethod
    def delete_budget_lines(self, budget_id: int) -> None:
        """Delete all lines of a budget."""
        pass

    @abstractmethod
    def list_budget_lines(self, budget_ids: Sequence[int]) -> list[BudgetLine]:
        """List the lines of the given budgets, ordered by ID."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, draft: TransactionDraft) -> int:
        """Insert a transaction row. Returns transaction ID."""
        pass

    @abstractmethod
    def create_transaction_details(
        self, rows: Sequence[tuple[int, DetailDraft]]
    ) -> list[int]:
        """Insert ``(transaction_id, detail)`` rows as one batch. Returns detail IDs."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def get_transaction_for_update(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, locking its row for the current unit of work."""
        pass

    @abstractmethod
    def update_transaction_payments(
        self, transaction_id: int, payments: Decimal, balance: Decimal
    ) -> None:
        """Persist new cumulative payments and balance."""
        pass

    @abstractmethod
    def update_transaction_header(
        self,
        transaction_id: int,
        date: date,
        name: Optional[str],
        reference_number: Optional[str],
        currency_id: Optional[int],
        account_payment_form_id: Optional[int],
        net: Decimal,
        total: Decimal,
        balance: Decimal,
    ) -> None:
        """Replace the editable header and money fields of a transaction."""
        pass

    @abstractmethod
    def set_transactions_active(self, transaction_ids: Sequence[int], is_active: bool) -> None:
        """Set ``is_active`` on all given transactions in one statement."""
        pass

    @abstractmethod
    def mark_transaction_reconciled(self, transaction_id: int, reconciled_at: datetime) -> None:
        """Flag a transaction reconciled at ``reconciled_at``."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: int,
        transaction_type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        active_only: bool = False,
        exclude_internal_obligations: bool = False,
        is_internal_obligation: Optional[bool] = None,
        is_deposit: Optional[bool] = None,
        is_internal_transfer: Optional[bool] = None,
        is_incoming_payment: Optional[bool] = None,
        account_payment_form_id: Optional[int] = None,
        project_id: Optional[int] = None,
        currency_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List a tenant's transactions with optional filters.

        Results are ordered newest first (date, then ID, descending).
        """
        pass

    @abstractmethod
    def list_transaction_details(self, transaction_ids: Sequence[int]) -> list[TransactionDetail]:
        """List the details of the given transactions, ordered by ID."""
        pass

    @abstractmethod
    def list_payment_details(self, transaction_paid_id: int) -> list[TransactionDetail]:
        """List payment details applied to ``transaction_paid_id``, newest first."""
        pass

    @abstractmethod
    def list_execution_details(
        self,
        account_id: int,
        concept_ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        project_id: Optional[int] = None,
    ) -> list[tuple[TransactionDetail, Transaction]]:
        """List details of the tenant's active transactions with their parent.

        Filters apply to the parent transaction's date and project.
        """
        pass
