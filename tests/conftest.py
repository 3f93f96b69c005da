"""Shared pytest fixtures for bookkeep tests."""

import os
import tempfile
from types import SimpleNamespace

import pytest

from bookkeep.database.factories import create_sqlite_database
from bookkeep.domain.account import AccountService
from bookkeep.domain.budget import BudgetService
from bookkeep.domain.catalog import CatalogService
from bookkeep.domain.concept import ConceptService
from bookkeep.domain.entities import PaymentFormKind
from bookkeep.domain.movement import MovementService
from bookkeep.domain.obligation import ObligationService
from bookkeep.domain.payment import PaymentService
from bookkeep.domain.project import ProjectService
from bookkeep.domain.reconciliation import ReconciliationService
from bookkeep.domain.report import ReportService
from bookkeep.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def concept_service(temp_db):
    """Create a ConceptService with a temporary database."""
    return ConceptService(temp_db)


@pytest.fixture
def catalog_service(temp_db):
    """Create a CatalogService with a temporary database."""
    return CatalogService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def movement_service(temp_db):
    """Create a MovementService with a temporary database."""
    return MovementService(temp_db)


@pytest.fixture
def obligation_service(temp_db):
    """Create an ObligationService with a temporary database."""
    return ObligationService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def ledger(account_service, concept_service, catalog_service):
    """Seed a tenant with system concepts, concepts, payment forms, methods and persons."""
    account_id = account_service.create_account("Corner Bakery")
    incoming_id, outgoing_id = concept_service.ensure_system_payment_concepts(account_id)

    costs_group = concept_service.create_concept(
        account_id, "Operating costs", is_group=True, is_expense=True
    )
    return SimpleNamespace(
        account_id=account_id,
        incoming_concept=incoming_id,
        outgoing_concept=outgoing_id,
        costs_group=costs_group,
        rent=concept_service.create_concept(
            account_id, "Rent", parent_concept_id=costs_group, is_expense=True
        ),
        utilities=concept_service.create_concept(account_id, "Utilities", is_expense=True),
        bread=concept_service.create_concept(
            account_id, "Bread", is_product=True, is_income=True, price=2
        ),
        catering=concept_service.create_concept(account_id, "Catering", is_income=True),
        flour=concept_service.create_concept(
            account_id, "Flour", is_expense=True, is_account_payable_concept=True
        ),
        cashbox=catalog_service.create_payment_form(
            account_id, "Front desk", PaymentFormKind.CASHBOX
        ),
        bank=catalog_service.create_payment_form(
            account_id, "Checking", PaymentFormKind.BANK_ACCOUNT, provider="First Bank"
        ),
        savings=catalog_service.create_payment_form(
            account_id, "Savings", PaymentFormKind.BANK_ACCOUNT, provider="First Bank"
        ),
        cash=catalog_service.create_payment_method(account_id, "Cash", code="cash"),
        transfer=catalog_service.create_payment_method(
            account_id, "Bank transfer", code="bank_transfer"
        ),
        client=catalog_service.create_person(account_id, "Ana Ruiz", is_client=True),
        provider=catalog_service.create_person(account_id, "Mill & Co", is_provider=True),
    )


@pytest.fixture
def other_tenant(account_service, concept_service):
    """Create a second tenant with its own system concepts and one concept."""
    account_id = account_service.create_account("Other Shop")
    concept_service.ensure_system_payment_concepts(account_id)
    return SimpleNamespace(
        account_id=account_id,
        rent=concept_service.create_concept(account_id, "Rent", is_expense=True),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
