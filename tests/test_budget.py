"""Tests for budgets and budget execution reports."""

from datetime import date
from decimal import Decimal

import pytest

from bookkeep.domain.entities import TransactionType
from bookkeep.domain.errors import NotFoundError, ValidationError


def _expense(transaction_service, ledger, concept_id, amount, when, project_id=None):
    return transaction_service.create_simple_transaction(
        ledger.account_id, TransactionType.EXPENSE, concept_id, amount, when, project_id=project_id
    )


@pytest.fixture
def june_budget(budget_service, ledger):
    """June budget: Rent 1000, Utilities 150."""
    return budget_service.create_budget_with_lines(
        ledger.account_id,
        "June operations",
        [(ledger.rent, "1000"), (ledger.utilities, 150)],
        period_type="monthly",
        period_start=date(2024, 6, 1),
        period_end=date(2024, 6, 30),
    )


def test_execution_compares_spent_against_planned(
    budget_service, transaction_service, ledger, june_budget
):
    """Expenses of 300 and 200 against 1000 leave 500 of variance."""
    _expense(transaction_service, ledger, ledger.rent, 300, date(2024, 6, 5))
    _expense(transaction_service, ledger, ledger.rent, 200, date(2024, 6, 20))

    report = budget_service.get_budget_execution_report(ledger.account_id, june_budget)

    rent = next(line for line in report if line.concept_id == ledger.rent)
    assert rent.concept_name == "Rent"
    assert rent.budgeted == Decimal("1000")
    assert rent.executed == Decimal("500")
    assert rent.variance == Decimal("500")
    assert rent.line_id is not None


def test_lines_without_matching_transactions_execute_zero(budget_service, ledger, june_budget):
    """Lines without activity report zero executed."""
    report = budget_service.get_budget_execution_report(ledger.account_id, june_budget)

    assert [line.executed for line in report] == [Decimal("0"), Decimal("0")]
    assert [line.variance for line in report] == [Decimal("1000"), Decimal("150")]


def test_execution_window_defaults_to_budget_period(
    budget_service, transaction_service, ledger, june_budget
):
    """Transactions outside the period are ignored unless the window is widened."""
    _expense(transaction_service, ledger, ledger.utilities, 90, date(2024, 5, 28))
    _expense(transaction_service, ledger, ledger.utilities, 40, date(2024, 6, 2))

    report = budget_service.get_budget_execution_report(ledger.account_id, june_budget)
    utilities = next(line for line in report if line.concept_id == ledger.utilities)
    assert utilities.executed == Decimal("40")

    widened = budget_service.get_budget_execution_report(
        ledger.account_id, june_budget, date_from=date(2024, 5, 1), date_to=date(2024, 6, 30)
    )
    utilities = next(line for line in widened if line.concept_id == ledger.utilities)
    assert utilities.executed == Decimal("130")
    assert utilities.variance == Decimal("20")


def test_inactive_transactions_are_not_executed(
    budget_service, transaction_service, ledger, june_budget
):
    """Deactivated expenses drop out of execution."""
    txn = _expense(transaction_service, ledger, ledger.rent, 300, date(2024, 6, 5))
    transaction_service.deactivate_transaction(ledger.account_id, txn.id)

    report = budget_service.get_budget_execution_report(ledger.account_id, june_budget)
    assert all(line.executed == Decimal("0") for line in report)


def test_budget_without_lines_reports_nothing(budget_service, ledger):
    """An empty budget has an empty report."""
    budget_id = budget_service.create_budget_with_lines(ledger.account_id, "Placeholder", [])
    assert budget_service.get_budget_execution_report(ledger.account_id, budget_id) == []


def test_project_scoped_budget_counts_only_project_transactions(
    budget_service, project_service, transaction_service, ledger
):
    """A project budget ignores transactions outside the project."""
    project_id = project_service.create_project(ledger.account_id, "Shop refit")
    budget_id = budget_service.create_budget_with_lines(
        ledger.account_id, "Refit", [(ledger.utilities, 500)], project_id=project_id
    )
    _expense(transaction_service, ledger, ledger.utilities, 120, date(2024, 6, 5), project_id)
    _expense(transaction_service, ledger, ledger.utilities, 999, date(2024, 6, 5))

    report = budget_service.get_budget_execution_report(ledger.account_id, budget_id)
    assert report[0].executed == Decimal("120")
    assert report[0].variance == Decimal("380")


def test_project_report_sums_budgets_and_adds_unbudgeted_concepts(
    budget_service, project_service, transaction_service, ledger
):
    """Budgets of a project are summed and unbudgeted spending is listed last."""
    project_id = project_service.create_project(ledger.account_id, "Shop refit")
    budget_service.create_budget_with_lines(
        ledger.account_id, "Phase 1", [(ledger.utilities, 300)], project_id=project_id
    )
    budget_service.create_budget_with_lines(
        ledger.account_id, "Phase 2", [(ledger.utilities, 200)], project_id=project_id
    )
    _expense(transaction_service, ledger, ledger.utilities, 100, date(2024, 6, 5), project_id)
    _expense(transaction_service, ledger, ledger.rent, 50, date(2024, 6, 6), project_id)

    report = budget_service.get_project_execution_report(ledger.account_id, project_id)

    assert [(line.concept_name, line.budgeted, line.executed) for line in report] == [
        ("Utilities", Decimal("500"), Decimal("100")),
        ("Rent", Decimal("0"), Decimal("50")),
    ]
    assert report[1].variance == Decimal("-50")


def test_update_replaces_lines(budget_service, ledger, june_budget):
    """Updating a budget replaces all of its lines."""
    budget_service.update_budget_with_lines(
        ledger.account_id,
        june_budget,
        "June operations",
        [(ledger.rent, 1100)],
        period_type="monthly",
        period_start=date(2024, 6, 1),
        period_end=date(2024, 6, 30),
    )

    lines = budget_service.list_budget_lines(ledger.account_id, june_budget)
    assert [(line.concept_id, line.amount) for line in lines] == [(ledger.rent, Decimal("1100"))]


def test_budget_validation(budget_service, ledger, other_tenant):
    """Header and line rules are enforced before writing."""
    with pytest.raises(ValidationError, match="name"):
        budget_service.create_budget_with_lines(ledger.account_id, "  ", [])
    with pytest.raises(ValidationError, match="period type"):
        budget_service.create_budget_with_lines(ledger.account_id, "B", [], period_type="weekly")
    with pytest.raises(ValidationError, match="before"):
        budget_service.create_budget_with_lines(
            ledger.account_id, "B", [], period_start=date(2024, 6, 30), period_end=date(2024, 6, 1)
        )
    with pytest.raises(ValidationError, match="not found"):
        budget_service.create_budget_with_lines(ledger.account_id, "B", [(other_tenant.rent, 10)])
    with pytest.raises(ValidationError, match="negative"):
        budget_service.create_budget_with_lines(ledger.account_id, "B", [(ledger.rent, -10)])
    with pytest.raises(NotFoundError):
        budget_service.create_budget_with_lines(ledger.account_id, "B", [], project_id=9999)

    assert budget_service.list_budgets(ledger.account_id) == []


def test_deactivate_budget(budget_service, ledger, june_budget, other_tenant):
    """Deactivated budgets leave the active listing."""
    with pytest.raises(NotFoundError):
        budget_service.deactivate_budget(other_tenant.account_id, june_budget)

    budget_service.deactivate_budget(ledger.account_id, june_budget)
    assert budget_service.list_budgets(ledger.account_id) == []
