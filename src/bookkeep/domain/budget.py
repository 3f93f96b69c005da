"""Budget domain service.

Budgets hold planned amounts per concept. Execution is recomputed on every
call from active transaction details, with expense concepts counted as
absolute values so that budgets always compare spent vs. planned.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from bookkeep.database.base import Database
from bookkeep.domain.entities import Budget, BudgetExecutionLine, BudgetLine, Concept
from bookkeep.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    concept_not_found,
)
from bookkeep.domain.normalization import ZERO, normalized_execution_amount, to_decimal
from bookkeep.domain.project import ProjectService

logger = logging.getLogger(__name__)

PERIOD_TYPES = ("monthly", "quarterly", "yearly", "custom")

BudgetLineInput = tuple[int, Decimal | int | str]


def _concept_name(concepts: dict[int, Concept], concept_id: int) -> str:
    concept = concepts.get(concept_id)
    return concept.name if concept else f"#{concept_id}"


class BudgetService:
    """Service for budgets and their execution reports."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db
        self.project_service = ProjectService(db)

    def create_budget_with_lines(
        self,
        account_id: int,
        name: str,
        lines: Sequence[BudgetLineInput],
        period_type: Optional[str] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        project_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> int:
        """Create a budget and its lines as one unit of work.

        Args:
            account_id: Tenant account ID
            name: Budget name
            lines: ``(concept_id, amount)`` pairs
            period_type: One of monthly, quarterly, yearly, custom
            period_start: First day covered by the budget
            period_end: Last day covered by the budget
            project_id: Optional project scope
            created_by_id: Optional author ID

        Returns:
            Budget ID
        """
        name = self._validate_header(account_id, name, period_type, period_start, period_end, project_id)
        payload = self._validate_lines(account_id, lines)

        with self.db.transaction():
            budget_id = self.db.create_budget(
                account_id=account_id,
                name=name,
                period_type=period_type,
                period_start=period_start,
                period_end=period_end,
                project_id=project_id,
                created_by_id=created_by_id,
            )
            if payload:
                self.db.add_budget_lines(budget_id, payload, created_by_id=created_by_id)

        logger.info("Created budget %s '%s' with %d line(s)", budget_id, name, len(payload))
        return budget_id

    def update_budget_with_lines(
        self,
        account_id: int,
        budget_id: int,
        name: str,
        lines: Sequence[BudgetLineInput],
        period_type: Optional[str] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        project_id: Optional[int] = None,
        created_by_id: Optional[str] = None,
    ) -> None:
        """Replace a budget's header and all of its lines."""
        self.require_budget(account_id, budget_id)
        name = self._validate_header(account_id, name, period_type, period_start, period_end, project_id)
        payload = self._validate_lines(account_id, lines)

        with self.db.transaction():
            self.db.update_budget(
                budget_id,
                name=name,
                period_type=period_type,
                period_start=period_start,
                period_end=period_end,
                project_id=project_id,
            )
            self.db.delete_budget_lines(budget_id)
            if payload:
                self.db.add_budget_lines(budget_id, payload, created_by_id=created_by_id)

        logger.info("Updated budget %s with %d line(s)", budget_id, len(payload))

    def _validate_header(
        self,
        account_id: int,
        name: str,
        period_type: Optional[str],
        period_start: Optional[date],
        period_end: Optional[date],
        project_id: Optional[int],
    ) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Budget name is required")
        if period_type is not None and period_type not in PERIOD_TYPES:
            raise ValidationError(
                f"Unknown period type '{period_type}'. Expected one of: {', '.join(PERIOD_TYPES)}"
            )
        if period_start and period_end and period_end < period_start:
            raise ValidationError("Budget period end cannot be before its start")
        if project_id is not None:
            self.project_service.require_project(account_id, project_id)
        return name

    def _validate_lines(self, account_id: int, lines: Sequence[BudgetLineInput]) -> list[tuple[int, Decimal]]:
        # Lines without a concept are dropped, like blank rows of the budget form.
        payload = [(int(cid), to_decimal(amount)) for cid, amount in lines if cid]
        concepts = {c.id: c for c in self.db.get_concepts([cid for cid, _ in payload])}
        for concept_id, amount in payload:
            concept = concepts.get(concept_id)
            if concept is None or concept.account_id != account_id:
                raise ValidationError(concept_not_found(concept_id))
            if amount < ZERO:
                raise ValidationError("Budgeted amounts cannot be negative")
        return payload

    def require_budget(self, account_id: int, budget_id: int) -> Budget:
        """Get a tenant's budget or raise NotFoundError."""
        budget = self.db.get_budget(budget_id)
        if budget is None or budget.account_id != account_id:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def list_budgets(
        self, account_id: int, active_only: bool = True, project_id: Optional[int] = None
    ) -> list[Budget]:
        """List a tenant's budgets."""
        return self.db.list_budgets(account_id, active_only=active_only, project_id=project_id)

    def list_budget_lines(self, account_id: int, budget_id: int) -> list[BudgetLine]:
        """List the lines of one budget."""
        self.require_budget(account_id, budget_id)
        return self.db.list_budget_lines([budget_id])

    def deactivate_budget(self, account_id: int, budget_id: int) -> None:
        """Deactivate a budget."""
        self.require_budget(account_id, budget_id)
        self.db.deactivate_budget(budget_id)
        logger.info("Deactivated budget %s", budget_id)

    def _executed_by_concept(
        self,
        account_id: int,
        concepts: dict[int, Concept],
        concept_ids: Optional[Sequence[int]],
        date_from: Optional[date],
        date_to: Optional[date],
        project_id: Optional[int],
    ) -> dict[int, Decimal]:
        rows = self.db.list_execution_details(
            account_id=account_id,
            concept_ids=concept_ids,
            start_date=date_from,
            end_date=date_to,
            project_id=project_id,
        )
        missing = {d.concept_id for d, _ in rows} - concepts.keys()
        if missing:
            concepts.update({c.id: c for c in self.db.get_concepts(list(missing))})

        executed: dict[int, Decimal] = defaultdict(lambda: ZERO)
        for detail, _txn in rows:
            concept = concepts.get(detail.concept_id)
            is_expense = bool(concept and concept.is_expense)
            executed[detail.concept_id] += normalized_execution_amount(detail.total, is_expense)
        return executed

    def get_budget_execution_report(
        self,
        account_id: int,
        budget_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[BudgetExecutionLine]:
        """Compare each budget line with what was actually executed.

        The window defaults to the budget's period; a project-scoped budget
        only counts transactions of that project.

        Returns:
            One BudgetExecutionLine per budget line (empty for a budget without lines)
        """
        budget = self.require_budget(account_id, budget_id)
        lines = self.db.list_budget_lines([budget_id])
        if not lines:
            return []

        concept_ids = sorted({line.concept_id for line in lines})
        concepts = {c.id: c for c in self.db.get_concepts(concept_ids)}
        executed = self._executed_by_concept(
            account_id,
            concepts,
            concept_ids,
            date_from or budget.period_start,
            date_to or budget.period_end,
            budget.project_id,
        )

        report = []
        for line in lines:
            spent = executed.get(line.concept_id, ZERO)
            report.append(
                BudgetExecutionLine(
                    line_id=line.id,
                    concept_id=line.concept_id,
                    concept_name=_concept_name(concepts, line.concept_id),
                    budgeted=line.amount,
                    executed=spent,
                    variance=line.amount - spent,
                )
            )
        return report

    def get_project_execution_report(
        self,
        account_id: int,
        project_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[BudgetExecutionLine]:
        """Sum all active budgets of a project per concept against its execution.

        Concepts that were executed without being budgeted are reported with
        a zero budget.
        """
        self.project_service.require_project(account_id, project_id)
        budgets = self.db.list_budgets(account_id, active_only=True, project_id=project_id)
        lines = self.db.list_budget_lines([b.id for b in budgets]) if budgets else []

        budgeted: dict[int, Decimal] = defaultdict(lambda: ZERO)
        for line in lines:
            budgeted[line.concept_id] += line.amount

        concepts = {c.id: c for c in self.db.get_concepts(list(budgeted))}
        executed = self._executed_by_concept(
            account_id, concepts, None, date_from, date_to, project_id
        )

        concept_ids = list(budgeted) + [cid for cid in executed if cid not in budgeted]
        report = []
        for concept_id in concept_ids:
            planned = budgeted.get(concept_id, ZERO)
            spent = executed.get(concept_id, ZERO)
            report.append(
                BudgetExecutionLine(
                    concept_id=concept_id,
                    concept_name=_concept_name(concepts, concept_id),
                    budgeted=planned,
                    executed=spent,
                    variance=planned - spent,
                )
            )
        return report
