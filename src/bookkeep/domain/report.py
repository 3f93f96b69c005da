"""Reporting domain service."""

import calendar
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    CashflowConceptTotal,
    DashboardData,
    MonthlyFlow,
    PaymentFormBalance,
    PaymentFormKind,
    Transaction,
    TransactionType,
)
from bookkeep.domain.normalization import ZERO, signed_amount, unsigned_amount

INCOME_FLOW = "income"
EXPENSE_FLOW = "expense"

UNGROUPED_NAMES = {
    INCOME_FLOW: "No group (income)",
    EXPENSE_FLOW: "No group (expenses)",
}

DASHBOARD_MONTHS = 6


def _is_cashflow(txn: Transaction) -> bool:
    return (
        txn.type in (TransactionType.EXPENSE, TransactionType.INCOME)
        or txn.is_incoming_payment
        or txn.is_outcoming_payment
    )


def _flow_type(txn: Transaction) -> str:
    if txn.type == TransactionType.INCOME or txn.is_incoming_payment:
        return INCOME_FLOW
    return EXPENSE_FLOW


class ReportService:
    """Service for report read models."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transactions_for_reports(
        self,
        account_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        """List active transactions inside the report window, newest first."""
        return self.db.list_transactions(
            account_id=account_id,
            start_date=date_from,
            end_date=date_to,
            active_only=True,
        )

    def get_cashflow_concept_totals(
        self,
        account_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        currency_id: Optional[int] = None,
    ) -> list[CashflowConceptTotal]:
        """Sum income, expense and payment detail totals by flow, group and concept.

        Concepts without a parent group land in a per-flow "No group" bucket.
        Totals keep their stored sign. Rows come back in first-seen order.
        """
        transactions = [
            txn
            for txn in self.db.list_transactions(
                account_id=account_id,
                start_date=date_from,
                end_date=date_to,
                active_only=True,
                currency_id=currency_id,
            )
            if _is_cashflow(txn)
        ]
        if not transactions:
            return []

        by_id = {txn.id: txn for txn in transactions}
        details = self.db.list_transaction_details(list(by_id))
        concepts = {c.id: c for c in self.db.get_concepts(sorted({d.concept_id for d in details}))}
        parent_ids = {c.parent_concept_id for c in concepts.values() if c.parent_concept_id}
        groups = {c.id: c.name for c in self.db.get_concepts(sorted(parent_ids))} if parent_ids else {}

        totals: dict[tuple[str, str, str], Decimal] = {}
        for detail in details:
            txn = by_id[detail.transaction_id]
            flow = _flow_type(txn)
            concept = concepts.get(detail.concept_id)
            concept_name = concept.name if concept else "-"
            group_name = (
                groups.get(concept.parent_concept_id) if concept and concept.parent_concept_id else None
            ) or UNGROUPED_NAMES[flow]
            key = (flow, group_name, concept_name)
            totals[key] = totals.get(key, ZERO) + detail.total

        return [
            CashflowConceptTotal(flow_type=flow, group_name=group, concept_name=name, total=total)
            for (flow, group, name), total in totals.items()
        ]

    def get_dashboard_data(
        self,
        account_id: int,
        as_of: Optional[date] = None,
        months: int = DASHBOARD_MONTHS,
    ) -> DashboardData:
        """Build the ledger overview for the month containing ``as_of``.

        Bank balances are direction-signed sums over every active
        transaction posted to each bank account. Sales per day and
        expense/income per concept cover the current month. The monthly
        series covers the last ``months`` months, current month included.
        Internal obligations report their outstanding balance per
        payment form.

        Args:
            account_id: Tenant account ID
            as_of: Reference day (defaults to today)
            months: Length of the income/expense series

        Returns:
            DashboardData; every section is empty for a tenant without activity
        """
        as_of = as_of or date.today()
        month_start = as_of.replace(day=1)
        days_in_month = calendar.monthrange(as_of.year, as_of.month)[1]
        month_end = as_of.replace(day=days_in_month)

        forms = self.db.list_payment_forms(account_id)
        transactions = self.db.list_transactions(account_id=account_id, active_only=True)

        bank_balances = tuple(
            PaymentFormBalance(
                account_payment_form_id=form.id,
                name=form.name,
                provider=form.provider,
                balance=sum(
                    (
                        signed_amount(t.type, t.total)
                        for t in transactions
                        if t.account_payment_form_id == form.id
                    ),
                    ZERO,
                ),
            )
            for form in forms
            if form.kind == PaymentFormKind.BANK_ACCOUNT
        )

        in_month = [t for t in transactions if month_start <= t.date <= month_end]

        sales_by_day: dict[int, Decimal] = {day: ZERO for day in range(1, days_in_month + 1)}
        for txn in in_month:
            if txn.type == TransactionType.SALE:
                sales_by_day[txn.date.day] += unsigned_amount(txn.total)

        expenses, incomes = self._month_concept_totals(in_month)

        month_keys = [
            (month_start - relativedelta(months=offset)).strftime("%Y-%m")
            for offset in range(months - 1, -1, -1)
        ]
        flows = {key: {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO} for key in month_keys}
        for txn in transactions:
            bucket = flows.get(txn.date.strftime("%Y-%m"))
            if bucket is not None and txn.type in bucket:
                bucket[txn.type] += unsigned_amount(txn.total)

        form_names = {form.id: form.name for form in forms}
        obligations: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in transactions:
            if txn.is_internal_obligation:
                label = form_names.get(txn.account_payment_form_id, "-")
                obligations[label] += unsigned_amount(txn.balance)

        return DashboardData(
            as_of=as_of,
            bank_balances=bank_balances,
            sales_by_day=tuple(sales_by_day.items()),
            expenses_by_concept=tuple(expenses.items()),
            incomes_by_concept=tuple(incomes.items()),
            income_expense_by_month=tuple(
                MonthlyFlow(
                    month=key,
                    income=flows[key][TransactionType.INCOME],
                    expense=flows[key][TransactionType.EXPENSE],
                )
                for key in month_keys
            ),
            internal_obligations_by_form=tuple(obligations.items()),
        )

    def _month_concept_totals(
        self, transactions: list[Transaction]
    ) -> tuple[dict[str, Decimal], dict[str, Decimal]]:
        by_id = {
            t.id: t for t in transactions if t.type in (TransactionType.EXPENSE, TransactionType.INCOME)
        }
        expenses: dict[str, Decimal] = {}
        incomes: dict[str, Decimal] = {}
        if not by_id:
            return expenses, incomes

        details = self.db.list_transaction_details(list(by_id))
        names = {c.id: c.name for c in self.db.get_concepts(sorted({d.concept_id for d in details}))}
        for detail in details:
            target = expenses if by_id[detail.transaction_id].type == TransactionType.EXPENSE else incomes
            name = names.get(detail.concept_id, f"#{detail.concept_id}")
            target[name] = target.get(name, ZERO) + unsigned_amount(detail.total)
        return expenses, incomes
