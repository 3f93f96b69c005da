"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from decimal import Decimal

from bookkeep.domain import entities as domain
from bookkeep.database.models import (
    Account as ORMAccount,
    AccountPaymentForm as ORMAccountPaymentForm,
    Budget as ORMBudget,
    BudgetLine as ORMBudgetLine,
    Concept as ORMConcept,
    Currency as ORMCurrency,
    PaymentMethod as ORMPaymentMethod,
    Person as ORMPerson,
    Project as ORMProject,
    Transaction as ORMTransaction,
    TransactionDetail as ORMTransactionDetail,
)


def _money(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        created_at=orm_account.created_at,
        is_active=orm_account.is_active,
    )


def concept_to_domain(orm_concept: ORMConcept) -> domain.Concept:
    """Convert SQLAlchemy Concept model to domain Concept entity."""
    return domain.Concept(
        id=orm_concept.id,
        account_id=orm_concept.account_id,
        name=orm_concept.name,
        parent_concept_id=orm_concept.parent_concept_id,
        is_group=orm_concept.is_group,
        is_income=orm_concept.is_income,
        is_expense=orm_concept.is_expense,
        is_product=orm_concept.is_product,
        is_account_payable_concept=orm_concept.is_account_payable_concept,
        is_incoming_payment_concept=orm_concept.is_incoming_payment_concept,
        is_outgoing_payment_concept=orm_concept.is_outgoing_payment_concept,
        is_system=orm_concept.is_system,
        tax_percentage=_money(orm_concept.tax_percentage),
        price=_money(orm_concept.price),
        additional_charges=_money(orm_concept.additional_charges),
    )


def payment_form_to_domain(orm_form: ORMAccountPaymentForm) -> domain.AccountPaymentForm:
    """Convert SQLAlchemy AccountPaymentForm model to domain entity."""
    return domain.AccountPaymentForm(
        id=orm_form.id,
        account_id=orm_form.account_id,
        name=orm_form.name,
        kind=orm_form.kind,
        provider=orm_form.provider,
        reference=orm_form.reference,
        is_active=orm_form.is_active,
    )


def payment_method_to_domain(orm_method: ORMPaymentMethod) -> domain.PaymentMethod:
    """Convert SQLAlchemy PaymentMethod model to domain entity."""
    return domain.PaymentMethod(
        id=orm_method.id,
        account_id=orm_method.account_id,
        name=orm_method.name,
        code=orm_method.code,
        is_active=orm_method.is_active,
    )


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy Currency model to domain entity."""
    return domain.Currency(
        id=orm_currency.id,
        account_id=orm_currency.account_id,
        code=orm_currency.code,
        name=orm_currency.name,
        is_local=orm_currency.is_local,
    )


def person_to_domain(orm_person: ORMPerson) -> domain.Person:
    """Convert SQLAlchemy Person model to domain entity."""
    return domain.Person(
        id=orm_person.id,
        account_id=orm_person.account_id,
        name=orm_person.name,
        is_client=orm_person.is_client,
        is_provider=orm_person.is_provider,
        is_active=orm_person.is_active,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain entity."""
    return domain.Project(
        id=orm_project.id,
        account_id=orm_project.account_id,
        name=orm_project.name,
        description=orm_project.description,
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        is_active=orm_project.is_active,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain entity."""
    return domain.Budget(
        id=orm_budget.id,
        account_id=orm_budget.account_id,
        name=orm_budget.name,
        period_type=orm_budget.period_type,
        period_start=orm_budget.period_start,
        period_end=orm_budget.period_end,
        project_id=orm_budget.project_id,
        is_active=orm_budget.is_active,
    )


def budget_line_to_domain(orm_line: ORMBudgetLine) -> domain.BudgetLine:
    """Convert SQLAlchemy BudgetLine model to domain entity."""
    return domain.BudgetLine(
        id=orm_line.id,
        budget_id=orm_line.budget_id,
        concept_id=orm_line.concept_id,
        amount=_money(orm_line.amount),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        type=domain.TransactionType(orm_transaction.type),
        date=orm_transaction.date,
        total=_money(orm_transaction.total),
        payments=_money(orm_transaction.payments),
        balance=_money(orm_transaction.balance),
        net=_money(orm_transaction.net),
        discounts=_money(orm_transaction.discounts),
        taxes=_money(orm_transaction.taxes),
        additional_charges=_money(orm_transaction.additional_charges),
        person_id=orm_transaction.person_id,
        employee_id=orm_transaction.employee_id,
        name=orm_transaction.name,
        reference_number=orm_transaction.reference_number,
        status=orm_transaction.status,
        is_account_payable=orm_transaction.is_account_payable,
        is_account_receivable=orm_transaction.is_account_receivable,
        is_incoming_payment=orm_transaction.is_incoming_payment,
        is_outcoming_payment=orm_transaction.is_outcoming_payment,
        is_internal_obligation=orm_transaction.is_internal_obligation,
        is_internal_transfer=orm_transaction.is_internal_transfer,
        is_deposit=orm_transaction.is_deposit,
        is_reconciled=orm_transaction.is_reconciled,
        reconciled_at=orm_transaction.reconciled_at,
        is_active=orm_transaction.is_active,
        source_transaction_id=orm_transaction.source_transaction_id,
        account_payment_form_id=orm_transaction.account_payment_form_id,
        payment_method_id=orm_transaction.payment_method_id,
        currency_id=orm_transaction.currency_id,
        project_id=orm_transaction.project_id,
        created_by_id=orm_transaction.created_by_id,
        created_at=orm_transaction.created_at,
    )


def transaction_detail_to_domain(orm_detail: ORMTransactionDetail) -> domain.TransactionDetail:
    """Convert SQLAlchemy TransactionDetail model to domain entity."""
    return domain.TransactionDetail(
        id=orm_detail.id,
        transaction_id=orm_detail.transaction_id,
        concept_id=orm_detail.concept_id,
        quantity=_money(orm_detail.quantity),
        price=_money(orm_detail.price),
        net=_money(orm_detail.net),
        tax_percentage=_money(orm_detail.tax_percentage),
        tax=_money(orm_detail.tax),
        discount_percentage=_money(orm_detail.discount_percentage),
        discount=_money(orm_detail.discount),
        total=_money(orm_detail.total),
        additional_charges=_money(orm_detail.additional_charges),
        seller_id=orm_detail.seller_id,
        transaction_paid_id=orm_detail.transaction_paid_id,
        created_by_id=orm_detail.created_by_id,
    )


def transaction_draft_to_orm(draft: domain.TransactionDraft) -> ORMTransaction:
    """Build an unsaved SQLAlchemy Transaction from a domain draft."""
    return ORMTransaction(
        account_id=draft.account_id,
        type=int(draft.type),
        date=draft.date,
        name=draft.name,
        reference_number=draft.reference_number,
        status=draft.status,
        person_id=draft.person_id,
        employee_id=draft.employee_id,
        net=draft.net,
        discounts=draft.discounts,
        taxes=draft.taxes,
        additional_charges=draft.additional_charges,
        total=draft.total,
        payments=draft.payments,
        balance=draft.balance,
        is_account_payable=draft.is_account_payable,
        is_account_receivable=draft.is_account_receivable,
        is_incoming_payment=draft.is_incoming_payment,
        is_outcoming_payment=draft.is_outcoming_payment,
        is_internal_obligation=draft.is_internal_obligation,
        is_internal_transfer=draft.is_internal_transfer,
        is_deposit=draft.is_deposit,
        is_reconciled=draft.is_reconciled,
        reconciled_at=draft.reconciled_at,
        is_active=True,
        source_transaction_id=draft.source_transaction_id,
        account_payment_form_id=draft.account_payment_form_id,
        payment_method_id=draft.payment_method_id,
        currency_id=draft.currency_id,
        project_id=draft.project_id,
        created_by_id=draft.created_by_id,
    )


def detail_draft_to_orm(draft: domain.DetailDraft, transaction_id: int) -> ORMTransactionDetail:
    """Build an unsaved SQLAlchemy TransactionDetail owned by ``transaction_id``."""
    return ORMTransactionDetail(
        transaction_id=transaction_id,
        concept_id=draft.concept_id,
        quantity=draft.quantity,
        price=draft.price,
        net=draft.net,
        tax_percentage=draft.tax_percentage,
        tax=draft.tax,
        discount_percentage=draft.discount_percentage,
        discount=draft.discount,
        total=draft.total,
        additional_charges=draft.additional_charges,
        seller_id=draft.seller_id,
        transaction_paid_id=draft.transaction_paid_id,
        created_by_id=draft.created_by_id,
    )
