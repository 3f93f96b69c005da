"""Domain model entities for bookkeep.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; the ORM models never
leave the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import IntEnum
from typing import Optional


class TransactionType(IntEnum):
    """Ledger transaction types as persisted in the ``type`` column."""

    SALE = 1
    EXPENSE = 2
    INCOME = 3
    PURCHASE = 4
    OUTGOING_PAYMENT = 5
    INCOMING_PAYMENT = 6


class PaymentFormKind:
    """Known account payment form kinds."""

    CASHBOX = "cashbox"
    BANK_ACCOUNT = "bank_account"
    CREDIT_CARD = "credit_card"

    ALL = (CASHBOX, BANK_ACCOUNT, CREDIT_CARD)


class PaymentDirection:
    """Direction of a payment relative to the tenant."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


@dataclass(frozen=True)
class Account:
    """Tenant account; every ledger row is scoped by its id."""

    id: int
    name: str
    created_at: datetime
    is_active: bool = True


@dataclass(frozen=True)
class Concept:
    """Chart-of-accounts style category for transaction lines."""

    id: int
    account_id: int
    name: str
    parent_concept_id: Optional[int] = None
    is_group: bool = False
    is_income: bool = False
    is_expense: bool = False
    is_product: bool = False
    is_account_payable_concept: bool = False
    is_incoming_payment_concept: bool = False
    is_outgoing_payment_concept: bool = False
    is_system: bool = False
    tax_percentage: Decimal = Decimal("0")
    price: Decimal = Decimal("0")
    additional_charges: Decimal = Decimal("0")


@dataclass(frozen=True)
class AccountPaymentForm:
    """Named cash/bank/card instrument transactions are posted against."""

    id: int
    account_id: int
    name: str
    kind: str
    provider: Optional[str] = None
    reference: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class PaymentMethod:
    """How money moved (cash, bank transfer, card...)."""

    id: int
    account_id: int
    name: str
    code: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Currency:
    """Currency available to a tenant."""

    id: int
    account_id: int
    code: str
    name: str
    is_local: bool = False


@dataclass(frozen=True)
class Person:
    """Client or provider counterparty."""

    id: int
    account_id: int
    name: str
    is_client: bool = False
    is_provider: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class Project:
    """Project that transactions and budgets can be scoped to."""

    id: int
    account_id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True


@dataclass(frozen=True)
class Budget:
    """Budget header with its period and optional project scope."""

    id: int
    account_id: int
    name: str
    period_type: Optional[str]
    period_start: Optional[date]
    period_end: Optional[date]
    project_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class BudgetLine:
    """Budgeted amount for one concept."""

    id: int
    budget_id: int
    concept_id: int
    amount: Decimal


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction domain entity."""

    id: int
    account_id: int
    type: TransactionType
    date: date
    total: Decimal
    payments: Decimal
    balance: Decimal
    net: Decimal = Decimal("0")
    discounts: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    additional_charges: Decimal = Decimal("0")
    person_id: Optional[int] = None
    employee_id: Optional[int] = None
    name: Optional[str] = None
    reference_number: Optional[str] = None
    status: int = 1
    is_account_payable: bool = False
    is_account_receivable: bool = False
    is_incoming_payment: bool = False
    is_outcoming_payment: bool = False
    is_internal_obligation: bool = False
    is_internal_transfer: bool = False
    is_deposit: bool = False
    is_reconciled: bool = False
    reconciled_at: Optional[datetime] = None
    is_active: bool = True
    source_transaction_id: Optional[int] = None
    account_payment_form_id: Optional[int] = None
    payment_method_id: Optional[int] = None
    currency_id: Optional[int] = None
    project_id: Optional[int] = None
    created_by_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_credit(self) -> bool:
        """True when the transaction leaves a receivable or payable balance."""
        return self.is_account_payable or self.is_account_receivable


@dataclass(frozen=True)
class TransactionDetail:
    """Line item of a transaction."""

    id: int
    transaction_id: int
    concept_id: int
    quantity: Decimal
    price: Decimal
    net: Decimal
    tax_percentage: Decimal
    tax: Decimal
    discount_percentage: Decimal
    discount: Decimal
    total: Decimal
    additional_charges: Decimal
    seller_id: Optional[int] = None
    transaction_paid_id: Optional[int] = None
    created_by_id: Optional[str] = None


@dataclass(frozen=True)
class TransactionDraft:
    """Caller-built transaction payload, money fields already computed."""

    account_id: int
    type: TransactionType
    date: date
    total: Decimal
    payments: Decimal
    balance: Decimal
    net: Decimal = Decimal("0")
    discounts: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    additional_charges: Decimal = Decimal("0")
    person_id: Optional[int] = None
    employee_id: Optional[int] = None
    name: Optional[str] = None
    reference_number: Optional[str] = None
    status: int = 1
    is_account_payable: bool = False
    is_account_receivable: bool = False
    is_incoming_payment: bool = False
    is_outcoming_payment: bool = False
    is_internal_obligation: bool = False
    is_internal_transfer: bool = False
    is_deposit: bool = False
    is_reconciled: bool = False
    reconciled_at: Optional[datetime] = None
    source_transaction_id: Optional[int] = None
    account_payment_form_id: Optional[int] = None
    payment_method_id: Optional[int] = None
    currency_id: Optional[int] = None
    project_id: Optional[int] = None
    created_by_id: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        return self.is_account_payable or self.is_account_receivable


@dataclass(frozen=True)
class DetailDraft:
    """Caller-built line payload; ``transaction_id`` is assigned on insert."""

    concept_id: int
    total: Decimal
    quantity: Decimal = Decimal("1")
    price: Decimal = Decimal("0")
    net: Decimal = Decimal("0")
    tax_percentage: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    additional_charges: Decimal = Decimal("0")
    seller_id: Optional[int] = None
    transaction_paid_id: Optional[int] = None
    created_by_id: Optional[str] = None


@dataclass(frozen=True)
class LineInput:
    """Caller-entered sale line before amounts are computed."""

    concept_id: int
    quantity: Decimal
    price: Decimal
    tax_percentage: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")
    additional_charges: Decimal = Decimal("0")
    seller_id: Optional[int] = None


@dataclass(frozen=True)
class LineAmounts:
    """Computed money values for one line or an aggregate of lines."""

    net: Decimal
    tax: Decimal
    discount: Decimal
    additional_charges: Decimal
    total: Decimal


@dataclass(frozen=True)
class ReconciliationSummary:
    """Bank reconciliation balances for one payment form and window."""

    account_payment_form_id: int
    date_from: date
    date_to: date
    current_balance: Decimal
    previous_balance: Decimal
    reconciled_balance_as_of_date: Decimal
    transactions_in_range: tuple[Transaction, ...] = ()


@dataclass(frozen=True)
class BudgetExecutionLine:
    """Budgeted vs. executed amount for one concept."""

    concept_id: int
    concept_name: str
    budgeted: Decimal
    executed: Decimal
    variance: Decimal
    line_id: Optional[int] = None


@dataclass(frozen=True)
class CashflowConceptTotal:
    """Detail totals grouped by flow, concept group and concept."""

    flow_type: str
    group_name: str
    concept_name: str
    total: Decimal


@dataclass(frozen=True)
class InvariantViolation:
    """Active transaction whose payments/balance disagree with its total."""

    transaction_id: int
    total: Decimal
    payments: Decimal
    balance: Decimal
    reasons: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PaymentFormBalance:
    """Direction-signed balance of one bank account."""

    account_payment_form_id: int
    name: str
    balance: Decimal
    provider: Optional[str] = None


@dataclass(frozen=True)
class MonthlyFlow:
    """Income and expense magnitudes for one calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class DashboardData:
    """Ledger overview for the month containing ``as_of``.

    Per-concept and per-form totals are ``(label, amount)`` pairs in
    first-seen order; ``sales_by_day`` has one ``(day, amount)`` pair for
    every day of the month.
    """

    as_of: date
    bank_balances: tuple[PaymentFormBalance, ...] = ()
    sales_by_day: tuple[tuple[int, Decimal], ...] = ()
    expenses_by_concept: tuple[tuple[str, Decimal], ...] = ()
    incomes_by_concept: tuple[tuple[str, Decimal], ...] = ()
    income_expense_by_month: tuple[MonthlyFlow, ...] = ()
    internal_obligations_by_form: tuple[tuple[str, Decimal], ...] = ()
