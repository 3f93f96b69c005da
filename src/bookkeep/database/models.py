"""SQLAlchemy models for bookkeep database."""

from datetime import datetime, UTC

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(14, 2)
PERCENT = Numeric(7, 4)


class Account(Base):
    """Tenant account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Concept(Base):
    """Concept (chart-of-accounts category) model with optional group parent."""

    __tablename__ = "concepts"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    parent_concept_id = Column(Integer, ForeignKey("concepts.id"), nullable=True)
    is_group = Column(Boolean, default=False, nullable=False)
    is_income = Column(Boolean, default=False, nullable=False)
    is_expense = Column(Boolean, default=False, nullable=False)
    is_product = Column(Boolean, default=False, nullable=False)
    is_account_payable_concept = Column(Boolean, default=False, nullable=False)
    is_incoming_payment_concept = Column(Boolean, default=False, nullable=False)
    is_outgoing_payment_concept = Column(Boolean, default=False, nullable=False)
    is_system = Column(Boolean, default=False, nullable=False)
    tax_percentage = Column(PERCENT, default=0, nullable=False)
    price = Column(MONEY, default=0, nullable=False)
    additional_charges = Column(MONEY, default=0, nullable=False)

    parent = relationship("Concept", remote_side=[id], backref="children")


class AccountPaymentForm(Base):
    """Cashbox, bank account or credit card model."""

    __tablename__ = "account_payment_forms"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    provider = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class PaymentMethod(Base):
    """Payment method model."""

    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class Currency(Base):
    """Currency model."""

    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    is_local = Column(Boolean, default=False, nullable=False)


class Person(Base):
    """Client/provider model."""

    __tablename__ = "persons"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    is_client = Column(Boolean, default=False, nullable=False)
    is_provider = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class Budget(Base):
    """Budget header model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    period_type = Column(String, nullable=True)
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by_id = Column(String, nullable=True)

    lines = relationship("BudgetLine", back_populates="budget", cascade="all, delete-orphan")


class BudgetLine(Base):
    """Budget line model."""

    __tablename__ = "budget_lines"

    id = Column(Integer, primary_key=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False, index=True)
    concept_id = Column(Integer, ForeignKey("concepts.id"), nullable=False)
    amount = Column(MONEY, default=0, nullable=False)
    created_by_id = Column(String, nullable=True)

    budget = relationship("Budget", back_populates="lines")
    concept = relationship("Concept")


class Transaction(Base):
    """Ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    type = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    name = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)
    status = Column(Integer, default=1, nullable=False)
    person_id = Column(Integer, ForeignKey("persons.id"), nullable=True)
    employee_id = Column(Integer, nullable=True)

    net = Column(MONEY, default=0, nullable=False)
    discounts = Column(MONEY, default=0, nullable=False)
    taxes = Column(MONEY, default=0, nullable=False)
    additional_charges = Column(MONEY, default=0, nullable=False)
    total = Column(MONEY, nullable=False)
    payments = Column(MONEY, default=0, nullable=False)
    balance = Column(MONEY, default=0, nullable=False)

    is_account_payable = Column(Boolean, default=False, nullable=False)
    is_account_receivable = Column(Boolean, default=False, nullable=False)
    is_incoming_payment = Column(Boolean, default=False, nullable=False)
    is_outcoming_payment = Column(Boolean, default=False, nullable=False)
    is_internal_obligation = Column(Boolean, default=False, nullable=False)
    is_internal_transfer = Column(Boolean, default=False, nullable=False)
    is_deposit = Column(Boolean, default=False, nullable=False)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    source_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    account_payment_form_id = Column(Integer, ForeignKey("account_payment_forms.id"), nullable=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=True)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    created_by_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    details = relationship(
        "TransactionDetail",
        back_populates="transaction",
        foreign_keys="TransactionDetail.transaction_id",
        cascade="all, delete-orphan",
    )
    person = relationship("Person")
    project = relationship("Project")
    account_payment_form = relationship("AccountPaymentForm")


class TransactionDetail(Base):
    """Transaction line model."""

    __tablename__ = "transaction_details"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    concept_id = Column(Integer, ForeignKey("concepts.id"), nullable=False, index=True)
    quantity = Column(Numeric(14, 4), default=1, nullable=False)
    price = Column(MONEY, default=0, nullable=False)
    net = Column(MONEY, default=0, nullable=False)
    tax_percentage = Column(PERCENT, default=0, nullable=False)
    tax = Column(MONEY, default=0, nullable=False)
    discount_percentage = Column(PERCENT, default=0, nullable=False)
    discount = Column(MONEY, default=0, nullable=False)
    total = Column(MONEY, nullable=False)
    additional_charges = Column(MONEY, default=0, nullable=False)
    seller_id = Column(Integer, nullable=True)
    transaction_paid_id = Column(Integer, ForeignKey("transactions.id"), nullable=True, index=True)
    created_by_id = Column(String, nullable=True)

    # Relationships
    transaction = relationship(
        "Transaction", back_populates="details", foreign_keys=[transaction_id]
    )
    concept = relationship("Concept")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
