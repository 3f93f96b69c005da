"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Caller-supplied data violates a precondition."""


class InvalidAmountError(ValidationError):
    """Payment amount is zero, negative, or above the outstanding balance."""


class NotFoundError(DomainError):
    """Referenced entity does not exist or is not visible to the tenant."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PersistenceError(DomainError):
    """The underlying store call failed; the unit of work was rolled back."""


def account_not_found(account_id: int) -> str:
    """Return message for missing tenant account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for a transaction missing or outside the tenant."""
    return f"Transaction {transaction_id} not found"


def concept_not_found(concept_id: int) -> str:
    """Return message for missing concept by ID."""
    return f"Concept {concept_id} not found"


def payment_form_not_found(form_id: int) -> str:
    """Return message for missing account payment form."""
    return f"Account payment form {form_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def missing_system_payment_concept(direction: str) -> str:
    """Return message when the tenant has no system payment concept."""
    return f"No system {direction} payment concept is configured for this account"


def payment_exceeds_balance(amount: Decimal, balance: Decimal) -> str:
    """Return message for a payment outside (0, balance]."""
    return f"Payment amount {amount} must be greater than 0 and not exceed the current balance {balance}"


def total_below_payments(total: Decimal, payments: Decimal) -> str:
    """Return message when an obligation total drops under its payments."""
    return f"Total cannot be lower than payments already registered ({total} < {payments})"


def payment_detail_mismatch(detail_total: Decimal, amount: Decimal) -> str:
    """Return message when a payment line disagrees with the payment amount."""
    return f"Payment detail total {detail_total} does not match the payment amount {amount}"
