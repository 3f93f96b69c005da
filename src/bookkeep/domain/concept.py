"""Concept domain service."""

from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Concept, PaymentDirection
from bookkeep.domain.errors import (
    NotFoundError,
    ValidationError,
    concept_not_found,
    missing_system_payment_concept,
)
from bookkeep.domain.normalization import to_decimal

CONCEPT_MODULES = ("products", "income", "expense", "groups", "payable")

SYSTEM_INCOMING_PAYMENT_NAME = "Incoming payment"
SYSTEM_OUTGOING_PAYMENT_NAME = "Outgoing payment"


class ConceptService:
    """Service for managing concepts."""

    def __init__(self, db: Database):
        """Initialize concept service.

        Args:
            db: Database instance
        """
        self.db = db

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
        tax_percentage: Decimal | int | str = 0,
        price: Decimal | int | str = 0,
        additional_charges: Decimal | int | str = 0,
    ) -> int:
        """Create a concept.

        Args:
            account_id: Tenant account ID
            name: Concept name
            parent_concept_id: Optional group concept this concept belongs to
            is_group: True for grouping concepts
            is_income: True for income concepts
            is_expense: True for expense concepts
            is_product: True for catalog products
            is_account_payable_concept: True for payable concepts
            tax_percentage: Default tax percentage for lines
            price: Default unit price
            additional_charges: Default additional charges

        Returns:
            Concept ID

        Raises:
            ValidationError: If the name is blank or the parent is not a group
                of the same tenant
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Concept name is required")
        if is_income and is_expense:
            raise ValidationError("A concept cannot be both income and expense")

        if parent_concept_id is not None:
            parent = self.db.get_concept(parent_concept_id)
            if parent is None or parent.account_id != account_id:
                raise ValidationError(f"Parent concept {parent_concept_id} not found")
            if not parent.is_group:
                raise ValidationError(f"Parent concept '{parent.name}' is not a group")

        return self.db.create_concept(
            account_id=account_id,
            name=name,
            parent_concept_id=parent_concept_id,
            is_group=is_group,
            is_income=is_income,
            is_expense=is_expense,
            is_product=is_product,
            is_account_payable_concept=is_account_payable_concept,
            tax_percentage=to_decimal(tax_percentage),
            price=to_decimal(price),
            additional_charges=to_decimal(additional_charges),
        )

    def get_concept(self, concept_id: int) -> Optional[Concept]:
        """Get concept by ID."""
        return self.db.get_concept(concept_id)

    def require_concept(self, account_id: int, concept_id: int) -> Concept:
        """Get a tenant's concept by ID or raise NotFoundError."""
        concept = self.db.get_concept(concept_id)
        if concept is None or concept.account_id != account_id:
            raise NotFoundError(concept_not_found(concept_id))
        return concept

    def list_concepts(self, account_id: int) -> list[Concept]:
        """List all concepts of a tenant."""
        return self.db.list_concepts(account_id)

    def list_concepts_by_module(self, account_id: int, module: str) -> list[Concept]:
        """List the concepts offered by a form module.

        Args:
            account_id: Tenant account ID
            module: One of products, income, expense, groups, payable

        Returns:
            List of matching concepts
        """
        if module not in CONCEPT_MODULES:
            raise ValidationError(
                f"Unknown concept module '{module}'. Expected one of: {', '.join(CONCEPT_MODULES)}"
            )

        def matches(c: Concept) -> bool:
            if module == "products":
                return c.is_product and not c.is_group
            if module == "income":
                return (
                    c.is_income
                    and not c.is_product
                    and not c.is_group
                    and not c.is_incoming_payment_concept
                )
            if module == "expense":
                return (
                    c.is_expense
                    and not c.is_group
                    and not c.is_outgoing_payment_concept
                    and not c.is_account_payable_concept
                )
            if module == "groups":
                return c.is_group
            return c.is_account_payable_concept and not c.is_group

        return [c for c in self.db.list_concepts(account_id) if matches(c)]

    def find_system_payment_concept(self, account_id: int, direction: str) -> Optional[Concept]:
        """Return the tenant's system concept for incoming/outgoing payments."""
        for concept in self.db.list_concepts(account_id):
            if direction == PaymentDirection.INCOMING and concept.is_incoming_payment_concept:
                return concept
            if direction == PaymentDirection.OUTGOING and concept.is_outgoing_payment_concept:
                return concept
        return None

    def require_system_payment_concept(self, account_id: int, direction: str) -> Concept:
        """Return the system payment concept or raise ValidationError."""
        concept = self.find_system_payment_concept(account_id, direction)
        if concept is None:
            raise ValidationError(missing_system_payment_concept(direction))
        return concept

    def ensure_system_payment_concepts(self, account_id: int) -> tuple[int, int]:
        """Create the incoming/outgoing payment concepts if missing.

        Returns:
            Tuple of (incoming concept ID, outgoing concept ID)
        """
        with self.db.transaction():
            incoming = self.find_system_payment_concept(account_id, PaymentDirection.INCOMING)
            if incoming is None:
                incoming_id = self.db.create_concept(
                    account_id=account_id,
                    name=SYSTEM_INCOMING_PAYMENT_NAME,
                    is_income=True,
                    is_incoming_payment_concept=True,
                    is_system=True,
                )
            else:
                incoming_id = incoming.id

            outgoing = self.find_system_payment_concept(account_id, PaymentDirection.OUTGOING)
            if outgoing is None:
                outgoing_id = self.db.create_concept(
                    account_id=account_id,
                    name=SYSTEM_OUTGOING_PAYMENT_NAME,
                    is_expense=True,
                    is_outgoing_payment_concept=True,
                    is_system=True,
                )
            else:
                outgoing_id = outgoing.id

        return incoming_id, outgoing_id
