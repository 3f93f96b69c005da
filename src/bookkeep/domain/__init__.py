"""Domain layer for bookkeep application.

Services are resolved lazily: the database layer imports
``bookkeep.domain.entities`` while the services import the database layer.
"""

_SERVICES = {
    "AccountService": "bookkeep.domain.account",
    "BudgetService": "bookkeep.domain.budget",
    "CatalogService": "bookkeep.domain.catalog",
    "ConceptService": "bookkeep.domain.concept",
    "MovementService": "bookkeep.domain.movement",
    "ObligationService": "bookkeep.domain.obligation",
    "PaymentService": "bookkeep.domain.payment",
    "ProjectService": "bookkeep.domain.project",
    "ReconciliationService": "bookkeep.domain.reconciliation",
    "ReportService": "bookkeep.domain.report",
    "TransactionService": "bookkeep.domain.transaction",
}

__all__ = sorted(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
