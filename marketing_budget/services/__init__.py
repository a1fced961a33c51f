"""Services package."""

from marketing_budget.services.storage import (
    AuditStorageInterface,
    BudgetRepositoryInterface,
    InMemoryAuditStorage,
    InMemoryBudgetRepository,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "BudgetRepositoryInterface",
    "InMemoryAuditStorage",
    "InMemoryBudgetRepository",
    "NotFoundError",
    "StorageError",
]
