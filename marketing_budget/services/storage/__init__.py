"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for data storage.
Production backends implement the same interfaces outside this package.
"""

from marketing_budget.services.storage.interface import (
    AuditStorageInterface,
    BudgetRepositoryInterface,
    NotFoundError,
    StorageError,
)
from marketing_budget.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBudgetRepository,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BudgetRepositoryInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryBudgetRepository",
]
