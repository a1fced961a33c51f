"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Run against the in-browser store or the remote list store unchanged
2. Use in-memory storage for testing
3. Wrap any implementation with audit logging transparently
4. Keep pricing and workflow logic decoupled from persistence

Every save is an upsert by id: a record without an id is created,
a record with an id replaces the stored one.
"""

from abc import ABC, abstractmethod
from typing import Optional

from marketing_budget.models.audit import AuditEntityType, AuditEntry
from marketing_budget.models.budget import Budget, BudgetFilters, DataExport
from marketing_budget.models.catalogue import Schedule, Service, Suburb, Vendor


class BudgetRepositoryInterface(ABC):
    """
    Abstract interface for budget and reference data storage.

    Any storage implementation must implement these methods.
    """

    # ─── Vendors ─────────────────────────────────────────────

    @abstractmethod
    async def get_vendors(self) -> list[Vendor]:
        pass

    @abstractmethod
    async def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        pass

    @abstractmethod
    async def save_vendor(self, vendor: Vendor) -> Vendor:
        """
        Create or update a vendor.

        Returns:
            The stored vendor, with its id assigned

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_vendor(self, vendor_id: int) -> None:
        pass

    # ─── Services ────────────────────────────────────────────

    @abstractmethod
    async def get_services(self) -> list[Service]:
        """Active services only."""
        pass

    @abstractmethod
    async def get_all_services(self) -> list[Service]:
        """Every service, including soft-deleted ones."""
        pass

    @abstractmethod
    async def get_services_by_vendor(self, vendor_id: int) -> list[Service]:
        pass

    @abstractmethod
    async def get_services_by_category(self, category: str) -> list[Service]:
        pass

    @abstractmethod
    async def save_service(self, service: Service) -> Service:
        pass

    @abstractmethod
    async def delete_service(self, service_id: int) -> None:
        pass

    # ─── Suburbs ─────────────────────────────────────────────

    @abstractmethod
    async def get_suburbs(self) -> list[Suburb]:
        pass

    @abstractmethod
    async def get_suburbs_by_tier(self, tier: str) -> list[Suburb]:
        pass

    @abstractmethod
    async def save_suburb(self, suburb: Suburb) -> Suburb:
        pass

    @abstractmethod
    async def delete_suburb(self, suburb_id: int) -> None:
        pass

    # ─── Schedules ───────────────────────────────────────────

    @abstractmethod
    async def get_schedules(self) -> list[Schedule]:
        pass

    @abstractmethod
    async def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        pass

    @abstractmethod
    async def save_schedule(self, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    async def delete_schedule(self, schedule_id: int) -> None:
        pass

    # ─── Budgets ─────────────────────────────────────────────

    @abstractmethod
    async def get_budgets(self, filters: Optional[BudgetFilters] = None) -> list[Budget]:
        """
        List budgets, newest first.

        Args:
            filters: Optional status and address search
        """
        pass

    @abstractmethod
    async def get_budget(self, budget_id: int) -> Optional[Budget]:
        pass

    @abstractmethod
    async def save_budget(self, budget: Budget) -> Budget:
        pass

    @abstractmethod
    async def delete_budget(self, budget_id: int) -> None:
        pass

    # ─── Bulk operations ─────────────────────────────────────

    @abstractmethod
    async def clear_all_data(self) -> None:
        pass

    @abstractmethod
    async def seed_data(self, data: DataExport) -> None:
        """Load reference data (vendors, services, suburbs, schedules)."""
        pass

    @abstractmethod
    async def export_all(self) -> DataExport:
        pass

    @abstractmethod
    async def import_all(self, data: DataExport) -> None:
        """Replace everything with the contents of an export."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - entries are never modified once stored.
    """

    @abstractmethod
    async def log(self, entry: AuditEntry) -> AuditEntry:
        """
        Append an audit entry.

        Args:
            entry: The entry to store; its id is ignored

        Returns:
            The stored entry with its id assigned
        """
        pass

    @abstractmethod
    async def get_by_entity(
        self,
        entity_type: AuditEntityType,
        entity_id: int,
    ) -> list[AuditEntry]:
        """Entries for one entity, newest first."""
        pass

    @abstractmethod
    async def get_all(self, limit: Optional[int] = None) -> list[AuditEntry]:
        """All entries, newest first, optionally limited."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
