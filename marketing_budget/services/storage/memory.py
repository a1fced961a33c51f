"""
In-Memory Storage Implementation

Reference implementation of the storage interfaces, kept in process
memory. Used by the test suite and for local development.

TRADEOFFS:
- Nothing survives a restart
- No cross-process sharing
- Filtering happens in Python

Records are copied on the way in and on the way out, so callers can
never mutate stored state by holding on to a returned object.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from marketing_budget.models.audit import AuditEntityType, AuditEntry
from marketing_budget.models.budget import Budget, BudgetFilters, BudgetStatus, DataExport
from marketing_budget.models.catalogue import Schedule, Service, Suburb, Vendor, utcnow
from marketing_budget.services.storage.interface import (
    AuditStorageInterface,
    BudgetRepositoryInterface,
    NotFoundError,
)


ModelT = TypeVar("ModelT", bound=BaseModel)


class _Table(Generic[ModelT]):
    """A keyed collection of models with auto-increment ids."""

    def __init__(self):
        self._rows: dict[int, ModelT] = {}
        self._next_id = 1

    def upsert(self, record: ModelT) -> ModelT:
        if record.id is None:
            record = record.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, record.id + 1)
        self._rows[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    def get(self, record_id: int) -> Optional[ModelT]:
        record = self._rows.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def all(self) -> list[ModelT]:
        return [record.model_copy(deep=True) for record in self._rows.values()]

    def update_fields(self, record_id: int, **fields) -> None:
        if record_id not in self._rows:
            raise NotFoundError(f"No record with id {record_id}")
        self._rows[record_id] = self._rows[record_id].model_copy(update=fields)

    def delete(self, record_id: int) -> None:
        self._rows.pop(record_id, None)

    def clear(self) -> None:
        self._rows.clear()
        self._next_id = 1


class InMemoryBudgetRepository(BudgetRepositoryInterface):
    """
    Budget repository backed by dictionaries.

    Mirrors the production stores: services and schedules are soft-deleted,
    budgets get their timestamps stamped on save.
    """

    def __init__(self):
        self._vendors: _Table[Vendor] = _Table()
        self._services: _Table[Service] = _Table()
        self._suburbs: _Table[Suburb] = _Table()
        self._schedules: _Table[Schedule] = _Table()
        self._budgets: _Table[Budget] = _Table()

    # ─── Vendors ─────────────────────────────────────────────

    async def get_vendors(self) -> list[Vendor]:
        return self._vendors.all()

    async def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        return self._vendors.get(vendor_id)

    async def save_vendor(self, vendor: Vendor) -> Vendor:
        return self._vendors.upsert(vendor)

    async def delete_vendor(self, vendor_id: int) -> None:
        self._vendors.delete(vendor_id)

    # ─── Services ────────────────────────────────────────────

    async def get_services(self) -> list[Service]:
        return [s for s in self._services.all() if s.is_active]

    async def get_all_services(self) -> list[Service]:
        return self._services.all()

    async def get_services_by_vendor(self, vendor_id: int) -> list[Service]:
        return [s for s in await self.get_services() if s.vendor_id == vendor_id]

    async def get_services_by_category(self, category: str) -> list[Service]:
        return [s for s in await self.get_services() if s.category.value == category]

    async def save_service(self, service: Service) -> Service:
        return self._services.upsert(service)

    async def delete_service(self, service_id: int) -> None:
        # Soft delete: line items keep resolving names for old budgets
        self._services.update_fields(service_id, is_active=False)

    # ─── Suburbs ─────────────────────────────────────────────

    async def get_suburbs(self) -> list[Suburb]:
        return sorted(self._suburbs.all(), key=lambda s: s.name)

    async def get_suburbs_by_tier(self, tier: str) -> list[Suburb]:
        return [s for s in await self.get_suburbs() if s.pricing_tier.value == tier]

    async def save_suburb(self, suburb: Suburb) -> Suburb:
        return self._suburbs.upsert(suburb)

    async def delete_suburb(self, suburb_id: int) -> None:
        self._suburbs.delete(suburb_id)

    # ─── Schedules ───────────────────────────────────────────

    async def get_schedules(self) -> list[Schedule]:
        return [s for s in self._schedules.all() if s.is_active]

    async def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        return self._schedules.get(schedule_id)

    async def save_schedule(self, schedule: Schedule) -> Schedule:
        now = utcnow()
        if schedule.id is None:
            schedule = schedule.model_copy(update={
                "created_at": now, "updated_at": now, "is_active": True,
            })
        else:
            schedule = schedule.model_copy(update={"updated_at": now})
        return self._schedules.upsert(schedule)

    async def delete_schedule(self, schedule_id: int) -> None:
        self._schedules.update_fields(schedule_id, is_active=False)

    # ─── Budgets ─────────────────────────────────────────────

    async def get_budgets(self, filters: Optional[BudgetFilters] = None) -> list[Budget]:
        budgets = sorted(self._budgets.all(), key=lambda b: b.created_at, reverse=True)
        if filters is None:
            return budgets

        if filters.status is not None:
            budgets = [b for b in budgets if b.status == filters.status]
        if filters.search:
            needle = filters.search.lower()
            budgets = [b for b in budgets if needle in b.property_address.lower()]
        return budgets

    async def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self._budgets.get(budget_id)

    async def save_budget(self, budget: Budget) -> Budget:
        now = utcnow()
        if budget.id is None:
            budget = budget.model_copy(update={
                "created_at": now,
                "updated_at": now,
                "status": budget.status or BudgetStatus.DRAFT,
            })
        else:
            budget = budget.model_copy(update={"updated_at": now})
        return self._budgets.upsert(budget)

    async def delete_budget(self, budget_id: int) -> None:
        self._budgets.delete(budget_id)

    # ─── Bulk operations ─────────────────────────────────────

    async def clear_all_data(self) -> None:
        for table in (self._vendors, self._services, self._suburbs,
                      self._schedules, self._budgets):
            table.clear()

    async def seed_data(self, data: DataExport) -> None:
        for vendor in data.vendors:
            self._vendors.upsert(vendor)
        for service in data.services:
            self._services.upsert(service)
        for suburb in data.suburbs:
            self._suburbs.upsert(suburb)
        for schedule in data.schedules:
            self._schedules.upsert(schedule)

    async def export_all(self) -> DataExport:
        return DataExport(
            vendors=self._vendors.all(),
            services=self._services.all(),
            suburbs=self._suburbs.all(),
            schedules=self._schedules.all(),
            budgets=self._budgets.all(),
        )

    async def import_all(self, data: DataExport) -> None:
        await self.clear_all_data()
        await self.seed_data(data)
        for budget in data.budgets:
            self._budgets.upsert(budget)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._entries: list[AuditEntry] = []
        self._next_id = 1

    async def log(self, entry: AuditEntry) -> AuditEntry:
        stored = entry.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self._entries.append(stored)
        return stored

    async def get_by_entity(
        self,
        entity_type: AuditEntityType,
        entity_id: int,
    ) -> list[AuditEntry]:
        return [
            entry for entry in reversed(self._entries)
            if entry.entity_type == entity_type and entry.entity_id == entity_id
        ]

    async def get_all(self, limit: Optional[int] = None) -> list[AuditEntry]:
        newest_first = list(reversed(self._entries))
        if limit is not None:
            return newest_first[:limit]
        return newest_first

    async def clear(self) -> None:
        self._entries.clear()
