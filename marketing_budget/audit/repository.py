"""
Audited Budget Repository

Decorator that adds audit logging around any BudgetRepositoryInterface
implementation. It is itself a BudgetRepositoryInterface, so callers
swap it in without noticing.

Every write (save, delete, seed, import, clear) is logged; reads are
delegated directly with no overhead.

ORDERING per write:
1. Read the prior version (before the write, never after)
2. Delegate the write to the inner repository
3. Diff, classify, log

If step 2 raises, the error propagates and nothing is logged.
If step 3 fails, the write stands; see AuditLogger.
"""

from typing import Optional

from pydantic import BaseModel

from marketing_budget.audit.diff import diff_changes, snapshot, summarise_changes
from marketing_budget.audit.logger import AuditFailureHandler, AuditLogger
from marketing_budget.config import get_settings
from marketing_budget.models.audit import (
    AuditEntityType,
    AuditEntry,
    AuditEntryBuilder,
    describe_entity,
)
from marketing_budget.models.budget import Budget, BudgetFilters, DataExport
from marketing_budget.models.catalogue import Schedule, Service, Suburb, Vendor
from marketing_budget.services.storage import (
    AuditStorageInterface,
    BudgetRepositoryInterface,
)


def _find_by_id(records: list, record_id: Optional[int]):
    if record_id is None:
        return None
    return next((record for record in records if record.id == record_id), None)


class AuditedBudgetRepository(BudgetRepositoryInterface):
    """
    Wraps a repository and an audit sink.

    The acting user is fixed when the decorator is built; every entry it
    writes carries that name.
    """

    def __init__(
        self,
        inner: BudgetRepositoryInterface,
        audit_storage: AuditStorageInterface,
        user_name: Optional[str] = None,
        on_audit_failure: Optional[AuditFailureHandler] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            inner: The repository doing the actual persistence
            audit_storage: Where audit entries are written
            user_name: Display name of the acting user
            on_audit_failure: Called when an entry cannot be stored
            audit_logger: Pre-built logger (overrides audit_storage/on_audit_failure)
        """
        settings = get_settings().audit

        self._inner = inner
        self._audit = audit_logger or AuditLogger(audit_storage, on_failure=on_audit_failure)
        self._user_name = user_name or settings.default_user
        self._max_fields = settings.summary_max_fields

    @property
    def user_name(self) -> str:
        return self._user_name

    # ─── Private helpers ─────────────────────────────────────

    def _save_entry(
        self,
        entity_type: AuditEntityType,
        before: Optional[BaseModel],
        saved: BaseModel,
        label: str,
        track_status: bool,
    ) -> AuditEntry:
        after = snapshot(saved)

        if before is None:
            return AuditEntryBuilder.created(
                entity_type, saved.id, label, self._user_name, after,
            )

        before_snapshot = snapshot(before)
        changes = diff_changes(before, saved)

        if track_status and [change.field for change in changes] == ["status"]:
            return AuditEntryBuilder.status_changed(
                saved.id,
                label,
                self._user_name,
                from_status=before_snapshot["status"],
                to_status=after["status"],
                before=before_snapshot,
                after=after,
            )

        return AuditEntryBuilder.updated(
            entity_type,
            saved.id,
            label,
            self._user_name,
            summary=summarise_changes(
                f"Updated {describe_entity(entity_type, label)}",
                changes,
                self._max_fields,
            ),
            before=before_snapshot,
            after=after,
        )

    async def _record_save(
        self,
        entity_type: AuditEntityType,
        before: Optional[BaseModel],
        saved: BaseModel,
        label: str,
        track_status: bool = False,
    ) -> None:
        await self._audit.record(
            lambda: self._save_entry(entity_type, before, saved, label, track_status),
            entity_type=entity_type.value,
            entity_id=saved.id,
        )

    async def _record_delete(
        self,
        entity_type: AuditEntityType,
        entity_id: int,
        label: Optional[str],
    ) -> None:
        await self._audit.record(
            lambda: AuditEntryBuilder.deleted(entity_type, entity_id, label, self._user_name),
            entity_type=entity_type.value,
            entity_id=entity_id,
        )

    # ─── Vendors ─────────────────────────────────────────────

    async def get_vendors(self) -> list[Vendor]:
        return await self._inner.get_vendors()

    async def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        return await self._inner.get_vendor(vendor_id)

    async def save_vendor(self, vendor: Vendor) -> Vendor:
        before = await self._inner.get_vendor(vendor.id) if vendor.id is not None else None
        saved = await self._inner.save_vendor(vendor)
        await self._record_save(AuditEntityType.VENDOR, before, saved, saved.name)
        return saved

    async def delete_vendor(self, vendor_id: int) -> None:
        before = await self._inner.get_vendor(vendor_id)
        await self._inner.delete_vendor(vendor_id)
        await self._record_delete(
            AuditEntityType.VENDOR, vendor_id, before.name if before else None,
        )

    # ─── Services ────────────────────────────────────────────

    async def get_services(self) -> list[Service]:
        return await self._inner.get_services()

    async def get_all_services(self) -> list[Service]:
        return await self._inner.get_all_services()

    async def get_services_by_vendor(self, vendor_id: int) -> list[Service]:
        return await self._inner.get_services_by_vendor(vendor_id)

    async def get_services_by_category(self, category: str) -> list[Service]:
        return await self._inner.get_services_by_category(category)

    async def save_service(self, service: Service) -> Service:
        before = None
        if service.id is not None:
            before = _find_by_id(await self._inner.get_all_services(), service.id)
        saved = await self._inner.save_service(service)
        await self._record_save(AuditEntityType.SERVICE, before, saved, saved.name)
        return saved

    async def delete_service(self, service_id: int) -> None:
        before = _find_by_id(await self._inner.get_all_services(), service_id)
        await self._inner.delete_service(service_id)
        await self._record_delete(
            AuditEntityType.SERVICE, service_id, before.name if before else None,
        )

    # ─── Suburbs ─────────────────────────────────────────────

    async def get_suburbs(self) -> list[Suburb]:
        return await self._inner.get_suburbs()

    async def get_suburbs_by_tier(self, tier: str) -> list[Suburb]:
        return await self._inner.get_suburbs_by_tier(tier)

    async def save_suburb(self, suburb: Suburb) -> Suburb:
        before = None
        if suburb.id is not None:
            before = _find_by_id(await self._inner.get_suburbs(), suburb.id)
        saved = await self._inner.save_suburb(suburb)
        await self._record_save(AuditEntityType.SUBURB, before, saved, saved.name)
        return saved

    async def delete_suburb(self, suburb_id: int) -> None:
        before = _find_by_id(await self._inner.get_suburbs(), suburb_id)
        await self._inner.delete_suburb(suburb_id)
        await self._record_delete(
            AuditEntityType.SUBURB, suburb_id, before.name if before else None,
        )

    # ─── Schedules ───────────────────────────────────────────

    async def get_schedules(self) -> list[Schedule]:
        return await self._inner.get_schedules()

    async def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        return await self._inner.get_schedule(schedule_id)

    async def save_schedule(self, schedule: Schedule) -> Schedule:
        before = None
        if schedule.id is not None:
            before = await self._inner.get_schedule(schedule.id)
        saved = await self._inner.save_schedule(schedule)
        await self._record_save(AuditEntityType.SCHEDULE, before, saved, saved.name)
        return saved

    async def delete_schedule(self, schedule_id: int) -> None:
        before = await self._inner.get_schedule(schedule_id)
        await self._inner.delete_schedule(schedule_id)
        await self._record_delete(
            AuditEntityType.SCHEDULE, schedule_id, before.name if before else None,
        )

    # ─── Budgets ─────────────────────────────────────────────

    async def get_budgets(self, filters: Optional[BudgetFilters] = None) -> list[Budget]:
        return await self._inner.get_budgets(filters)

    async def get_budget(self, budget_id: int) -> Optional[Budget]:
        return await self._inner.get_budget(budget_id)

    async def save_budget(self, budget: Budget) -> Budget:
        before = await self._inner.get_budget(budget.id) if budget.id is not None else None
        saved = await self._inner.save_budget(budget)
        await self._record_save(
            AuditEntityType.BUDGET,
            before,
            saved,
            saved.property_address or f"#{saved.id}",
            track_status=True,
        )
        return saved

    async def delete_budget(self, budget_id: int) -> None:
        before = await self._inner.get_budget(budget_id)
        await self._inner.delete_budget(budget_id)
        await self._record_delete(
            AuditEntityType.BUDGET,
            budget_id,
            before.property_address if before else None,
        )

    # ─── Bulk operations ─────────────────────────────────────

    async def clear_all_data(self) -> None:
        await self._inner.clear_all_data()
        await self._audit.clear()

    async def seed_data(self, data: DataExport) -> None:
        await self._inner.seed_data(data)
        counts = {
            "vendors": len(data.vendors),
            "services": len(data.services),
            "suburbs": len(data.suburbs),
            "schedules": len(data.schedules),
        }
        await self._audit.record(
            lambda: AuditEntryBuilder.seeded(self._user_name, counts),
            action="seed",
        )

    async def export_all(self) -> DataExport:
        return await self._inner.export_all()

    async def import_all(self, data: DataExport) -> None:
        await self._inner.import_all(data)
        counts = {
            "budgets": len(data.budgets),
            "vendors": len(data.vendors),
            "services": len(data.services),
        }
        await self._audit.record(
            lambda: AuditEntryBuilder.imported(self._user_name, counts),
            action="import",
        )
