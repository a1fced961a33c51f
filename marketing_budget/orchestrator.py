"""
Budget Editor Orchestrator

This module ties together pricing, workflow and audited storage and
defines the end-to-end flows a budget editor drives:
1. Start a budget (default values, or from a schedule template)
2. Edit property context (size / suburb) and re-price line items
3. Save (through the audited repository)
4. Move through the approval workflow
5. Delete budgets and maintain the reference catalogue

DESIGN DECISION: The orchestrator enforces the boundaries:
- Transitions are checked for permission and legality before validation
- Nothing is saved when approval validation fails
- Every save goes through the repository it was given, normally the
  audited one, so every step is audited
"""

from typing import Optional, Union

import structlog

from marketing_budget.audit import AuditedBudgetRepository
from marketing_budget.audit.logger import AuditFailureHandler
from marketing_budget.models.budget import (
    Budget,
    BudgetStatus,
    DataExport,
    ValidationResult,
)
from marketing_budget.models.catalogue import (
    PropertySize,
    Schedule,
    Service,
    Suburb,
    Vendor,
    utcnow,
)
from marketing_budget.pricing import (
    create_default_budget,
    line_items_from_schedule,
    resolve_line_items,
    variant_context_for,
)
from marketing_budget.services.storage import (
    AuditStorageInterface,
    BudgetRepositoryInterface,
    InMemoryAuditStorage,
    InMemoryBudgetRepository,
    NotFoundError,
)
from marketing_budget.validation import (
    PermissionDeniedError,
    UserRole,
    can_create_budget,
    can_delete_budget,
    can_duplicate_budget,
    can_edit_budget,
    can_manage_reference_data,
    can_transition_budget,
    validate_transition,
)


ReferenceRecord = Union[Vendor, Service, Suburb, Schedule]

# Marks an argument the caller left out, where None is a meaningful value
UNCHANGED = object()


class BudgetEditorFlow:
    """
    Orchestrates editing a single budget.

    Flow:
    1. New / apply schedule -> line items priced from the catalogue
    2. Change context -> non-overridden items re-priced
    3. Save -> persisted and audited
    4. Transition -> permission, legality, validation, then save
    5. Delete / reference data -> role checked, then written

    Pricing changes are returned as new Budget objects and only
    persisted by an explicit save.
    """

    def __init__(
        self,
        repository: BudgetRepositoryInterface,
        role: UserRole = UserRole.ADMIN,
    ):
        self._repository = repository
        self._role = UserRole(role)
        self._logger = structlog.get_logger()

    @property
    def role(self) -> UserRole:
        return self._role

    def _require(self, allowed: bool, action: str) -> None:
        if not allowed:
            raise PermissionDeniedError(self._role.value, action)

    async def _load_budget(self, budget_id: int) -> Budget:
        budget = await self._repository.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(f"Budget {budget_id} not found")
        return budget

    def new_budget(self, vendor_id: Optional[int] = None) -> Budget:
        """A fresh draft, not yet saved."""
        self._require(can_create_budget(self._role), "create budgets")
        return create_default_budget(vendor_id)

    async def apply_schedule(self, budget: Budget, schedule_id: int) -> Budget:
        """
        Replace a budget's line items with a schedule template's.

        The budget takes the schedule's property profile; the suburb
        tier still comes from the budget's own suburb.
        """
        schedule = await self._repository.get_schedule(schedule_id)
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")

        services = await self._repository.get_all_services()
        suburbs = await self._repository.get_suburbs()

        updated = budget.model_copy(update={
            "schedule_id": schedule.id,
            "schedule_name": schedule.name,
            "property_type": schedule.property_type,
            "property_size": schedule.property_size,
            "tier": schedule.tier,
            "vendor_id": budget.vendor_id or schedule.default_vendor_id,
        })
        context = variant_context_for(updated, suburbs)

        return updated.model_copy(update={
            "line_items": line_items_from_schedule(schedule, services, context),
        })

    async def change_context(
        self,
        budget: Budget,
        property_size: Optional[PropertySize] = None,
        suburb_id: Union[int, None, object] = UNCHANGED,
    ) -> Budget:
        """
        Apply a new property size and/or suburb and re-price line items.

        Pass suburb_id=None to clear the suburb; leave it out to keep it.
        """
        updates = {}
        if property_size is not None:
            updates["property_size"] = PropertySize(property_size)
        if suburb_id is not UNCHANGED:
            updates["suburb_id"] = suburb_id
        updated = budget.model_copy(update=updates)

        services = await self._repository.get_all_services()
        suburbs = await self._repository.get_suburbs()
        context = variant_context_for(updated, suburbs)

        return updated.model_copy(update={
            "line_items": resolve_line_items(updated.line_items, services, context),
        })

    async def save(self, budget: Budget) -> Budget:
        """
        Persist a budget.

        Edit permission is checked against the stored status, not the
        one on the object being saved.
        """
        if budget.id is None:
            self._require(can_create_budget(self._role), "create budgets")
        else:
            stored = await self._repository.get_budget(budget.id)
            status = stored.status if stored is not None else budget.status
            self._require(can_edit_budget(self._role, status), f"edit {status.value} budgets")

        return await self._repository.save_budget(budget)

    async def transition(
        self,
        budget_id: int,
        to_status: BudgetStatus,
    ) -> tuple[Budget, ValidationResult]:
        """
        Move a stored budget to a new status.

        Returns:
            (budget, result) - the saved budget when result.is_valid,
            otherwise the unchanged stored budget and the failed rules.

        Raises:
            PermissionDeniedError: The role cannot perform transitions
            NotFoundError: No budget with this id
            IllegalTransitionError: The move is not in the workflow graph
        """
        self._require(can_transition_budget(self._role), "change budget status")
        to_status = BudgetStatus(to_status)
        budget = await self._load_budget(budget_id)

        result = validate_transition(budget, budget.status, to_status)
        if not result.is_valid:
            self._logger.warning(
                "budget_transition_blocked",
                budget_id=budget_id,
                from_status=budget.status.value,
                to_status=to_status.value,
                rules=result.rules,
            )
            return budget, result

        saved = await self._repository.save_budget(
            budget.model_copy(update={"status": to_status})
        )
        self._logger.info(
            "budget_transitioned",
            budget_id=budget_id,
            from_status=budget.status.value,
            to_status=to_status.value,
        )
        return saved, result

    async def duplicate(self, budget_id: int) -> Budget:
        """Save a copy of a budget as a new draft."""
        self._require(can_duplicate_budget(self._role), "duplicate budgets")
        source = await self._load_budget(budget_id)

        now = utcnow()
        copy = source.model_copy(deep=True, update={
            "id": None,
            "status": BudgetStatus.DRAFT,
            "created_at": now,
            "updated_at": now,
        })
        return await self._repository.save_budget(copy)

    async def delete(self, budget_id: int) -> None:
        """
        Remove a stored budget.

        Raises:
            PermissionDeniedError: The role cannot delete budgets
            NotFoundError: No budget with this id
        """
        self._require(can_delete_budget(self._role), "delete budgets")
        budget = await self._load_budget(budget_id)

        await self._repository.delete_budget(budget_id)
        self._logger.info(
            "budget_deleted",
            budget_id=budget_id,
            status=budget.status.value,
        )

    async def save_reference(self, record: ReferenceRecord) -> ReferenceRecord:
        """Persist a vendor, service, suburb or schedule. Admin only."""
        self._require(can_manage_reference_data(self._role), "manage reference data")

        if isinstance(record, Vendor):
            return await self._repository.save_vendor(record)
        if isinstance(record, Service):
            return await self._repository.save_service(record)
        if isinstance(record, Suburb):
            return await self._repository.save_suburb(record)
        if isinstance(record, Schedule):
            return await self._repository.save_schedule(record)
        raise TypeError(f"Not a reference record: {type(record).__name__}")

    async def seed_reference_data(self, data: DataExport) -> None:
        """Load a catalogue in bulk. Admin only."""
        self._require(can_manage_reference_data(self._role), "manage reference data")
        await self._repository.seed_data(data)
        self._logger.info(
            "reference_data_seeded",
            services=len(data.services),
            vendors=len(data.vendors),
            suburbs=len(data.suburbs),
            schedules=len(data.schedules),
        )


def create_app_components(
    user_name: Optional[str] = None,
    role: UserRole = UserRole.ADMIN,
    inner: Optional[BudgetRepositoryInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    on_audit_failure: Optional[AuditFailureHandler] = None,
) -> tuple[BudgetEditorFlow, AuditedBudgetRepository, AuditStorageInterface]:
    """
    Factory function to create all application components.

    Args:
        user_name: Acting user recorded on audit entries
        role: Role the editor flow enforces
        inner: Persistence backend. Defaults to in-memory storage.
        audit_storage: Audit sink. Defaults to in-memory storage.
        on_audit_failure: Called when an audit entry cannot be stored

    Returns:
        (editor_flow, audited_repository, audit_storage)
    """
    inner = inner or InMemoryBudgetRepository()
    audit_storage = audit_storage or InMemoryAuditStorage()

    repository = AuditedBudgetRepository(
        inner,
        audit_storage,
        user_name=user_name,
        on_audit_failure=on_audit_failure,
    )
    flow = BudgetEditorFlow(repository, role=role)

    return flow, repository, audit_storage
