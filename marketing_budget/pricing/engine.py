"""
Budget Pricing Engine

Pure functions for line item prices, catalogue re-resolution and
budget totals. No side effects: every function returns new values.

DESIGN DECISION: Manual overrides are sacred.
Re-resolving against a new context refreshes names and schedule
prices but never touches override_price or is_overridden.
"""

from decimal import Decimal
from typing import Iterable, Optional

from marketing_budget.models.budget import (
    Budget,
    BudgetLineItem,
    BudgetStatus,
    BudgetSummary,
    VariantContext,
)
from marketing_budget.models.catalogue import (
    BudgetTier,
    PropertySize,
    PropertyType,
    Schedule,
    Service,
    Suburb,
    utcnow,
)
from marketing_budget.pricing.variants import (
    context_drives_selection,
    resolve_variant,
)


ZERO = Decimal("0")


def line_item_price(item: BudgetLineItem) -> Decimal:
    """
    Effective price of a line item from its stored prices alone.

    Uses the override price if set, otherwise the schedule price.
    """
    if item.is_overridden and item.override_price is not None:
        return item.override_price
    return item.schedule_price if item.schedule_price is not None else ZERO


def effective_price(
    item: BudgetLineItem,
    service: Optional[Service],
    context: Optional[VariantContext] = None,
) -> Decimal:
    """
    Effective price of a line item against the live catalogue.

    Args:
        item: The budget line item
        service: The catalogue service it references, or None if it is gone
        context: Current property context

    Returns:
        The override price for overridden items; otherwise the resolved
        variant's base price, falling back to the stored schedule price
        when the service can no longer be found.
    """
    if item.is_overridden and item.override_price is not None:
        return item.override_price
    if service is None:
        return item.schedule_price if item.schedule_price is not None else ZERO
    return resolve_variant(service, context, item.variant_id).base_price


def _catalogue_by_id(services: Iterable[Service]) -> dict[int, Service]:
    return {service.id: service for service in services if service.id is not None}


def resolve_line_items(
    items: list[BudgetLineItem],
    services: list[Service],
    context: Optional[VariantContext] = None,
) -> list[BudgetLineItem]:
    """
    Re-resolve line items against the current context and catalogue.

    Manual and single-variant services keep the stored variant; services
    that select by size or tier follow the context when it supplies the
    value. Items whose service is missing are returned unchanged.
    Idempotent.
    """
    catalogue = _catalogue_by_id(services)
    resolved = []

    for item in items:
        service = catalogue.get(item.service_id)
        if service is None:
            resolved.append(item.model_copy())
            continue

        pinned = None if context_drives_selection(service, context) else item.variant_id
        variant = resolve_variant(service, context, pinned)

        resolved.append(item.model_copy(update={
            "service_name": service.name,
            "variant_id": variant.id,
            "variant_name": variant.name,
            "schedule_price": item.schedule_price if item.is_overridden else variant.base_price,
        }))

    return resolved


def calculate_budget_summary(items: list[BudgetLineItem]) -> BudgetSummary:
    """
    Totals for a list of line items.

    Only selected items count toward the total, overridden or not.
    Prices are GST inclusive, so the total is a plain sum.
    """
    selected = [item for item in items if item.is_selected]
    return BudgetSummary(
        total=sum((line_item_price(item) for item in selected), ZERO),
        selected_count=len(selected),
        total_count=len(items),
    )


def create_default_budget(vendor_id: Optional[int] = None) -> Budget:
    """A new, unsaved draft budget with default property details."""
    now = utcnow()
    return Budget(
        property_address="",
        property_type=PropertyType.HOUSE,
        property_size=PropertySize.MEDIUM,
        tier=BudgetTier.STANDARD,
        suburb_id=None,
        vendor_id=vendor_id,
        schedule_id=None,
        schedule_name=None,
        line_items=[],
        status=BudgetStatus.DRAFT,
        created_at=now,
        updated_at=now,
    )


def variant_context_for(budget: Budget, suburbs: list[Suburb]) -> VariantContext:
    """Build the variant context from a budget's size and its suburb's tier."""
    suburb_tier = None
    if budget.suburb_id is not None:
        for suburb in suburbs:
            if suburb.id == budget.suburb_id:
                suburb_tier = suburb.pricing_tier
                break
    return VariantContext(
        property_size=budget.property_size,
        suburb_tier=suburb_tier,
    )


def line_items_from_schedule(
    schedule: Schedule,
    services: list[Service],
    context: Optional[VariantContext] = None,
) -> list[BudgetLineItem]:
    """
    Fresh line items for a schedule template.

    Services missing from the catalogue still produce a row, priced at zero,
    so the gap is visible to the user rather than silently dropped.
    """
    catalogue = _catalogue_by_id(services)
    items = []

    for line in schedule.line_items:
        service = catalogue.get(line.service_id)
        variant = resolve_variant(service, context, line.variant_id) if service else None
        items.append(BudgetLineItem(
            service_id=line.service_id,
            service_name=service.name if service else None,
            variant_id=variant.id if variant else line.variant_id,
            variant_name=variant.name if variant else None,
            is_selected=line.is_selected,
            schedule_price=variant.base_price if variant else ZERO,
            override_price=None,
            is_overridden=False,
        ))

    return items
