"""
Dashboard Aggregations

DESIGN DECISION: Aggregations are DETERMINISTIC roll-ups over stored
budgets. Only selected line items count as spend, exactly as in a
budget's own total, so dashboard figures always reconcile with the
budgets they summarise.

The pure functions do the arithmetic; DashboardQueryExecutor fetches
the data from storage and runs them.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from marketing_budget.models.budget import (
    Budget,
    BudgetFilters,
    BudgetLineItem,
    BudgetStatus,
)
from marketing_budget.models.catalogue import BudgetTier, Service, ServiceCategory
from marketing_budget.pricing.engine import ZERO, line_item_price
from marketing_budget.services.storage import BudgetRepositoryInterface


class MonthlySpend(BaseModel):
    """Spend for one calendar month of budget creation."""

    month: str = Field(..., description='ISO month label, e.g. "2026-01"')
    total: Decimal
    count: int = Field(ge=0)


class SpendSummary(BaseModel):
    """Overall spend across a set of budgets."""

    total_budgets: int = Field(ge=0)
    total_spend: Decimal
    average_spend: Decimal


class DashboardSummary(BaseModel):
    """Everything the dashboard shows, computed in one pass over storage."""

    by_status: dict[BudgetStatus, int]
    by_category: dict[ServiceCategory, Decimal]
    by_tier: dict[BudgetTier, Decimal]
    monthly: list[MonthlySpend]
    overall: SpendSummary


def _selected_spend(items: list[BudgetLineItem]) -> Decimal:
    return sum((line_item_price(item) for item in items if item.is_selected), ZERO)


def count_budgets_by_status(budgets: list[Budget]) -> dict[BudgetStatus, int]:
    """Count budgets per lifecycle status; every status is present."""
    counts = {status: 0 for status in BudgetStatus}
    for budget in budgets:
        counts[budget.status] += 1
    return counts


def total_spend_by_category(
    budgets: list[Budget],
    services: list[Service],
) -> dict[ServiceCategory, Decimal]:
    """
    Selected spend per service category.

    Line items whose service is unknown count as "other".
    """
    category_of = {s.id: s.category for s in services if s.id is not None}
    totals = {category: ZERO for category in ServiceCategory}

    for budget in budgets:
        for item in budget.line_items:
            if not item.is_selected:
                continue
            category = category_of.get(item.service_id, ServiceCategory.OTHER)
            totals[category] += line_item_price(item)

    return totals


def total_spend_by_tier(budgets: list[Budget]) -> dict[BudgetTier, Decimal]:
    """Selected spend per budget tier."""
    totals = {tier: ZERO for tier in BudgetTier}
    for budget in budgets:
        totals[budget.tier] += _selected_spend(budget.line_items)
    return totals


def monthly_spend_trend(budgets: list[Budget]) -> list[MonthlySpend]:
    """Spend per month of creation, oldest first."""
    months: dict[str, MonthlySpend] = {}

    for budget in budgets:
        month = budget.created_at.strftime("%Y-%m")
        spend = _selected_spend(budget.line_items)
        existing = months.get(month)
        if existing is None:
            months[month] = MonthlySpend(month=month, total=spend, count=1)
        else:
            months[month] = MonthlySpend(
                month=month,
                total=existing.total + spend,
                count=existing.count + 1,
            )

    return [months[month] for month in sorted(months)]


def overall_spend_summary(budgets: list[Budget]) -> SpendSummary:
    total = sum((_selected_spend(b.line_items) for b in budgets), ZERO)
    count = len(budgets)
    return SpendSummary(
        total_budgets=count,
        total_spend=total,
        average_spend=total / count if count else ZERO,
    )


class DashboardQueryExecutor:
    """
    Runs the dashboard aggregations against budget storage.

    GUARANTEES:
    - Only reports figures computed from stored budgets
    - Never estimates; an empty store yields zeros
    """

    def __init__(self, storage: BudgetRepositoryInterface):
        self._storage = storage

    async def summarise(self, filters: Optional[BudgetFilters] = None) -> DashboardSummary:
        budgets = await self._storage.get_budgets(filters)
        services = await self._storage.get_all_services()

        return DashboardSummary(
            by_status=count_budgets_by_status(budgets),
            by_category=total_spend_by_category(budgets, services),
            by_tier=total_spend_by_tier(budgets),
            monthly=monthly_spend_trend(budgets),
            overall=overall_spend_summary(budgets),
        )
