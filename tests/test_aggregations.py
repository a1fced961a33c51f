"""Tests for dashboard aggregations."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from marketing_budget.models import (
    Budget,
    BudgetFilters,
    BudgetLineItem,
    BudgetStatus,
    BudgetTier,
    ServiceCategory,
)
from marketing_budget.queries import (
    DashboardQueryExecutor,
    count_budgets_by_status,
    monthly_spend_trend,
    overall_spend_summary,
    total_spend_by_category,
    total_spend_by_tier,
)


def _budget(status, tier, created, items):
    return Budget(
        property_address="1 Main St",
        status=status,
        tier=tier,
        created_at=created,
        line_items=items,
    )


@pytest.fixture
def budgets():
    return [
        _budget(
            BudgetStatus.DRAFT,
            BudgetTier.STANDARD,
            datetime(2026, 1, 10, tzinfo=timezone.utc),
            [
                BudgetLineItem(service_id=1, schedule_price=Decimal("450")),
                BudgetLineItem(service_id=2, schedule_price=Decimal("150"), is_selected=False),
            ],
        ),
        _budget(
            BudgetStatus.APPROVED,
            BudgetTier.PREMIUM,
            datetime(2026, 1, 28, tzinfo=timezone.utc),
            [
                BudgetLineItem(service_id=3, schedule_price=Decimal("650")),
                BudgetLineItem(
                    service_id=99,
                    schedule_price=Decimal("100"),
                    override_price=Decimal("80"),
                    is_overridden=True,
                ),
            ],
        ),
        _budget(
            BudgetStatus.APPROVED,
            BudgetTier.STANDARD,
            datetime(2025, 12, 2, tzinfo=timezone.utc),
            [BudgetLineItem(service_id=2, schedule_price=Decimal("150"))],
        ),
    ]


class TestAggregations:
    """Tests for the pure roll-ups."""

    def test_count_by_status(self, budgets):
        """Test every status is present in the counts."""
        counts = count_budgets_by_status(budgets)
        assert counts == {
            BudgetStatus.DRAFT: 1,
            BudgetStatus.APPROVED: 2,
            BudgetStatus.SENT: 0,
            BudgetStatus.ARCHIVED: 0,
        }

    def test_spend_by_category(self, budgets, services):
        """Test selected spend per category; unknown services count as other."""
        totals = total_spend_by_category(budgets, services)
        assert totals[ServiceCategory.PHOTOGRAPHY] == Decimal("450")
        assert totals[ServiceCategory.FLOOR_PLANS] == Decimal("150")
        assert totals[ServiceCategory.INTERNET] == Decimal("650")
        assert totals[ServiceCategory.OTHER] == Decimal("80")
        assert totals[ServiceCategory.VIDEO] == Decimal("0")

    def test_spend_by_tier(self, budgets):
        """Test unselected items are left out of tier totals."""
        totals = total_spend_by_tier(budgets)
        assert totals[BudgetTier.STANDARD] == Decimal("600")
        assert totals[BudgetTier.PREMIUM] == Decimal("730")
        assert totals[BudgetTier.BASIC] == Decimal("0")

    def test_monthly_trend(self, budgets):
        """Test months are grouped and ordered oldest first."""
        trend = monthly_spend_trend(budgets)
        assert [(m.month, m.total, m.count) for m in trend] == [
            ("2025-12", Decimal("150"), 1),
            ("2026-01", Decimal("1180"), 2),
        ]

    def test_overall_summary(self, budgets):
        """Test total and average spend."""
        summary = overall_spend_summary(budgets)
        assert summary.total_budgets == 3
        assert summary.total_spend == Decimal("1330")
        assert summary.average_spend == Decimal("1330") / 3

    def test_empty(self):
        """Test no budgets yields zeros, not errors."""
        summary = overall_spend_summary([])
        assert summary.total_budgets == 0
        assert summary.average_spend == Decimal("0")
        assert monthly_spend_trend([]) == []


class TestDashboardQueryExecutor:
    """Tests for DashboardQueryExecutor against storage."""

    @pytest.mark.asyncio
    async def test_summarise(self, inner_repository, catalogue, budgets):
        """Test the executor rolls up stored budgets."""
        await inner_repository.seed_data(catalogue)
        for budget in budgets:
            await inner_repository.save_budget(budget)

        summary = await DashboardQueryExecutor(inner_repository).summarise()

        assert summary.by_status[BudgetStatus.APPROVED] == 2
        assert summary.overall.total_budgets == 3
        assert summary.overall.total_spend == Decimal("1330")

    @pytest.mark.asyncio
    async def test_summarise_filtered(self, inner_repository, budgets):
        """Test filters narrow the budgets rolled up."""
        for budget in budgets:
            await inner_repository.save_budget(budget)

        summary = await DashboardQueryExecutor(inner_repository).summarise(
            BudgetFilters(status=BudgetStatus.DRAFT)
        )
        assert summary.overall.total_budgets == 1
        assert summary.overall.total_spend == Decimal("450")
