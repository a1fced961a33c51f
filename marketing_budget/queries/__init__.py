"""Dashboard query package."""

from marketing_budget.queries.aggregations import (
    DashboardQueryExecutor,
    DashboardSummary,
    MonthlySpend,
    SpendSummary,
    count_budgets_by_status,
    monthly_spend_trend,
    overall_spend_summary,
    total_spend_by_category,
    total_spend_by_tier,
)

__all__ = [
    "DashboardQueryExecutor",
    "DashboardSummary",
    "MonthlySpend",
    "SpendSummary",
    "count_budgets_by_status",
    "monthly_spend_trend",
    "overall_spend_summary",
    "total_spend_by_category",
    "total_spend_by_tier",
]
