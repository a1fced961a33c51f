"""Pricing package: variant resolution and budget totals."""

from marketing_budget.pricing.engine import (
    calculate_budget_summary,
    create_default_budget,
    effective_price,
    line_item_price,
    line_items_from_schedule,
    resolve_line_items,
    variant_context_for,
)
from marketing_budget.pricing.variants import (
    find_variant,
    has_auto_variants,
    has_selectable_variants,
    resolve_variant,
    variant_price,
)

__all__ = [
    "calculate_budget_summary",
    "create_default_budget",
    "effective_price",
    "find_variant",
    "has_auto_variants",
    "has_selectable_variants",
    "line_item_price",
    "line_items_from_schedule",
    "resolve_line_items",
    "resolve_variant",
    "variant_context_for",
    "variant_price",
]
