"""Audit logging package."""

from marketing_budget.audit.diff import (
    diff_changes,
    display_value,
    format_field_name,
    snapshot,
    summarise_changes,
)
from marketing_budget.audit.logger import AuditLogger
from marketing_budget.audit.repository import AuditedBudgetRepository

__all__ = [
    "AuditLogger",
    "AuditedBudgetRepository",
    "diff_changes",
    "display_value",
    "format_field_name",
    "snapshot",
    "summarise_changes",
]
