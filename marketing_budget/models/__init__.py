"""
Data Models Package

This package contains all Pydantic models used in the Marketing Budget engine.
All data flowing through the engine must conform to these schemas.
"""

from marketing_budget.models.catalogue import (
    BudgetTier,
    IncludedService,
    PricingTier,
    PropertySize,
    PropertyType,
    Schedule,
    ScheduleLineItem,
    Service,
    ServiceCategory,
    ServiceVariant,
    Suburb,
    VariantSelector,
    Vendor,
)
from marketing_budget.models.budget import (
    Budget,
    BudgetFilters,
    BudgetLineItem,
    BudgetStatus,
    BudgetSummary,
    DataExport,
    ValidationIssue,
    ValidationResult,
    VariantContext,
)
from marketing_budget.models.audit import (
    AuditAction,
    AuditEntityType,
    AuditEntry,
    AuditEntryBuilder,
    FieldChange,
)

__all__ = [
    # Catalogue models
    "BudgetTier",
    "IncludedService",
    "PricingTier",
    "PropertySize",
    "PropertyType",
    "Schedule",
    "ScheduleLineItem",
    "Service",
    "ServiceCategory",
    "ServiceVariant",
    "Suburb",
    "VariantSelector",
    "Vendor",
    # Budget models
    "Budget",
    "BudgetFilters",
    "BudgetLineItem",
    "BudgetStatus",
    "BudgetSummary",
    "DataExport",
    "ValidationIssue",
    "ValidationResult",
    "VariantContext",
    # Audit models
    "AuditAction",
    "AuditEntityType",
    "AuditEntry",
    "AuditEntryBuilder",
    "FieldChange",
]
