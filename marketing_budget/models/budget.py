"""
Budget Models for Marketing Budget

A budget is the aggregate root of the system: a property, the
marketing services chosen for it, and where it sits in the approval
workflow.

DESIGN DECISION: Prices are stored GST inclusive.
No tax arithmetic happens anywhere in the engine; totals are plain sums.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from marketing_budget.config import get_settings
from marketing_budget.models.catalogue import (
    BudgetTier,
    PricingTier,
    PropertySize,
    PropertyType,
    Schedule,
    Service,
    Suburb,
    Vendor,
    utcnow,
)


class BudgetStatus(str, Enum):
    """
    Lifecycle status of a budget.

    CRITICAL: Only draft -> approved is gated by validation.
    See marketing_budget.validation.workflow for the full graph.
    """
    DRAFT = "draft"
    APPROVED = "approved"
    SENT = "sent"
    ARCHIVED = "archived"


class VariantContext(BaseModel):
    """
    Property context used to auto-select service variants.

    Has no identity; recomputed whenever the property's size or suburb changes.
    """
    model_config = ConfigDict(frozen=True)

    property_size: Optional[PropertySize] = None
    suburb_tier: Optional[PricingTier] = None


# =============================================================================
# CORE BUDGET MODEL
# =============================================================================

class BudgetLineItem(BaseModel):
    """
    A budget row: a service, its resolved variant, and its price.

    The effective price is override_price when is_overridden,
    schedule_price otherwise.
    """

    service_id: int
    service_name: Optional[str] = None
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    is_selected: bool = True
    schedule_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Price of the last resolved variant"
    )
    override_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Manually entered price (None = use schedule_price)"
    )
    is_overridden: bool = False

    @model_validator(mode='after')
    def validate_override(self) -> 'BudgetLineItem':
        """An overridden item must carry the price it was overridden with."""
        if self.is_overridden and self.override_price is None:
            raise ValueError("Overridden line item must have an override price")
        return self


class Budget(BaseModel):
    """
    A property marketing budget.

    id is None until the budget has been saved for the first time.
    Budgets are never physically deleted by the engine.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    property_address: str = Field(default="", max_length=500)
    property_type: PropertyType = PropertyType.HOUSE
    property_size: PropertySize = PropertySize.MEDIUM
    tier: BudgetTier = BudgetTier.STANDARD
    suburb_id: Optional[int] = None
    vendor_id: Optional[int] = None
    schedule_id: Optional[int] = None
    schedule_name: Optional[str] = None
    line_items: list[BudgetLineItem] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=2000)
    client_name: Optional[str] = None
    agent_name: Optional[str] = None
    status: BudgetStatus = BudgetStatus.DRAFT
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BudgetSummary(BaseModel):
    """Totals for a list of line items."""

    total: Decimal = Field(default=Decimal("0"))
    selected_count: int = Field(default=0, ge=0)
    total_count: int = Field(default=0, ge=0)


class BudgetFilters(BaseModel):
    """Filters accepted when listing budgets."""

    status: Optional[BudgetStatus] = None
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive match on the property address"
    )


class DataExport(BaseModel):
    """Shape of a full data export / backup, and of seed data."""

    export_version: str = Field(default_factory=lambda: get_settings().app.export_version)
    export_date: datetime = Field(default_factory=utcnow)
    app_version: str = Field(default_factory=lambda: get_settings().app.app_version)
    vendors: list[Vendor] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    suburbs: list[Suburb] = Field(default_factory=list)
    schedules: list[Schedule] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single failed workflow rule."""

    rule: str = Field(
        ...,
        description="Machine-readable rule key (e.g. 'address_required')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the failure"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a budget for a status transition.

    Returned as data, never raised: the caller decides whether to block.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def rules(self) -> list[str]:
        """Rule keys of every failure, in check order."""
        return [issue.rule for issue in self.issues]

    @property
    def error_count(self) -> int:
        return len(self.issues)
