"""
Reference Data Models for Marketing Budget

The catalogue is the reference data a budget is priced against:
vendors, the services they offer, the priced variants of each service,
suburbs with their pricing tier, and schedule templates.

DESIGN DECISION: Catalogue records are weakly referenced by budgets.
A budget line item stores a service id and a variant id, never a copy
of the service, so a catalogue edit can be re-applied to open budgets.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ServiceCategory(str, Enum):
    """Service categories available in the catalogue."""
    PHOTOGRAPHY = "photography"
    FLOOR_PLANS = "floorPlans"
    AERIAL = "aerial"
    VIDEO = "video"
    VIRTUAL_STAGING = "virtualStaging"
    INTERNET = "internet"
    LEGAL = "legal"
    PRINT = "print"
    SIGNAGE = "signage"
    OTHER = "other"


class VariantSelector(str, Enum):
    """
    How the applicable variant of a service is chosen.

    The set is closed: resolution dispatches on this tag.
    """
    NONE = "none"                    # Always the first variant
    MANUAL = "manual"                # User picks a variant
    PROPERTY_SIZE = "propertySize"   # Matched on the property's size
    SUBURB_TIER = "suburbTier"       # Matched on the suburb's pricing tier


class PropertyType(str, Enum):
    """Property type classification."""
    HOUSE = "house"
    UNIT = "unit"
    TOWNHOUSE = "townhouse"
    LAND = "land"
    RURAL = "rural"
    COMMERCIAL = "commercial"


class PropertySize(str, Enum):
    """Property size classification."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class PricingTier(str, Enum):
    """Suburb pricing tier (drives internet listing packages)."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class BudgetTier(str, Enum):
    """Schedule / budget tier level. Not the same thing as a suburb tier."""
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


# =============================================================================
# VENDORS & SERVICES
# =============================================================================

class Vendor(BaseModel):
    """A marketing services vendor."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    short_code: Optional[str] = Field(default=None, max_length=20)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool = True


class IncludedService(BaseModel):
    """A service bundled into a package variant (e.g. photos include a floor plan)."""

    service_id: int
    service_name: str
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None


class ServiceVariant(BaseModel):
    """One priced option of a service (e.g. "8 Photos", "Tier A Suburbs")."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    base_price: Decimal = Field(
        ...,
        ge=0,
        description="Price of this variant, GST inclusive"
    )
    size_match: Optional[PropertySize] = Field(
        default=None,
        description="Matched when the service selects by property size"
    )
    tier_match: Optional[PricingTier] = Field(
        default=None,
        description="Matched when the service selects by suburb tier"
    )
    included_services: list[IncludedService] = Field(default_factory=list)


class Service(BaseModel):
    """
    A marketing service offered by a vendor or available system-wide.

    A service always has at least one variant; single-price services
    carry exactly one.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    category: ServiceCategory = ServiceCategory.OTHER
    vendor_id: Optional[int] = Field(
        default=None,
        description="None for non-vendor services (internet listings, legal)"
    )
    variant_selector: VariantSelector = VariantSelector.NONE
    variants: list[ServiceVariant] = Field(..., min_length=1)
    includes_gst: bool = True
    is_active: bool = True


# =============================================================================
# SUBURBS & SCHEDULES
# =============================================================================

class Suburb(BaseModel):
    """A suburb with a pricing tier for internet listing packages."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    pricing_tier: PricingTier
    postcode: Optional[str] = None
    state: Optional[str] = None


class ScheduleLineItem(BaseModel):
    """A line of a schedule template: a service, a variant and a default toggle."""

    service_id: int
    variant_id: Optional[str] = None
    is_selected: bool = True


class Schedule(BaseModel):
    """
    A reusable budget template.

    Defines a default set of services for a property type / size / tier
    combination. Budgets copy its line items; they never write back.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    property_type: PropertyType
    property_size: PropertySize
    tier: BudgetTier
    default_vendor_id: Optional[int] = None
    line_items: list[ScheduleLineItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_active: bool = True
