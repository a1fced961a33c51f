"""Shared catalogue fixtures for the Marketing Budget test suite."""

import pytest
from decimal import Decimal

from marketing_budget.config import get_settings
from marketing_budget.models import (
    Budget,
    BudgetLineItem,
    BudgetTier,
    DataExport,
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
from marketing_budget.services.storage import (
    InMemoryAuditStorage,
    InMemoryBudgetRepository,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; re-read the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def vendor():
    return Vendor(id=1, name="Lens & Light", short_code="LNL")


@pytest.fixture
def photography_service():
    """Manual selector: the user picks the package."""
    return Service(
        id=1,
        name="Photography",
        category=ServiceCategory.PHOTOGRAPHY,
        vendor_id=1,
        variant_selector=VariantSelector.MANUAL,
        variants=[
            ServiceVariant(id="photo-8", name="8 Photos", base_price=Decimal("350")),
            ServiceVariant(id="photo-12", name="12 Photos", base_price=Decimal("450")),
        ],
    )


@pytest.fixture
def floor_plan_service():
    """Single-price service."""
    return Service(
        id=2,
        name="Floor Plan",
        category=ServiceCategory.FLOOR_PLANS,
        vendor_id=1,
        variants=[
            ServiceVariant(id="fp", name="Standard Floor Plan", base_price=Decimal("150")),
        ],
    )


@pytest.fixture
def internet_service():
    """Priced by the suburb's pricing tier."""
    return Service(
        id=3,
        name="Internet Listing",
        category=ServiceCategory.INTERNET,
        variant_selector=VariantSelector.SUBURB_TIER,
        variants=[
            ServiceVariant(id="tier-a", name="Tier A", base_price=Decimal("1200"), tier_match=PricingTier.A),
            ServiceVariant(id="tier-b", name="Tier B", base_price=Decimal("900"), tier_match=PricingTier.B),
            ServiceVariant(id="tier-c", name="Tier C", base_price=Decimal("650"), tier_match=PricingTier.C),
            ServiceVariant(id="tier-d", name="Tier D", base_price=Decimal("400"), tier_match=PricingTier.D),
        ],
    )


@pytest.fixture
def aerial_service():
    """Priced by the property's size."""
    return Service(
        id=4,
        name="Aerial Photography",
        category=ServiceCategory.AERIAL,
        vendor_id=1,
        variant_selector=VariantSelector.PROPERTY_SIZE,
        variants=[
            ServiceVariant(id="aerial-s", name="Small Block", base_price=Decimal("200"), size_match=PropertySize.SMALL),
            ServiceVariant(id="aerial-m", name="Medium Block", base_price=Decimal("300"), size_match=PropertySize.MEDIUM),
            ServiceVariant(id="aerial-l", name="Large Block", base_price=Decimal("400"), size_match=PropertySize.LARGE),
        ],
    )


@pytest.fixture
def services(photography_service, floor_plan_service, internet_service, aerial_service):
    return [photography_service, floor_plan_service, internet_service, aerial_service]


@pytest.fixture
def suburbs():
    return [
        Suburb(id=1, name="Paddington", pricing_tier=PricingTier.C, postcode="4064", state="QLD"),
        Suburb(id=2, name="New Farm", pricing_tier=PricingTier.A, postcode="4005", state="QLD"),
    ]


@pytest.fixture
def schedule():
    return Schedule(
        id=1,
        name="Standard House",
        property_type=PropertyType.HOUSE,
        property_size=PropertySize.MEDIUM,
        tier=BudgetTier.STANDARD,
        default_vendor_id=1,
        line_items=[
            ScheduleLineItem(service_id=1, variant_id="photo-12"),
            ScheduleLineItem(service_id=2),
            ScheduleLineItem(service_id=3),
            ScheduleLineItem(service_id=4),
        ],
    )


@pytest.fixture
def catalogue(vendor, services, suburbs, schedule):
    return DataExport(
        vendors=[vendor],
        services=services,
        suburbs=suburbs,
        schedules=[schedule],
    )


@pytest.fixture
def complete_budget():
    """A draft that passes every approval rule."""
    return Budget(
        property_address="12 Latrobe Tce, Paddington",
        suburb_id=1,
        schedule_id=1,
        schedule_name="Standard House",
        line_items=[
            BudgetLineItem(service_id=1, variant_id="photo-12", schedule_price=Decimal("450")),
            BudgetLineItem(service_id=2, variant_id="fp", schedule_price=Decimal("150")),
        ],
    )


@pytest.fixture
def inner_repository():
    return InMemoryBudgetRepository()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()
