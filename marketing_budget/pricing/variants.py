"""
Service Variant Resolution

Picks the priced variant of a service that applies to a property.

Resolution order:
1. Explicitly chosen variant (by id), whatever the selector
2. Auto-match by selector (propertySize -> size_match, suburbTier -> tier_match)
3. First variant in the list

Pure functions. A service always has at least one variant, so
resolution never fails.
"""

from decimal import Decimal
from typing import Optional

from marketing_budget.models.budget import VariantContext
from marketing_budget.models.catalogue import (
    Service,
    ServiceVariant,
    VariantSelector,
)


# selector -> (context attribute, variant attribute)
_AUTO_MATCH_FIELDS: dict[VariantSelector, tuple[str, str]] = {
    VariantSelector.PROPERTY_SIZE: ("property_size", "size_match"),
    VariantSelector.SUBURB_TIER: ("suburb_tier", "tier_match"),
}


def find_variant(service: Service, variant_id: Optional[str]) -> Optional[ServiceVariant]:
    """Return the variant with this id, or None."""
    if not variant_id:
        return None
    for variant in service.variants:
        if variant.id == variant_id:
            return variant
    return None


def resolve_variant(
    service: Service,
    context: Optional[VariantContext] = None,
    explicit_variant_id: Optional[str] = None,
) -> ServiceVariant:
    """
    Get the applicable variant for a service.

    Args:
        service: Catalogue service (non-empty variant list)
        context: Current property size / suburb tier, if known
        explicit_variant_id: A variant the user chose; ignored when unknown

    Returns:
        Always a member of service.variants
    """
    selected = find_variant(service, explicit_variant_id)
    if selected is not None:
        return selected

    match_fields = _AUTO_MATCH_FIELDS.get(service.variant_selector)
    if match_fields is not None and context is not None:
        context_field, variant_field = match_fields
        wanted = getattr(context, context_field)
        if wanted is not None:
            for variant in service.variants:
                if getattr(variant, variant_field) == wanted:
                    return variant

    return service.variants[0]


def variant_price(
    service: Service,
    context: Optional[VariantContext] = None,
    variant_id: Optional[str] = None,
) -> Decimal:
    """Base price of the variant that resolves for this context."""
    return resolve_variant(service, context, variant_id).base_price


def context_drives_selection(
    service: Service,
    context: Optional[VariantContext],
) -> bool:
    """True if the service auto-selects and the context carries the value it selects on."""
    match_fields = _AUTO_MATCH_FIELDS.get(service.variant_selector)
    if match_fields is None or context is None:
        return False
    return getattr(context, match_fields[0]) is not None


def has_selectable_variants(service: Service) -> bool:
    """True if the user picks between several variants by hand."""
    return (
        service.variant_selector == VariantSelector.MANUAL
        and len(service.variants) > 1
    )


def has_auto_variants(service: Service) -> bool:
    """True if the variant follows the property's size or suburb tier."""
    return service.variant_selector in _AUTO_MATCH_FIELDS
