"""
Entitlement table: the fixed mapping from subscription tier to limits.

The table is built once at import time and exposed read-only, so concurrent
readers never need any coordination.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from scheduhub.constants.subscription_tiers import (
    BASIC_MAX_WORKSPACES, BASIC_MAX_EMPLOYEES_PER_WORKSPACE, BASIC_NAME,
    EXTENDED_MAX_WORKSPACES, EXTENDED_MAX_EMPLOYEES_PER_WORKSPACE, EXTENDED_NAME,
    UNLIMITED_MAX_WORKSPACES, UNLIMITED_MAX_EMPLOYEES_PER_WORKSPACE, UNLIMITED_NAME,
    EXTENDED_MONTHLY_PRODUCT, EXTENDED_ANNUAL_PRODUCT,
    UNLIMITED_MONTHLY_PRODUCT, UNLIMITED_ANNUAL_PRODUCT,
    TIER_NAME_KEY_TEMPLATE,
)
from scheduhub.models.subscription import Limit, SubscriptionTier, TierLimits


def _limit(value: Optional[int]) -> Limit:
    return Limit.unbounded() if value is None else Limit.bounded(value)


def _tier_limits(tier: SubscriptionTier, name: str, max_workspaces: Optional[int],
                 max_employees: Optional[int]) -> TierLimits:
    return TierLimits(
        tier=tier,
        name=name,
        name_key=TIER_NAME_KEY_TEMPLATE.format(tier=tier.value),
        max_workspaces=_limit(max_workspaces),
        max_employees_per_workspace=_limit(max_employees),
    )


TIER_LIMITS: Mapping[SubscriptionTier, TierLimits] = MappingProxyType({
    SubscriptionTier.BASIC: _tier_limits(
        SubscriptionTier.BASIC, BASIC_NAME,
        BASIC_MAX_WORKSPACES, BASIC_MAX_EMPLOYEES_PER_WORKSPACE,
    ),
    SubscriptionTier.EXTENDED: _tier_limits(
        SubscriptionTier.EXTENDED, EXTENDED_NAME,
        EXTENDED_MAX_WORKSPACES, EXTENDED_MAX_EMPLOYEES_PER_WORKSPACE,
    ),
    SubscriptionTier.UNLIMITED: _tier_limits(
        SubscriptionTier.UNLIMITED, UNLIMITED_NAME,
        UNLIMITED_MAX_WORKSPACES, UNLIMITED_MAX_EMPLOYEES_PER_WORKSPACE,
    ),
})

PRODUCT_TO_TIER: Mapping[str, SubscriptionTier] = MappingProxyType({
    EXTENDED_MONTHLY_PRODUCT: SubscriptionTier.EXTENDED,
    EXTENDED_ANNUAL_PRODUCT: SubscriptionTier.EXTENDED,
    UNLIMITED_MONTHLY_PRODUCT: SubscriptionTier.UNLIMITED,
    UNLIMITED_ANNUAL_PRODUCT: SubscriptionTier.UNLIMITED,
})


def default_tier() -> SubscriptionTier:
    """Tier given to every newly created account."""
    return SubscriptionTier.BASIC


def is_valid_tier(tier: Any) -> bool:
    """True iff ``tier`` is one of the enumerated tiers (or its string value)."""
    if isinstance(tier, SubscriptionTier):
        return True
    return isinstance(tier, str) and tier in {t.value for t in SubscriptionTier}


def resolve_tier(tier: Any) -> SubscriptionTier:
    """Map any input onto a known tier, falling back to the default tier."""
    if is_valid_tier(tier):
        return SubscriptionTier(tier)
    return default_tier()


def limits_for(tier: Any) -> TierLimits:
    """
    Get the limits for a tier.

    Unknown or missing tiers get the basic tier's limits, never more.
    """
    return TIER_LIMITS[resolve_tier(tier)]


def all_tiers() -> Tuple[SubscriptionTier, ...]:
    """Every tier, lowest first."""
    return tuple(SubscriptionTier)


def tier_rank(tier: Any) -> int:
    return all_tiers().index(resolve_tier(tier))


def tier_for_product(product_id: Any) -> Optional[SubscriptionTier]:
    if not product_id or not isinstance(product_id, str):
        return None
    return PRODUCT_TO_TIER.get(product_id)
