"""
Subscription tiers and the features each one unlocks.

Two tiers only: free and pro. Older data also used a "premium" tier with
its own feature list; that value is not folded into pro. Any plan string
that is not a known tier (including "premium", "" and None) is treated
as free.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)

FREE_SAVED_ESTIMATE_LIMIT = 3


class Plan(str, Enum):
    FREE = 'free'
    PRO = 'pro'

    @property
    def rank(self):
        return PLAN_ORDER.index(self)


# Ordered tiers (lowest -> highest)
PLAN_ORDER = [Plan.FREE, Plan.PRO]

LEGACY_PLANS = {'premium'}

FREE_FEATURES = {
    'basic_estimation',
    'save_estimates',
    'export_basic',
}

PRO_FEATURES = FREE_FEATURES | {
    'unlimited_estimates',
    'project_breakdown',
    'risk_assessment',
    'competitor_rates',
    'profitability_analysis',
    'export_report',
    'custom_branding',
    'white_label',
    'client_management',
    'contract_templates',
    'priority_support',
}

FEATURE_ACCESS = {
    Plan.FREE: frozenset(FREE_FEATURES),
    Plan.PRO: frozenset(PRO_FEATURES),
}


def resolve_plan(value):
    """Map a raw plan string onto a Plan. Unknown values resolve to Plan.FREE."""
    if isinstance(value, Plan):
        return value
    normalized = str(value or '').strip().lower()
    try:
        return Plan(normalized)
    except ValueError:
        if normalized in LEGACY_PLANS:
            logger.warning("Plan %r belongs to the retired three-tier model; treating as free", value)
        elif normalized:
            logger.warning("Unknown plan %r; treating as free", value)
        return Plan.FREE


def has_feature(plan, feature):
    """True if the plan unlocks the feature. Never raises."""
    if not isinstance(feature, str):
        return False
    return feature in FEATURE_ACCESS[resolve_plan(plan)]


def has_plan(plan, required_plan):
    """True if plan is at or above required_plan in the tier order.

    An unrecognized required plan cannot be satisfied.
    """
    try:
        required = Plan(str(required_plan or '').strip().lower())
    except ValueError:
        return False
    return resolve_plan(plan).rank >= required.rank


def required_plan(feature):
    """Lowest plan that unlocks a feature, or None if no plan does"""
    if not isinstance(feature, str):
        return None
    for plan in PLAN_ORDER:
        if feature in FEATURE_ACCESS[plan]:
            return plan
    return None


def can_save_more_estimates(plan, saved_count, limit=FREE_SAVED_ESTIMATE_LIMIT):
    if has_feature(plan, 'unlimited_estimates'):
        return True
    return saved_count < limit


def remaining_free_estimates(plan, saved_count, limit=FREE_SAVED_ESTIMATE_LIMIT):
    """Saves left on the free tier; None means unlimited"""
    if has_feature(plan, 'unlimited_estimates'):
        return None
    return max(0, limit - saved_count)
