# profitability.py

import logging
from dataclasses import dataclass, field
from typing import List

from errors import DegenerateInputError
from estimate_calculator import hourly_rate, round_half_up

logger = logging.getLogger(__name__)

# Multiple of labor cost quoted when overhead + target margin leave nothing for labor
FALLBACK_LABOR_MULTIPLE = 3
# Ten similar projects a year
PROJECTS_PER_YEAR = 10

LOSS = 'loss'
BELOW_TARGET = 'below_target'
ON_TARGET = 'on_target'
WELL_ABOVE = 'well_above'

RECOMMENDATIONS = {
    LOSS: 'Your current pricing results in a loss. Raise your rates or reduce project scope to avoid losses on this type of project.',
    BELOW_TARGET: 'Your project is profitable but below your target margin. Consider adjusting your rates for future projects.',
    ON_TARGET: 'Your current pricing meets your target margins. Consider additional value-added services to increase profitability further.',
    WELL_ABOVE: 'Your project is exceptionally profitable. Consider if there are opportunities to provide additional value to clients or take on more similar projects.',
}


@dataclass
class ProfitabilityResult:
    hourly_rate: int
    effective_hourly_rate: float
    labor_cost: float
    overhead_cost: float
    current_profit: float
    current_margin_pct: float
    recommended_price: int
    price_delta: int
    price_delta_pct: float
    projected_annual_profit: float
    recommendation_band: str
    recommendation: str
    warnings: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'hourly_rate': self.hourly_rate,
            'effective_hourly_rate': self.effective_hourly_rate,
            'labor_cost': self.labor_cost,
            'overhead_cost': self.overhead_cost,
            'current_profit': self.current_profit,
            'current_margin_pct': self.current_margin_pct,
            'recommended_price': self.recommended_price,
            'price_delta': self.price_delta,
            'price_delta_pct': self.price_delta_pct,
            'projected_annual_profit': self.projected_annual_profit,
            'recommendation_band': self.recommendation_band,
            'recommendation': self.recommendation,
            'warnings': list(self.warnings),
        }


def effective_rate(rate, non_billable_pct):
    """Billable share of an hourly rate. Non-billable time is clamped to 0..100%."""
    non_billable_pct = min(max(non_billable_pct, 0), 100)
    return rate * (1 - non_billable_pct / 100)


def recommendation_band(margin_pct, target_pct):
    if margin_pct < 0:
        return LOSS
    if margin_pct < target_pct:
        return BELOW_TARGET
    if margin_pct < target_pct * 1.5:
        return ON_TARGET
    return WELL_ABOVE


def recommended_price(labor_cost, overhead_pct, target_profit_pct):
    """Price that covers labor plus overhead and target margin taken off the top.

    Returns (price, warning). When overhead + margin reach 100% the
    equation has no solution; the price falls back to a multiple of labor
    cost and warning carries a DegenerateInputError.
    """
    denominator = 1 - overhead_pct / 100 - target_profit_pct / 100
    if denominator <= 0:
        warning = DegenerateInputError(
            f"Overhead ({overhead_pct}%) plus target profit ({target_profit_pct}%) "
            f"leave no room for labor; using {FALLBACK_LABOR_MULTIPLE}x labor cost"
        )
        logger.warning("Degenerate profitability inputs: %s", warning)
        return round_half_up(labor_cost * FALLBACK_LABOR_MULTIPLE), warning
    return round_half_up(labor_cost / denominator), None


def analyze(estimate, overhead_pct=30, target_profit_pct=20, non_billable_pct=25):
    """Profit and margin of an estimate, and the price that hits the target margin"""

    hours = estimate.hours
    revenue = estimate.cost
    rate = hourly_rate(estimate)

    eff_rate = effective_rate(rate, non_billable_pct)
    labor_cost = hours * eff_rate
    overhead_cost = revenue * overhead_pct / 100

    current_profit = revenue - overhead_cost - labor_cost
    margin_pct = current_profit / revenue * 100 if revenue else 0.0

    price, warning = recommended_price(labor_cost, overhead_pct, target_profit_pct)
    delta = price - revenue
    delta_pct = delta / revenue * 100 if revenue else 0.0

    band = recommendation_band(margin_pct, target_profit_pct)

    return ProfitabilityResult(
        hourly_rate=rate,
        effective_hourly_rate=round(eff_rate, 2),
        labor_cost=round(labor_cost, 2),
        overhead_cost=round(overhead_cost, 2),
        current_profit=round(current_profit, 2),
        current_margin_pct=round(margin_pct, 1),
        recommended_price=price,
        price_delta=delta,
        price_delta_pct=round(delta_pct, 1),
        projected_annual_profit=round(current_profit * PROJECTS_PER_YEAR, 2),
        recommendation_band=band,
        recommendation=RECOMMENDATIONS[band],
        warnings=[str(warning)] if warning else [],
    )
