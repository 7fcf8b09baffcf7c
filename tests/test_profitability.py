from estimate_calculator import calculate_estimate
from profitability import (
    BELOW_TARGET,
    LOSS,
    ON_TARGET,
    WELL_ABOVE,
    analyze,
    effective_rate,
    recommendation_band,
    recommended_price,
)


class TestProfitability:
    def test_loss_making_website(self):
        est = calculate_estimate('webdev', 'website')
        result = analyze(est, overhead_pct=30, target_profit_pct=20, non_billable_pct=25)

        assert result.hourly_rate == 50
        assert result.effective_hourly_rate == 37.5
        assert result.overhead_cost == 600
        assert result.labor_cost == 1500
        assert result.current_profit == -100
        assert result.current_margin_pct == -5.0
        assert result.recommendation_band == LOSS
        assert result.recommended_price == 3000
        assert result.price_delta == 1000
        assert result.price_delta_pct == 50.0
        assert result.warnings == []

    def test_non_billable_capped_at_100(self):
        assert effective_rate(50, 100) == 0
        assert effective_rate(50, 150) == 0
        assert effective_rate(50, -10) == 50

    def test_degenerate_margin_falls_back(self):
        price, warning = recommended_price(1000, overhead_pct=60, target_profit_pct=40)
        assert price == 3000
        assert warning is not None

        est = calculate_estimate('webdev', 'website')
        result = analyze(est, overhead_pct=70, target_profit_pct=40, non_billable_pct=0)
        assert result.recommended_price == 40 * 50 * 3
        assert len(result.warnings) == 1

    def test_bands(self):
        assert recommendation_band(-0.1, 20) == LOSS
        assert recommendation_band(0, 20) == BELOW_TARGET
        assert recommendation_band(19.9, 20) == BELOW_TARGET
        assert recommendation_band(20, 20) == ON_TARGET
        assert recommendation_band(29.9, 20) == ON_TARGET
        assert recommendation_band(30, 20) == WELL_ABOVE

    def test_profitable_when_mostly_non_billable(self):
        est = calculate_estimate('webdev', 'website')
        result = analyze(est, overhead_pct=10, target_profit_pct=20, non_billable_pct=50)
        # labor 1000, overhead 200 -> profit 800, 40% margin
        assert result.current_profit == 800
        assert result.recommendation_band == WELL_ABOVE
        assert result.projected_annual_profit == 8000
