import pytest

from errors import NotFoundError
from estimate_calculator import calculate_estimate
from market_rates import (
    ABOVE_AVERAGE,
    BELOW_AVERAGE,
    COMPETITIVE,
    PREMIUM,
    UNDERPRICED,
    compare_rates,
    location_name,
    market_position,
    market_rates,
    percent_difference,
)


class TestMarketPosition:
    def test_below_average_not_underpriced(self):
        diff = percent_difference(80, 100)
        assert diff == -20
        assert market_position(diff) == BELOW_AVERAGE

    @pytest.mark.parametrize('diff,label', [
        (31, PREMIUM),
        (30, ABOVE_AVERAGE),
        (11, ABOVE_AVERAGE),
        (10, COMPETITIVE),
        (0, COMPETITIVE),
        (-10, COMPETITIVE),
        (-11, BELOW_AVERAGE),
        (-30, BELOW_AVERAGE),
        (-31, UNDERPRICED),
    ])
    def test_boundaries(self, diff, label):
        assert market_position(diff) == label


class TestMarketRates:
    def test_us_average_website(self):
        assert [rate for _, rate in market_rates('webdev', 'website', 'us_average')] == [35, 65, 100, 150, 125]

    def test_location_multiplier(self):
        assert [rate for _, rate in market_rates('webdev', 'website', 'eastern_europe')] == [21, 39, 60, 90, 75]

    def test_unknown_location_and_project_default_to_one(self):
        assert market_rates('webdev', 'spaceship', 'mars') == market_rates('webdev', 'website', 'us_average')
        assert location_name('mars') == 'mars'
        assert location_name('uk') == 'United Kingdom'

    def test_unknown_industry(self):
        with pytest.raises(NotFoundError):
            market_rates('plumbing', 'website', 'us_average')


class TestCompareRates:
    def test_comparison_for_website(self):
        est = calculate_estimate('webdev', 'website')
        comparison = compare_rates(est)

        assert comparison.your_rate == 50
        assert comparison.market_average == 95
        assert comparison.percent_diff == -47
        assert comparison.position == UNDERPRICED
        assert len(comparison.recommendations) == 4

        junior = comparison.rows[0]
        assert junior.experience_level == 'Junior (1-2 years)'
        assert junior.percent_diff == 43
        assert junior.position == PREMIUM
        assert junior.annual_income == 35 * 40 * 50

        senior = comparison.rows[2]
        assert senior.percent_diff == -50
        assert senior.position == UNDERPRICED

    def test_industry_note(self):
        est = calculate_estimate('webdev', 'ecommerce')
        assert 'E-commerce' in compare_rates(est).industry_note

    def test_to_dict(self):
        data = compare_rates(calculate_estimate('design', 'logo'), 'uk').to_dict()
        assert data['location_name'] == 'United Kingdom'
        assert len(data['rows']) == 5
