import pytest

from entitlements import (
    FEATURE_ACCESS,
    Plan,
    can_save_more_estimates,
    has_feature,
    has_plan,
    remaining_free_estimates,
    required_plan,
    resolve_plan,
)

ALL_FEATURES = sorted(set().union(*FEATURE_ACCESS.values()))


class TestResolvePlan:
    @pytest.mark.parametrize('value', [None, '', 'unknown_tier', 'premium', 'enterprise', 42])
    def test_unknown_is_free(self, value):
        assert resolve_plan(value) is Plan.FREE

    def test_case_insensitive(self):
        assert resolve_plan(' PRO ') is Plan.PRO


class TestHasFeature:
    def test_empty_plan_fails_closed(self):
        assert has_feature('', 'project_breakdown') is False
        assert has_feature(None, 'competitor_rates') is False

    @pytest.mark.parametrize('feature', ALL_FEATURES)
    def test_unknown_plan_matches_free(self, feature):
        assert has_feature('unknown_tier', feature) == has_feature('free', feature)
        assert has_feature('premium', feature) == has_feature('free', feature)

    def test_pro_features(self):
        for feature in ['project_breakdown', 'risk_assessment', 'competitor_rates', 'profitability_analysis']:
            assert has_feature('pro', feature)
            assert not has_feature('free', feature)

    def test_feature_granted_by_several_tiers(self):
        assert has_feature('free', 'basic_estimation')
        assert has_feature('pro', 'basic_estimation')

    def test_unknown_feature(self):
        assert has_feature('pro', 'time_travel') is False

    @pytest.mark.parametrize('feature', [['project_breakdown'], {'f': 1}, None, 7])
    def test_non_string_feature(self, feature):
        assert has_feature('pro', feature) is False
        assert required_plan(feature) is None


class TestHasPlan:
    def test_order(self):
        assert has_plan('pro', 'free')
        assert has_plan('pro', 'pro')
        assert has_plan('free', 'free')
        assert not has_plan('free', 'pro')
        assert not has_plan('garbage', 'pro')

    def test_unknown_required_plan(self):
        assert not has_plan('pro', 'premium')

    def test_required_plan(self):
        assert required_plan('export_basic') is Plan.FREE
        assert required_plan('risk_assessment') is Plan.PRO
        assert required_plan('nope') is None


class TestSaveLimits:
    def test_free_cap(self):
        assert can_save_more_estimates('free', 2)
        assert not can_save_more_estimates('free', 3)
        assert remaining_free_estimates('free', 1) == 2
        assert remaining_free_estimates('free', 5) == 0

    def test_pro_unlimited(self):
        assert can_save_more_estimates('pro', 500)
        assert remaining_free_estimates('pro', 500) is None
