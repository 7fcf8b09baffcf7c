import pytest

from errors import NotFoundError
import rate_catalog


class TestRateCatalog:
    def test_catalog_is_valid(self):
        rate_catalog.validate_catalog()

    def test_every_industry_has_four_project_types(self):
        for industry_id in rate_catalog.INDUSTRIES:
            assert len(rate_catalog.list_project_types(industry_id)) == 4

    def test_lookup(self):
        project = rate_catalog.get_project_type('webdev', 'website')
        assert project.base_hours == 40
        assert project.base_cost == 2000
        feature = rate_catalog.get_feature('design', 'rush')
        assert (feature.hour_multiplier, feature.cost_multiplier) == (0.8, 1.5)

    def test_same_id_in_two_industries(self):
        assert rate_catalog.get_project_type('writing', 'seo').name == 'SEO Content'
        assert rate_catalog.get_project_type('marketing', 'seo').name == 'SEO Optimization'

    @pytest.mark.parametrize('call', [
        lambda: rate_catalog.get_industry('plumbing'),
        lambda: rate_catalog.get_project_type('design', 'website'),
        lambda: rate_catalog.get_feature('webdev', 'rush'),
        lambda: rate_catalog.get_complexity('extreme'),
        lambda: rate_catalog.get_project_type('webdev', ['website']),
        lambda: rate_catalog.get_feature('webdev', {'id': 'cms'}),
    ])
    def test_misses_raise_not_found(self, call):
        with pytest.raises(NotFoundError):
            call()

    def test_catalog_as_dict(self):
        data = rate_catalog.catalog_as_dict()
        assert [i['id'] for i in data['industries']] == ['webdev', 'design', 'writing', 'marketing', 'video']
        assert [t['id'] for t in data['complexity_tiers']] == ['low', 'medium', 'high', 'expert']

    def test_validate_rejects_bad_multiplier(self, monkeypatch):
        broken = dict(rate_catalog.COMPLEXITY_TIERS)
        broken['low'] = rate_catalog.ComplexityTier('low', 'Low', 0, 0.9)
        monkeypatch.setattr(rate_catalog, 'COMPLEXITY_TIERS', broken)
        with pytest.raises(ValueError):
            rate_catalog.validate_catalog()
