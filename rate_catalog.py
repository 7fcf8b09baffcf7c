# rate_catalog.py

import logging
from dataclasses import dataclass

from errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Industry:
    id: str
    name: str


@dataclass(frozen=True)
class ProjectType:
    id: str
    industry_id: str
    name: str
    base_hours: float
    base_cost: float


@dataclass(frozen=True)
class FeatureModifier:
    id: str
    industry_id: str
    name: str
    hour_multiplier: float
    cost_multiplier: float


@dataclass(frozen=True)
class ComplexityTier:
    id: str
    name: str
    hour_multiplier: float
    cost_multiplier: float


INDUSTRIES = {
    'webdev': Industry('webdev', 'Web Development'),
    'design': Industry('design', 'Graphic Design'),
    'writing': Industry('writing', 'Content Writing'),
    'marketing': Industry('marketing', 'Digital Marketing'),
    'video': Industry('video', 'Video Production'),
}

# industry -> [(id, name, base hours, base cost)]
_PROJECT_ROWS = {
    'webdev': [
        ('landing', 'Landing Page', 10, 500),
        ('website', 'Full Website', 40, 2000),
        ('ecommerce', 'E-commerce Site', 80, 4000),
        ('webapp', 'Web Application', 100, 5000),
    ],
    'design': [
        ('logo', 'Logo Design', 8, 400),
        ('branding', 'Brand Package', 20, 1000),
        ('social', 'Social Media Graphics', 12, 600),
        ('print', 'Print Materials', 15, 750),
    ],
    'writing': [
        ('article', 'Blog Article', 4, 200),
        ('whitepaper', 'Whitepaper', 15, 750),
        ('emailseq', 'Email Sequence', 8, 400),
        ('seo', 'SEO Content', 6, 300),
    ],
    'marketing': [
        ('smm', 'Social Media Campaign', 20, 1000),
        ('ppc', 'PPC Campaign', 15, 750),
        ('seo', 'SEO Optimization', 30, 1500),
        ('email', 'Email Marketing', 12, 600),
    ],
    'video': [
        ('explainer', 'Explainer Video', 25, 1250),
        ('promo', 'Promotional Video', 20, 1000),
        ('interview', 'Interview Editing', 15, 750),
        ('animation', 'Animation', 40, 2000),
    ],
}

# industry -> [(id, name, hour multiplier, cost multiplier)]
_FEATURE_ROWS = {
    'webdev': [
        ('responsive', 'Responsive Design', 1.2, 1.2),
        ('cms', 'Content Management System', 1.5, 1.4),
        ('payment', 'Payment Integration', 1.3, 1.3),
        ('auth', 'User Authentication', 1.4, 1.3),
        ('api', 'API Integration', 1.3, 1.2),
    ],
    'design': [
        ('revisions', 'Unlimited Revisions', 1.5, 1.3),
        ('sources', 'Source Files', 1.1, 1.2),
        ('rush', 'Rush Delivery', 0.8, 1.5),
        ('mockup', 'Mockup Presentation', 1.2, 1.2),
    ],
    'writing': [
        ('research', 'In-depth Research', 1.5, 1.3),
        ('seo', 'SEO Optimization', 1.3, 1.2),
        ('revisions', 'Multiple Revisions', 1.4, 1.3),
        ('interview', 'Expert Interviews', 1.6, 1.4),
    ],
    'marketing': [
        ('analytics', 'Analytics Setup', 1.2, 1.2),
        ('competitor', 'Competitor Analysis', 1.3, 1.3),
        ('persona', 'Audience Persona', 1.2, 1.2),
        ('report', 'Performance Reporting', 1.3, 1.1),
    ],
    'video': [
        ('script', 'Script Writing', 1.3, 1.2),
        ('voiceover', 'Professional Voiceover', 1.2, 1.4),
        ('music', 'Licensed Music', 1.1, 1.3),
        ('captions', 'Subtitles/Captions', 1.2, 1.1),
    ],
}

PROJECT_TYPES = {
    industry_id: {
        row[0]: ProjectType(row[0], industry_id, row[1], float(row[2]), float(row[3]))
        for row in rows
    }
    for industry_id, rows in _PROJECT_ROWS.items()
}

FEATURES = {
    industry_id: {
        row[0]: FeatureModifier(row[0], industry_id, row[1], row[2], row[3])
        for row in rows
    }
    for industry_id, rows in _FEATURE_ROWS.items()
}

# Ordered lowest -> highest
COMPLEXITY_TIERS = {
    'low': ComplexityTier('low', 'Low', 0.8, 0.9),
    'medium': ComplexityTier('medium', 'Medium', 1.0, 1.0),
    'high': ComplexityTier('high', 'High', 1.5, 1.3),
    'expert': ComplexityTier('expert', 'Expert', 2.0, 1.8),
}

DEFAULT_COMPLEXITY = 'medium'


def validate_catalog():
    """Raise ValueError if any row points at a missing industry or has a
    non-positive multiplier or base value."""
    problems = []

    for industry_id, projects in PROJECT_TYPES.items():
        for project in projects.values():
            if project.industry_id not in INDUSTRIES or industry_id not in INDUSTRIES:
                problems.append(f"project type '{project.id}' has unknown industry '{project.industry_id}'")
            if project.base_hours <= 0 or project.base_cost <= 0:
                problems.append(f"project type '{industry_id}/{project.id}' has non-positive base values")

    for industry_id, features in FEATURES.items():
        for feature in features.values():
            if feature.industry_id not in INDUSTRIES or industry_id not in INDUSTRIES:
                problems.append(f"feature '{feature.id}' has unknown industry '{feature.industry_id}'")
            if feature.hour_multiplier <= 0 or feature.cost_multiplier <= 0:
                problems.append(f"feature '{industry_id}/{feature.id}' has non-positive multipliers")

    for tier in COMPLEXITY_TIERS.values():
        if tier.hour_multiplier <= 0 or tier.cost_multiplier <= 0:
            problems.append(f"complexity '{tier.id}' has non-positive multipliers")

    if problems:
        raise ValueError("Rate catalog integrity errors: " + "; ".join(problems))


def get_industry(industry_id):
    try:
        return INDUSTRIES[industry_id]
    except (KeyError, TypeError):
        raise NotFoundError(f"Unknown industry '{industry_id}'") from None


def get_project_type(industry_id, project_type_id):
    get_industry(industry_id)
    try:
        project = PROJECT_TYPES.get(industry_id, {}).get(project_type_id)
    except TypeError:
        project = None
    if project is None:
        raise NotFoundError(f"Unknown project type '{project_type_id}' for industry '{industry_id}'")
    return project


def get_feature(industry_id, feature_id):
    try:
        feature = FEATURES.get(industry_id, {}).get(feature_id)
    except TypeError:
        feature = None
    if feature is None:
        raise NotFoundError(f"Unknown feature '{feature_id}' for industry '{industry_id}'")
    return feature


def get_complexity(tier_id):
    try:
        return COMPLEXITY_TIERS[tier_id]
    except (KeyError, TypeError):
        raise NotFoundError(f"Unknown complexity tier '{tier_id}'") from None


def list_project_types(industry_id):
    get_industry(industry_id)
    return list(PROJECT_TYPES.get(industry_id, {}).values())


def list_features(industry_id):
    get_industry(industry_id)
    return list(FEATURES.get(industry_id, {}).values())


def catalog_as_dict():
    """Plain-data view of the whole catalog for API clients"""

    return {
        'industries': [
            {
                'id': industry.id,
                'name': industry.name,
                'project_types': [
                    {
                        'id': p.id,
                        'name': p.name,
                        'base_hours': p.base_hours,
                        'base_cost': p.base_cost,
                    }
                    for p in list_project_types(industry.id)
                ],
                'features': [
                    {
                        'id': f.id,
                        'name': f.name,
                        'hour_multiplier': f.hour_multiplier,
                        'cost_multiplier': f.cost_multiplier,
                    }
                    for f in list_features(industry.id)
                ],
            }
            for industry in INDUSTRIES.values()
        ],
        'complexity_tiers': [
            {
                'id': t.id,
                'name': t.name,
                'hour_multiplier': t.hour_multiplier,
                'cost_multiplier': t.cost_multiplier,
            }
            for t in COMPLEXITY_TIERS.values()
        ],
    }


validate_catalog()
