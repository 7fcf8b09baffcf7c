# estimate_calculator.py

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import rate_catalog
from errors import InvalidSelectionError, NotFoundError

logger = logging.getLogger(__name__)

COST_STEP = 50

# Presentational bands around the point estimate
HOUR_RANGE_LOW, HOUR_RANGE_HIGH = 0.8, 1.2
COST_RANGE_LOW, COST_RANGE_HIGH = 0.9, 1.1


def round_half_up(value):
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def round_to_50(value):
    """Round to the nearest multiple of COST_STEP, halves going up."""
    return round_half_up(value / COST_STEP) * COST_STEP


@dataclass(frozen=True)
class Range:
    min: int
    max: int

    def to_dict(self):
        return {'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class EstimateInput:
    industry_id: str
    project_type_id: str
    complexity: str = rate_catalog.DEFAULT_COMPLEXITY
    feature_ids: frozenset = frozenset()

    @classmethod
    def from_dict(cls, data):
        """Build from request data ({'industry', 'project_type', 'complexity', 'features'})"""
        industry_id = data.get('industry') or data.get('industry_id')
        project_type_id = data.get('project_type') or data.get('project_type_id')
        for key, value in (('industry', industry_id), ('project_type', project_type_id)):
            if value is not None and not isinstance(value, str):
                raise InvalidSelectionError(f"'{key}' must be a string id")

        complexity = data.get('complexity') or rate_catalog.DEFAULT_COMPLEXITY
        if not isinstance(complexity, str):
            complexity = str(complexity)

        features = data.get('features') or data.get('feature_ids') or []
        if isinstance(features, str):
            features = [f for f in features.split(',') if f]
        if not isinstance(features, (list, tuple, set, frozenset)):
            raise InvalidSelectionError("'features' must be a list of feature ids")

        # Non-string entries become ids that match nothing and are skipped later
        return cls(
            industry_id=industry_id,
            project_type_id=project_type_id,
            complexity=complexity,
            feature_ids=frozenset(str(f) for f in features),
        )


@dataclass(frozen=True)
class Estimate:
    hours: int
    hour_range: Range
    cost: int
    cost_range: Range
    industry_id: str
    industry_name: str
    project_type_id: str
    project_name: str
    complexity: str
    complexity_name: str
    feature_ids: tuple = ()
    feature_names: tuple = ()
    # Identity and timestamp do not take part in equality
    id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    def to_dict(self):
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'hours': self.hours,
            'hour_range': self.hour_range.to_dict(),
            'cost': self.cost,
            'cost_range': self.cost_range.to_dict(),
            'industry_id': self.industry_id,
            'industry_name': self.industry_name,
            'project_type_id': self.project_type_id,
            'project_name': self.project_name,
            'complexity': self.complexity,
            'complexity_name': self.complexity_name,
            'feature_ids': list(self.feature_ids),
            'feature_names': list(self.feature_names),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            hours=int(data['hours']),
            hour_range=Range(**data['hour_range']),
            cost=int(data['cost']),
            cost_range=Range(**data['cost_range']),
            industry_id=data['industry_id'],
            industry_name=data['industry_name'],
            project_type_id=data['project_type_id'],
            project_name=data['project_name'],
            complexity=data['complexity'],
            complexity_name=data['complexity_name'],
            feature_ids=tuple(data.get('feature_ids', [])),
            feature_names=tuple(data.get('feature_names', [])),
        )


def hourly_rate(estimate):
    """Effective hourly rate of an estimate: cost / hours, rounded half-up"""
    return round_half_up(estimate.cost / estimate.hours)


def _resolve_project(industry_id, project_type_id):
    if not industry_id or not project_type_id:
        raise InvalidSelectionError("Industry and project type are both required")
    try:
        industry = rate_catalog.get_industry(industry_id)
        project = rate_catalog.get_project_type(industry_id, project_type_id)
    except NotFoundError as e:
        logger.warning("Rejected estimate selection: %s", e)
        raise InvalidSelectionError(f"Cannot compute estimate: {e}") from e
    return industry, project


def _resolve_complexity(tier_id):
    try:
        return rate_catalog.get_complexity(tier_id)
    except NotFoundError:
        logger.warning("Unrecognized complexity %r, using %s", tier_id, rate_catalog.DEFAULT_COMPLEXITY)
        return rate_catalog.COMPLEXITY_TIERS[rate_catalog.DEFAULT_COMPLEXITY]


def _resolve_features(industry_id, feature_ids):
    """Known features for the industry, in catalog order. Unknown ids are skipped."""
    wanted = set(feature_ids or ())
    known = [f for f in rate_catalog.list_features(industry_id) if f.id in wanted]

    stale = wanted - {f.id for f in known}
    if stale:
        logger.info("Skipping unknown features for %s: %s", industry_id, sorted(stale))
    return known


def calculate(selection, estimate_id=None, now=None):
    """Price an EstimateInput.

    Raises InvalidSelectionError when the industry / project type pairing
    does not resolve. An unknown complexity prices as medium and unknown
    feature ids are ignored.
    """
    industry, project = _resolve_project(selection.industry_id, selection.project_type_id)
    complexity = _resolve_complexity(selection.complexity)
    features = _resolve_features(industry.id, selection.feature_ids)

    hours = project.base_hours * complexity.hour_multiplier
    cost = project.base_cost * complexity.cost_multiplier

    # Catalog order keeps the float product identical for any input order
    for feature in features:
        hours *= feature.hour_multiplier
        cost *= feature.cost_multiplier

    total_hours = max(1, round_half_up(hours))
    total_cost = round_to_50(cost)

    hour_range = Range(
        min=round_half_up(total_hours * HOUR_RANGE_LOW),
        max=round_half_up(total_hours * HOUR_RANGE_HIGH),
    )
    cost_range = Range(
        min=round_to_50(total_cost * COST_RANGE_LOW),
        max=round_to_50(total_cost * COST_RANGE_HIGH),
    )

    extra = {}
    if estimate_id is not None:
        extra['id'] = estimate_id
    if now is not None:
        extra['created_at'] = now

    return Estimate(
        hours=total_hours,
        hour_range=hour_range,
        cost=total_cost,
        cost_range=cost_range,
        industry_id=industry.id,
        industry_name=industry.name,
        project_type_id=project.id,
        project_name=project.name,
        complexity=complexity.id,
        complexity_name=complexity.name,
        feature_ids=tuple(f.id for f in features),
        feature_names=tuple(f.name for f in features),
        **extra
    )


def calculate_estimate(industry, project_type, complexity=rate_catalog.DEFAULT_COMPLEXITY, features=()):
    """Shorthand for calculate(EstimateInput(...))"""
    return calculate(EstimateInput(industry, project_type, complexity, frozenset(features)))
