# task_breakdown.py

import math
from dataclasses import dataclass

from estimate_calculator import round_half_up, round_to_50

INDUSTRY_TEMPLATES = {
    'webdev': [
        ('Project Planning & Requirements', 10),
        ('UI/UX Design', 15),
        ('Frontend Development', 30),
        ('Backend Development', 30),
        ('Testing & Quality Assurance', 10),
        ('Deployment & Documentation', 5),
    ],
    'design': [
        ('Research & Concept Development', 20),
        ('Initial Sketches & Concepts', 15),
        ('Design Refinement', 30),
        ('Client Revisions', 20),
        ('Final Production Files', 15),
    ],
    'writing': [
        ('Research & Outline', 25),
        ('Initial Draft', 40),
        ('Revisions & Editing', 25),
        ('Final Formatting', 10),
    ],
    'marketing': [
        ('Strategy Development', 20),
        ('Content Creation', 25),
        ('Campaign Setup', 20),
        ('Optimization & Management', 25),
        ('Reporting & Analysis', 10),
    ],
    'video': [
        ('Pre-production & Planning', 15),
        ('Shooting/Recording', 25),
        ('Editing & Post-production', 40),
        ('Audio Mastering', 10),
        ('Final Delivery & Revisions', 10),
    ],
}

GENERIC_TEMPLATE = [
    ('Research & Planning', 20),
    ('Development', 50),
    ('Testing & Refinement', 20),
    ('Delivery & Documentation', 10),
]

# Project types with their own template, replacing the industry one
PROJECT_TEMPLATES = {
    ('webdev', 'ecommerce'): [
        ('Project Planning & Requirements', 10),
        ('UI/UX Design', 15),
        ('Frontend Development', 20),
        ('Backend & Database Design', 20),
        ('Payment Integration', 15),
        ('Product Management System', 10),
        ('Testing & Quality Assurance', 5),
        ('Deployment & Documentation', 5),
    ],
}

# Features that append a phase; the template is renormalized afterwards
FEATURE_PHASES = {
    ('webdev', 'cms'): ('CMS Setup & Configuration', 15),
}


@dataclass(frozen=True)
class TaskBreakdownLine:
    name: str
    hours: int
    cost: int
    percentage: int

    def to_dict(self):
        return {
            'name': self.name,
            'hours': self.hours,
            'cost': self.cost,
            'percentage': self.percentage,
        }


def phase_template(industry_id, project_type_id=None, feature_ids=()):
    """Ordered (phase, percentage) pairs for a project, summing to 100."""
    template = PROJECT_TEMPLATES.get((industry_id, project_type_id))
    if template is None:
        template = INDUSTRY_TEMPLATES.get(industry_id, GENERIC_TEMPLATE)
    template = list(template)

    selected = set(feature_ids or ())
    extra = [phase for (industry, feature), phase in FEATURE_PHASES.items()
             if industry == industry_id and feature in selected]
    if extra:
        template = normalize_percentages(template + extra)
    return template


def normalize_percentages(phases):
    """Scale percentages to integers summing exactly to 100.

    Largest remainder: floor every share, then hand the leftover points to
    the largest fractional parts (earlier phases win ties).
    """
    total = sum(pct for _, pct in phases)
    if total <= 0:
        raise ValueError("Phase percentages must sum to a positive number")

    shares = [pct * 100 / total for _, pct in phases]
    floors = [int(math.floor(s)) for s in shares]
    leftover = 100 - sum(floors)

    by_remainder = sorted(range(len(shares)), key=lambda i: (-(shares[i] - floors[i]), i))
    for i in by_remainder[:leftover]:
        floors[i] += 1

    return [(name, floors[i]) for i, (name, _) in enumerate(phases)]


def generate_breakdown(estimate, industry_id=None, project_type_id=None, feature_ids=None):
    """Split an estimate's hours and cost across its phase template.

    Each line rounds on its own, so line totals can differ from the
    estimate by a few hours or one cost step.
    """
    if industry_id is None:
        industry_id = estimate.industry_id
    if project_type_id is None:
        project_type_id = estimate.project_type_id
    if feature_ids is None:
        feature_ids = estimate.feature_ids

    lines = []
    for name, pct in phase_template(industry_id, project_type_id, feature_ids):
        lines.append(TaskBreakdownLine(
            name=name,
            hours=round_half_up(pct / 100 * estimate.hours),
            cost=round_to_50(pct / 100 * estimate.cost),
            percentage=pct,
        ))
    return lines
