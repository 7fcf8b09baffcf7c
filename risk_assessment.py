# risk_assessment.py

from dataclasses import dataclass

HIGH = 'High'
MEDIUM = 'Medium'
LOW = 'Low'

COMPLEX_TIERS = ('high', 'expert')


@dataclass(frozen=True)
class Risk:
    name: str
    level: str
    description: str
    mitigation: str

    def to_dict(self):
        return {
            'name': self.name,
            'level': self.level,
            'description': self.description,
            'mitigation': self.mitigation,
        }


SCOPE_CREEP = Risk(
    'Scope Creep', HIGH,
    'Complex projects are prone to expanding requirements and unexpected challenges.',
    'Document detailed requirements upfront and use change orders for scope additions.',
)

TIMELINE_UNCERTAINTY = Risk(
    'Timeline Uncertainty', MEDIUM,
    'Complex projects often encounter unexpected challenges that affect timelines.',
    'Build a 20% buffer into your timeline estimates and communicate it with the client.',
)

GENERAL_RISK = Risk(
    'General Project Risk', MEDIUM,
    'All projects carry inherent risks related to timeline, scope, and quality expectations.',
    'Clear communication, detailed contracts, and regular progress updates help mitigate general project risks.',
)

PROJECT_RISKS = {
    ('webdev', 'ecommerce'): Risk(
        'Payment Integration Complexity', MEDIUM,
        'Payment gateways may require additional security measures and testing.',
        'Allow extra time for payment testing and consult security best practices.',
    ),
}

FEATURE_RISKS = {
    ('webdev', 'api'): Risk(
        'External API Dependency', MEDIUM,
        'Reliance on third-party APIs introduces potential points of failure.',
        'Build fallback mechanisms and monitor API status regularly.',
    ),
    ('design', 'rush'): Risk(
        'Rushed Timeline', HIGH,
        'Accelerated timeline may compromise quality or increase stress.',
        'Clarify which elements can be simplified to meet the timeline while preserving quality.',
    ),
}

# Risks every project in the industry carries
INDUSTRY_RISKS = {
    'design': [Risk(
        'Subjective Feedback Cycles', MEDIUM,
        'Design work is subjective and may lead to multiple revision cycles.',
        'Set clear revision limits and use design questionnaires to clarify preferences early.',
    )],
}

# Industries with specific rules; anything else gets GENERAL_RISK
SPECIFIC_INDUSTRIES = {'webdev', 'design'}


def generate_risks(industry_id, project_type_id, complexity, feature_ids=()):
    """Ordered list of risks for a project configuration"""

    risks = []
    complex_project = complexity in COMPLEX_TIERS
    selected = set(feature_ids or ())

    if complex_project:
        risks.append(SCOPE_CREEP)

    if industry_id in SPECIFIC_INDUSTRIES:
        project_risk = PROJECT_RISKS.get((industry_id, project_type_id))
        if project_risk:
            risks.append(project_risk)
        risks.extend(INDUSTRY_RISKS.get(industry_id, []))
        for (industry, feature), risk in FEATURE_RISKS.items():
            if industry == industry_id and feature in selected:
                risks.append(risk)
    else:
        risks.append(GENERAL_RISK)

    if complex_project:
        risks.append(TIMELINE_UNCERTAINTY)

    return risks


def risks_for_estimate(estimate):
    return generate_risks(estimate.industry_id, estimate.project_type_id,
                          estimate.complexity, estimate.feature_ids)
