# market_rates.py

from dataclasses import dataclass, field
from typing import List

from errors import NotFoundError
from estimate_calculator import hourly_rate, round_half_up

HOURS_PER_WEEK = 40
WEEKS_PER_YEAR = 50

BASE_RATES = {
    'webdev': [
        ('Junior (1-2 years)', 35),
        ('Mid-level (3-5 years)', 65),
        ('Senior (5-8 years)', 100),
        ('Expert (8+ years)', 150),
        ('Agency Average', 125),
    ],
    'design': [
        ('Junior (1-2 years)', 30),
        ('Mid-level (3-5 years)', 55),
        ('Senior (5-8 years)', 85),
        ('Expert (8+ years)', 125),
        ('Agency Average', 110),
    ],
    'writing': [
        ('Junior (1-2 years)', 25),
        ('Mid-level (3-5 years)', 45),
        ('Senior (5-8 years)', 75),
        ('Expert (8+ years)', 120),
        ('Agency Average', 95),
    ],
    'marketing': [
        ('Junior (1-2 years)', 30),
        ('Mid-level (3-5 years)', 60),
        ('Senior (5-8 years)', 95),
        ('Expert (8+ years)', 145),
        ('Agency Average', 125),
    ],
    'video': [
        ('Junior (1-2 years)', 35),
        ('Mid-level (3-5 years)', 70),
        ('Senior (5-8 years)', 110),
        ('Expert (8+ years)', 160),
        ('Agency Average', 140),
    ],
}

LOCATIONS = {
    'us_average': ('United States (Average)', 1.0),
    'us_west_coast': ('US West Coast', 1.35),
    'us_east_coast': ('US East Coast', 1.25),
    'us_midwest': ('US Midwest', 0.85),
    'us_south': ('US South', 0.9),
    'western_europe': ('Western Europe', 1.15),
    'eastern_europe': ('Eastern Europe', 0.6),
    'uk': ('United Kingdom', 1.1),
    'australia': ('Australia', 1.05),
    'canada': ('Canada', 0.95),
    'asia': ('Asia', 0.55),
    'latin_america': ('Latin America', 0.65),
}

PROJECT_TYPE_MULTIPLIERS = {
    'webdev': {'landing': 0.8, 'website': 1.0, 'ecommerce': 1.2, 'webapp': 1.3},
    'design': {'logo': 1.0, 'branding': 1.2, 'social': 0.85, 'print': 0.9},
    'writing': {'article': 0.9, 'whitepaper': 1.3, 'emailseq': 1.0, 'seo': 1.1},
    'marketing': {'smm': 1.0, 'ppc': 1.1, 'seo': 1.2, 'email': 0.9},
    'video': {'explainer': 1.1, 'promo': 1.0, 'interview': 0.9, 'animation': 1.3},
}

# Market position labels, most favorable first
PREMIUM = 'Premium'
ABOVE_AVERAGE = 'Above Average'
COMPETITIVE = 'Competitive'
BELOW_AVERAGE = 'Below Average'
UNDERPRICED = 'Significantly Underpriced'

RECOMMENDATIONS = {
    PREMIUM: [
        'Your rate is significantly higher than market average, which works if you offer premium service.',
        'Ensure your service quality and deliverables justify the premium pricing.',
        'Consider highlighting your unique value proposition in proposals.',
        'Track client satisfaction closely to validate premium pricing.',
    ],
    ABOVE_AVERAGE: [
        'Your rate is above market average, positioning you as a higher-quality provider.',
        'Emphasize your expertise and quality in your client communications.',
        'Consider creating case studies to demonstrate your value.',
        'Look for opportunities to offer premium add-on services.',
    ],
    COMPETITIVE: [
        'Your rate is in line with market averages, which is a competitive position.',
        'To increase profitability, look for efficiency improvements in your process.',
        'Consider creating service packages that include higher-value components.',
        "Track your utilization rate to ensure you're maximizing billable hours.",
    ],
    BELOW_AVERAGE: [
        'Your rate is below market average, which may be leaving money on the table.',
        'Consider gradually increasing your rates for new clients.',
        'Focus on demonstrating your value through case studies and testimonials.',
        'Look for higher-value projects where clients are less price-sensitive.',
    ],
    UNDERPRICED: [
        'Your rate is significantly below market average, suggesting you are undervaluing your services.',
        'Develop a plan to increase your rates significantly, either immediately or over time.',
        'Consider repositioning your services to target clients who value quality over price.',
        'Review your costs and ensure your current rates are at least covering all expenses and providing adequate profit.',
    ],
}

INDUSTRY_NOTES = {
    'webdev': 'Web development rates vary significantly based on complexity, technologies used, and client size.',
    'design': 'Design rates can vary based on client industry, deliverable quality, and your personal style/brand.',
    'writing': 'Writing rates vary based on specialization, research requirements, and content complexity.',
    'marketing': 'Marketing rates depend on channel expertise, campaign scale, and the ability to show measurable results.',
    'video': 'Video production rates reflect equipment, post-production skill, and turnaround expectations.',
}

PROJECT_NOTES = {
    ('webdev', 'ecommerce'): 'E-commerce development tends to command higher rates due to the specialized knowledge required for payment integration, security, and inventory management.',
    ('webdev', 'webapp'): 'Web application development typically demands higher rates due to the complexity of interactive features and backend infrastructure.',
    ('design', 'branding'): 'Brand package work typically commands premium rates due to the strategic thinking and comprehensive deliverables involved.',
    ('design', 'logo'): 'Logo design has a wide range of pricing, from budget-friendly to high-end, based on research, iterations, and originality.',
    ('writing', 'whitepaper'): 'Whitepapers and technical writing typically command higher rates due to the expertise and research required.',
    ('writing', 'seo'): 'SEO content has specialized requirements that can justify higher rates when you demonstrate measurable results.',
}

DEFAULT_NOTE = 'Consider your unique value proposition and the specific needs of your target clients when setting your rates.'


@dataclass(frozen=True)
class MarketRateRow:
    experience_level: str
    hourly_rate: int
    percent_diff: int = 0
    position: str = COMPETITIVE
    annual_income: int = 0

    def to_dict(self):
        return {
            'experience_level': self.experience_level,
            'hourly_rate': self.hourly_rate,
            'percent_diff': self.percent_diff,
            'position': self.position,
            'annual_income': self.annual_income,
        }


@dataclass
class RateComparison:
    location: str
    location_name: str
    your_rate: int
    your_annual_income: int
    market_average: float
    percent_diff: int
    position: str
    rows: List[MarketRateRow] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    industry_note: str = ''

    def to_dict(self):
        return {
            'location': self.location,
            'location_name': self.location_name,
            'your_rate': self.your_rate,
            'your_annual_income': self.your_annual_income,
            'market_average': self.market_average,
            'percent_diff': self.percent_diff,
            'position': self.position,
            'rows': [r.to_dict() for r in self.rows],
            'recommendations': list(self.recommendations),
            'industry_note': self.industry_note,
        }


def location_name(location):
    entry = LOCATIONS.get(location)
    return entry[0] if entry else location


def location_multiplier(location):
    entry = LOCATIONS.get(location)
    return entry[1] if entry else 1.0


def project_type_multiplier(industry_id, project_type_id):
    return PROJECT_TYPE_MULTIPLIERS.get(industry_id, {}).get(project_type_id, 1.0)


def percent_difference(your_rate, market_rate):
    """Whole-percent difference of your_rate relative to market_rate"""
    return round_half_up((your_rate - market_rate) / market_rate * 100)


def market_position(percent_diff):
    """Place a percent difference on the ordinal market scale.

    >30 Premium, >10 Above Average, -10..10 Competitive,
    -30..-10 Below Average, below -30 Significantly Underpriced.
    A value sitting on a boundary takes the more favorable label.
    """
    if percent_diff > 30:
        return PREMIUM
    if percent_diff > 10:
        return ABOVE_AVERAGE
    if percent_diff >= -10:
        return COMPETITIVE
    if percent_diff >= -30:
        return BELOW_AVERAGE
    return UNDERPRICED


def annual_income(rate, hours_per_week=HOURS_PER_WEEK):
    return int(rate * hours_per_week * WEEKS_PER_YEAR)


def market_rates(industry_id, project_type_id, location):
    """Adjusted (experience level, hourly rate) pairs for an industry."""
    bands = BASE_RATES.get(industry_id)
    if bands is None:
        raise NotFoundError(f"No market rate data for industry '{industry_id}'")

    multiplier = location_multiplier(location) * project_type_multiplier(industry_id, project_type_id)
    return [(level, round_half_up(rate * multiplier)) for level, rate in bands]


def industry_note(industry_id, project_type_id):
    base = INDUSTRY_NOTES.get(industry_id)
    if base is None:
        return DEFAULT_NOTE
    detail = PROJECT_NOTES.get((industry_id, project_type_id))
    if detail is None:
        return base
    return f"{base} {detail}"


def compare_rates(estimate, location='us_average', industry_id=None, project_type_id=None):
    """Compare an estimate's effective hourly rate with market bands"""

    industry_id = industry_id or estimate.industry_id
    project_type_id = project_type_id or estimate.project_type_id

    bands = market_rates(industry_id, project_type_id, location)
    your_rate = hourly_rate(estimate)

    rows = []
    for level, rate in bands:
        diff = percent_difference(your_rate, rate)
        rows.append(MarketRateRow(
            experience_level=level,
            hourly_rate=rate,
            percent_diff=diff,
            position=market_position(diff),
            annual_income=annual_income(rate),
        ))

    average = sum(rate for _, rate in bands) / len(bands)
    overall_diff = percent_difference(your_rate, average)
    position = market_position(overall_diff)

    return RateComparison(
        location=location,
        location_name=location_name(location),
        your_rate=your_rate,
        your_annual_income=annual_income(your_rate),
        market_average=round(average, 2),
        percent_diff=overall_diff,
        position=position,
        rows=rows,
        recommendations=list(RECOMMENDATIONS[position]),
        industry_note=industry_note(industry_id, project_type_id),
    )
