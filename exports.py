# exports.py

import csv
import io


def format_currency(amount):
    return f"${amount:,.0f}"


def estimate_summary_text(estimate):
    """Plain-text summary of an estimate for copy/paste or download"""

    lines = [
        "FREELANCE PROJECT ESTIMATE",
        "",
        "Project Details",
        f"Industry: {estimate.industry_name}",
        f"Project Type: {estimate.project_name}",
        f"Complexity: {estimate.complexity_name}",
        f"Date: {estimate.created_at.strftime('%b %d, %Y')}",
        "",
        "Estimate Summary",
        f"Time Estimate: {estimate.hour_range.min}-{estimate.hour_range.max} hours",
        f"Cost Estimate: {format_currency(estimate.cost_range.min)}-{format_currency(estimate.cost_range.max)}",
    ]

    if estimate.feature_names:
        lines += ["", "Included Features"]
        lines += [f"- {name}" for name in estimate.feature_names]

    return "\n".join(lines) + "\n"


def _write_rate_rows(writer, comparison):
    writer.writerow(['Experience Level', 'Hourly Rate', 'Comparison', 'Annual Income (Full-time)'])
    for row in comparison.rows:
        writer.writerow([row.experience_level, row.hourly_rate, f"{row.percent_diff}%", row.annual_income])
    writer.writerow(['Your Rate', comparison.your_rate, '0%', comparison.your_annual_income])


def market_rates_csv(comparison, industry_name, project_name):
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([f"Market Rates for {industry_name} - {project_name}"])
    writer.writerow([f"Location: {comparison.location_name}"])
    writer.writerow([])
    _write_rate_rows(writer, comparison)

    return output.getvalue()


def estimate_report_csv(estimate, breakdown=None, comparison=None, profitability=None):
    """Full CSV report: estimate, then whichever analyses are supplied"""

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['Estimate', estimate.id])
    writer.writerow(['Industry', estimate.industry_name])
    writer.writerow(['Project Type', estimate.project_name])
    writer.writerow(['Complexity', estimate.complexity_name])
    writer.writerow(['Features', '; '.join(estimate.feature_names)])
    writer.writerow(['Hours', estimate.hours, estimate.hour_range.min, estimate.hour_range.max])
    writer.writerow(['Cost', estimate.cost, estimate.cost_range.min, estimate.cost_range.max])

    if breakdown:
        writer.writerow([])
        writer.writerow(['Task', 'Hours', 'Cost', '% of Project'])
        for line in breakdown:
            writer.writerow([line.name, line.hours, line.cost, line.percentage])

    if comparison:
        writer.writerow([])
        writer.writerow([f"Market Rates ({comparison.location_name})"])
        _write_rate_rows(writer, comparison)

    if profitability:
        writer.writerow([])
        writer.writerow(['Profitability', 'Value'])
        for key, value in profitability.to_dict().items():
            if key in ('recommendation', 'warnings'):
                continue
            writer.writerow([key, value])
        writer.writerow(['recommendation', profitability.recommendation])

    return output.getvalue()
