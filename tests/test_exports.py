import csv
import io
from datetime import datetime, timezone

from estimate_calculator import EstimateInput, calculate
from exports import estimate_report_csv, estimate_summary_text, market_rates_csv
from market_rates import compare_rates
from profitability import analyze
from task_breakdown import generate_breakdown


def make_estimate():
    return calculate(
        EstimateInput('webdev', 'website', 'medium', frozenset({'responsive'})),
        estimate_id='est1',
        now=datetime(2024, 3, 5, tzinfo=timezone.utc),
    )


class TestExports:
    def test_summary_text(self):
        text = estimate_summary_text(make_estimate())
        assert 'Industry: Web Development' in text
        assert 'Date: Mar 05, 2024' in text
        assert 'Time Estimate: 38-58 hours' in text
        assert 'Cost Estimate: $2,150-$2,650' in text
        assert '- Responsive Design' in text

    def test_market_rates_csv(self):
        est = make_estimate()
        rows = list(csv.reader(io.StringIO(market_rates_csv(compare_rates(est), 'Web Development', 'Full Website'))))
        assert rows[0] == ['Market Rates for Web Development - Full Website']
        assert rows[3][0] == 'Experience Level'
        assert rows[-1][0] == 'Your Rate'

    def test_report_csv(self):
        est = make_estimate()
        content = estimate_report_csv(est, generate_breakdown(est), compare_rates(est), analyze(est))
        rows = list(csv.reader(io.StringIO(content)))
        assert rows[0] == ['Estimate', 'est1']
        assert ['Task', 'Hours', 'Cost', '% of Project'] in rows
        assert any(row and row[0] == 'recommendation' for row in rows)

    def test_report_csv_estimate_only(self):
        rows = list(csv.reader(io.StringIO(estimate_report_csv(make_estimate()))))
        assert len(rows) == 7
