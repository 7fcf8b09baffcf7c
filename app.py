from flask import Flask, request, jsonify, send_file
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, UserMixin, login_user, logout_user, login_required, current_user
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timezone
import io
import json
import logging
import math
import os

from config import Config
from logging_config import setup_logging
import rate_catalog
import entitlements
from billing import BillingClient, simulate_subscription, cancel_subscription
from errors import InvalidSelectionError, NotFoundError
from estimate_calculator import Estimate, EstimateInput, calculate
from exports import estimate_report_csv, estimate_summary_text, market_rates_csv
from market_rates import compare_rates
from profitability import analyze
from risk_assessment import risks_for_estimate
from task_breakdown import generate_breakdown

setup_logging(Config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize
app = Flask(__name__)
app.config.from_object(Config)

if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
    os.makedirs(os.path.dirname(Config.DB_PATH), exist_ok=True)

db = SQLAlchemy(app)

login_manager = LoginManager()
login_manager.init_app(app)

billing = BillingClient(
    base_url=app.config['BILLING_API_URL'],
    api_key=app.config['BILLING_API_KEY'],
    timeout=app.config['BILLING_TIMEOUT'],
)


def _utcnow():
    return datetime.now(timezone.utc)


# Database Models
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    plan = db.Column(db.String(20), default='free', nullable=False)
    subscription_active = db.Column(db.Boolean, default=False, nullable=False)
    billing_customer_id = db.Column(db.String(120))

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def current_plan(self):
        return billing.current_plan(self)

    def saved_estimate_count(self):
        return SavedEstimate.query.filter_by(user_id=self.id).count()


class SavedEstimate(db.Model):
    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    payload = db.Column(db.Text, nullable=False)  # Estimate.to_dict() as JSON
    created_at = db.Column(db.DateTime, default=_utcnow)

    def to_estimate(self):
        return Estimate.from_dict(json.loads(self.payload))


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'error': 'login_required'}), 401


@app.errorhandler(InvalidSelectionError)
def handle_invalid_selection(e):
    return jsonify({'error': 'invalid_selection', 'message': str(e)}), 400


@app.errorhandler(NotFoundError)
def handle_not_found(e):
    return jsonify({'error': 'not_found', 'message': str(e)}), 400


# Helpers
def request_data():
    """JSON body if there is one, otherwise form fields"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    form = request.form.to_dict()
    if 'features' in request.form:
        form['features'] = request.form.getlist('features')
    return form


def upgrade_required(feature):
    plan = entitlements.required_plan(feature)
    return jsonify({
        'error': 'upgrade_required',
        'feature': feature,
        'required_plan': plan.value if plan else None,
        'message': f"Upgrade to {plan.value.title() if plan else 'a paid plan'} to unlock this feature.",
    }), 403


def user_has(feature):
    return entitlements.has_feature(current_user.current_plan(), feature)


def load_saved_estimate(estimate_id):
    """(estimate, error_response) for one of the current user's estimates"""
    saved = db.get_or_404(SavedEstimate, estimate_id)
    if saved.user_id != current_user.id:
        return None, (jsonify({'error': 'Access denied'}), 403)
    return saved.to_estimate(), None


def float_arg(data, key, default):
    value = data.get(key)
    if value is None or value == '':
        return float(default)
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{key} must be a finite number")
    return value


def clean_email(value):
    if not isinstance(value, str):
        return ''
    return value.strip().lower()


# Routes
@app.route('/')
def index():
    return jsonify({
        'service': 'freelance-estimator',
        'endpoints': ['/api/catalog', '/api/estimate', '/api/estimates', '/api/subscription'],
    })


@app.route('/api/catalog')
def catalog():
    return jsonify(rate_catalog.catalog_as_dict())


@app.route('/signup', methods=['POST'])
def signup():
    data = request_data()
    email = clean_email(data.get('email'))
    password = data.get('password')

    if not email or not password or not isinstance(password, str):
        return jsonify({'error': 'Email and password are required'}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 409

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    login_user(user)
    logger.info("New user %s", user.id)
    return jsonify({'id': user.id, 'email': user.email, 'plan': user.current_plan()}), 201


@app.route('/login', methods=['POST'])
def login():
    data = request_data()
    email = clean_email(data.get('email'))
    password = data.get('password') or ''

    user = User.query.filter_by(email=email).first()

    if user and isinstance(password, str) and user.check_password(password):
        login_user(user)
        return jsonify({'id': user.id, 'email': user.email, 'plan': user.current_plan()})

    return jsonify({'error': 'Invalid credentials'}), 401


@app.route('/logout')
@login_required
def logout():
    logout_user()
    return jsonify({'status': 'logged_out'})


@app.route('/api/estimate', methods=['POST'])
def estimate():
    """Price a selection without saving it"""
    result = calculate(EstimateInput.from_dict(request_data()))
    return jsonify(result.to_dict())


@app.route('/api/estimates', methods=['GET'])
@login_required
def list_estimates():
    saved = SavedEstimate.query.filter_by(user_id=current_user.id)\
        .order_by(SavedEstimate.created_at.asc()).all()
    plan = current_user.current_plan()

    return jsonify({
        'plan': entitlements.resolve_plan(plan).value,
        'remaining_free_estimates': entitlements.remaining_free_estimates(
            plan, len(saved), app.config['FREE_SAVED_ESTIMATE_LIMIT']),
        'estimates': [s.to_estimate().to_dict() for s in saved],
    })


def limit_reached(limit):
    return jsonify({
        'error': 'limit_reached',
        'message': f"Free plan can save up to {limit} estimates. Upgrade to Pro for unlimited saves.",
        'required_plan': entitlements.Plan.PRO.value,
    }), 403


@app.route('/api/estimates', methods=['POST'])
@login_required
def save_estimate():
    plan = current_user.current_plan()
    limit = app.config['FREE_SAVED_ESTIMATE_LIMIT']

    if not entitlements.can_save_more_estimates(plan, current_user.saved_estimate_count(), limit):
        return limit_reached(limit)

    estimate = calculate(EstimateInput.from_dict(request_data()))

    saved = SavedEstimate(
        id=estimate.id,
        user_id=current_user.id,
        payload=json.dumps(estimate.to_dict()),
        created_at=estimate.created_at,
    )
    db.session.add(saved)
    db.session.flush()

    # Count again inside the write transaction; a concurrent save may have landed since the first check
    if not entitlements.can_save_more_estimates(plan, current_user.saved_estimate_count() - 1, limit):
        db.session.rollback()
        logger.info("User %s hit the saved estimate limit during save", current_user.id)
        return limit_reached(limit)

    db.session.commit()
    logger.info("User %s saved estimate %s", current_user.id, estimate.id)

    return jsonify(estimate.to_dict()), 201


@app.route('/api/estimates/<string:estimate_id>', methods=['GET'])
@login_required
def get_estimate(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    return jsonify(estimate.to_dict())


@app.route('/api/estimates/<string:estimate_id>', methods=['DELETE'])
@login_required
def delete_estimate(estimate_id):
    saved = db.get_or_404(SavedEstimate, estimate_id)
    if saved.user_id != current_user.id:
        return jsonify({'error': 'Access denied'}), 403

    db.session.delete(saved)
    db.session.commit()
    logger.info("User %s deleted estimate %s", current_user.id, estimate_id)
    return jsonify({'deleted': estimate_id})


@app.route('/api/estimates/<string:estimate_id>/breakdown')
@login_required
def estimate_breakdown(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    if not user_has('project_breakdown'):
        return upgrade_required('project_breakdown')

    lines = generate_breakdown(estimate)
    return jsonify({
        'estimate_id': estimate.id,
        'total_hours': estimate.hours,
        'total_cost': estimate.cost,
        'tasks': [line.to_dict() for line in lines],
    })


@app.route('/api/estimates/<string:estimate_id>/risks')
@login_required
def estimate_risks(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    if not user_has('risk_assessment'):
        return upgrade_required('risk_assessment')

    return jsonify({
        'estimate_id': estimate.id,
        'risks': [risk.to_dict() for risk in risks_for_estimate(estimate)],
    })


@app.route('/api/estimates/<string:estimate_id>/market-rates')
@login_required
def estimate_market_rates(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    if not user_has('competitor_rates'):
        return upgrade_required('competitor_rates')

    location = request.args.get('location', app.config['DEFAULT_LOCATION'])
    return jsonify(compare_rates(estimate, location).to_dict())


@app.route('/api/estimates/<string:estimate_id>/market-rates/export')
@login_required
def export_market_rates(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    if not user_has('competitor_rates'):
        return upgrade_required('competitor_rates')

    location = request.args.get('location', app.config['DEFAULT_LOCATION'])
    comparison = compare_rates(estimate, location)
    content = market_rates_csv(comparison, estimate.industry_name, estimate.project_name)

    return send_file(
        io.BytesIO(content.encode()),
        mimetype='text/csv',
        as_attachment=True,
        download_name=f'market_rates_{estimate.industry_id}_{estimate.project_type_id}.csv'
    )


@app.route('/api/estimates/<string:estimate_id>/profitability', methods=['POST'])
@login_required
def estimate_profitability(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error
    if not user_has('profitability_analysis'):
        return upgrade_required('profitability_analysis')

    data = request_data()
    try:
        overhead = float_arg(data, 'overhead_pct', app.config['DEFAULT_OVERHEAD_PCT'])
        target = float_arg(data, 'target_profit_pct', app.config['DEFAULT_TARGET_PROFIT_PCT'])
        non_billable = float_arg(data, 'non_billable_pct', app.config['DEFAULT_NON_BILLABLE_PCT'])
    except (TypeError, ValueError):
        return jsonify({'error': 'Percentages must be numbers'}), 400

    result = analyze(estimate, overhead, target, non_billable)
    return jsonify(result.to_dict())


@app.route('/api/estimates/<string:estimate_id>/export')
@login_required
def export_estimate(estimate_id):
    estimate, error = load_saved_estimate(estimate_id)
    if error:
        return error

    fmt = request.args.get('format', 'txt')

    if fmt == 'txt':
        content = estimate_summary_text(estimate)
        mimetype = 'text/plain'
    elif fmt == 'csv':
        if not user_has('export_report'):
            return upgrade_required('export_report')
        content = estimate_report_csv(
            estimate,
            breakdown=generate_breakdown(estimate),
            comparison=compare_rates(estimate, app.config['DEFAULT_LOCATION']),
            profitability=analyze(
                estimate,
                app.config['DEFAULT_OVERHEAD_PCT'],
                app.config['DEFAULT_TARGET_PROFIT_PCT'],
                app.config['DEFAULT_NON_BILLABLE_PCT'],
            ),
        )
        mimetype = 'text/csv'
    else:
        return jsonify({'error': f"Unsupported format '{fmt}'"}), 400

    return send_file(
        io.BytesIO(content.encode()),
        mimetype=mimetype,
        as_attachment=True,
        download_name=f'estimate_{estimate_id}.{fmt}'
    )


@app.route('/api/subscription')
@login_required
def subscription():
    status = billing.subscription_status(current_user)
    plan = current_user.current_plan()
    resolved = entitlements.resolve_plan(plan)

    return jsonify({
        'active': status['active'],
        'plan': resolved.value,
        'features': sorted(entitlements.FEATURE_ACCESS[resolved]),
        'remaining_free_estimates': entitlements.remaining_free_estimates(
            plan, current_user.saved_estimate_count(), app.config['FREE_SAVED_ESTIMATE_LIMIT']),
    })


@app.route('/api/subscription/simulate', methods=['POST'])
@login_required
def subscription_simulate():
    if not app.config['ALLOW_SIMULATED_BILLING'] or billing.is_remote:
        return jsonify({'error': 'Simulated billing is disabled'}), 403

    plan = simulate_subscription(current_user, request_data().get('plan'))
    db.session.commit()
    return jsonify({'plan': plan.value, 'active': current_user.subscription_active})


@app.route('/api/subscription/cancel', methods=['POST'])
@login_required
def subscription_cancel():
    if not app.config['ALLOW_SIMULATED_BILLING'] or billing.is_remote:
        return jsonify({'error': 'Simulated billing is disabled'}), 403

    cancel_subscription(current_user)
    db.session.commit()
    return jsonify({'plan': current_user.plan, 'active': False})


# Initialize database
with app.app_context():
    db.create_all()

if __name__ == '__main__':
    app.run(debug=True, port=5000)
