import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-this')
    # Absolute path to database folder, works even if the project is moved
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DB_PATH = os.path.join(BASE_DIR, "database", "estimator.db")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL', f"sqlite:///{DB_PATH.replace(os.sep, '/')}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Billing provider
    BILLING_API_URL = os.getenv('BILLING_API_URL')
    BILLING_API_KEY = os.getenv('BILLING_API_KEY')
    BILLING_TIMEOUT = float(os.getenv('BILLING_TIMEOUT', '10'))
    ALLOW_SIMULATED_BILLING = _env_bool('ALLOW_SIMULATED_BILLING', True)

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # App Settings
    FREE_SAVED_ESTIMATE_LIMIT = 3
    DEFAULT_LOCATION = 'us_average'
    DEFAULT_OVERHEAD_PCT = 30
    DEFAULT_TARGET_PROFIT_PCT = 20
    DEFAULT_NON_BILLABLE_PCT = 25
