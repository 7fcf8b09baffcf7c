import os
import sys

import pytest

# Point the app at an in-memory database before it is imported
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret'
os.environ.pop('BILLING_API_URL', None)

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import app as flask_app, db  # noqa: E402


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
    # No app context held open: each test request gets its own
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email='user@example.com', password='secret'):
        response = client.post('/signup', data={'email': email, 'password': password})
        assert response.status_code == 201
        return response.get_json()
    return _login


@pytest.fixture
def pro_user(client, login):
    user = login('pro@example.com')
    response = client.post('/api/subscription/simulate', json={'plan': 'pro'})
    assert response.status_code == 200
    return user
