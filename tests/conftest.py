"""
Shared pytest fixtures for expense tracker tests.
"""
import os
import sys

import pytest

# Add project root and tests directory to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
tests_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)
sys.path.insert(0, tests_dir)

# ============================================================================
# Configuration
# ============================================================================

# Centralized test user credentials
TEST_USERS = {
    'alice': {
        'username': 'alice',
        'email': 'alice@x.com',
        'password': 'pw123',
    },
    'bob': {
        'username': 'bob',
        'email': 'bob@example.com',
        'password': 'BobPass456',
    },
}


# ============================================================================
# Flask App Fixtures
# ============================================================================

@pytest.fixture
def app():
    """Create a Flask app backed by a fresh in-memory database."""
    from app import create_app
    flask_app = create_app('testing')
    yield flask_app

    from extensions import db as _db
    with flask_app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    """Get database instance."""
    from extensions import db as _db
    return _db


@pytest.fixture
def app_context(app):
    """Provide app context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    """Create test client for API tests."""
    return app.test_client()


# ============================================================================
# Authentication Helper Fixtures
# ============================================================================

@pytest.fixture
def register_user(client):
    """Factory fixture to register a test user via the API."""
    def _register(user_key: str):
        user_data = TEST_USERS[user_key]
        response = client.post('/register', json=user_data)
        assert response.status_code == 201, response.get_json()
        return {**user_data, 'id': response.get_json()['user']['id']}

    return _register


def get_auth_token(client, email, password):
    """Helper to get auth token."""
    response = client.post('/login', json={
        'email': email,
        'password': password
    })
    return response.get_json()['token']


@pytest.fixture
def auth_headers(client, register_user):
    """Factory fixture returning Authorization headers for a registered test user."""
    def _headers(user_key: str):
        user = register_user(user_key)
        token = get_auth_token(client, user['email'], user['password'])
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def add_expense(client):
    """Factory fixture to add an expense via the API."""
    def _add(headers, category='Food', amount=10, title='Lunch', date='2024-01-01'):
        payload = {'category': category, 'amount': amount, 'title': title}
        if date is not None:
            payload['date'] = date
        response = client.post('/api/expenses/add', json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()['expense']

    return _add
