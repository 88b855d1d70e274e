"""
Tests for registration, login, and the token gate.

Tests:
- POST /register
- POST /login
- Authorization header handling on protected routes
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import TEST_USERS, get_auth_token


pytestmark = pytest.mark.api


class TestRegister:
    """Tests for POST /register"""

    def test_register_success(self, client):
        """New user can register and gets no token back."""
        response = client.post('/register', json=TEST_USERS['alice'])

        assert response.status_code == 201
        data = response.get_json()
        assert data['message'] == 'User registered successfully'
        assert data['user']['email'] == 'alice@x.com'
        assert 'token' not in data
        assert 'password' not in data['user']

    def test_password_is_hashed(self, app, client):
        """The stored password is a salted hash, never the plaintext."""
        from models import User
        client.post('/register', json=TEST_USERS['alice'])

        with app.app_context():
            user = User.query.filter_by(email='alice@x.com').first()
            assert user.password_hash != 'pw123'
            assert user.password_hash.startswith('pbkdf2:sha256')
            assert user.check_password('pw123')

    def test_duplicate_email_rejected(self, client):
        """A second registration with the same email always fails."""
        client.post('/register', json=TEST_USERS['alice'])

        response = client.post('/register', json={
            'username': 'someone else',
            'email': 'alice@x.com',
            'password': 'different'
        })

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Email already in use'}

    def test_duplicate_email_is_case_insensitive(self, client):
        """Emails are stored lower-cased so case variants collide."""
        client.post('/register', json=TEST_USERS['alice'])

        response = client.post('/register', json={
            'username': 'alice2',
            'email': '  ALICE@X.com ',
            'password': 'pw123'
        })

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Email already in use'

    def test_missing_fields(self, client):
        """Missing fields are listed in the error."""
        response = client.post('/register', json={'username': 'alice'})

        assert response.status_code == 400
        data = response.get_json()
        assert 'email' in data['errors']
        assert 'password' in data['errors']

    def test_empty_password_rejected(self, client):
        response = client.post('/register', json={
            'username': 'alice', 'email': 'alice@x.com', 'password': ''
        })

        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']

    def test_invalid_email_rejected(self, client):
        response = client.post('/register', json={
            'username': 'alice', 'email': 'not-an-email', 'password': 'pw123'
        })

        assert response.status_code == 400
        assert response.get_json()['errors']['email'] == 'Please enter a valid email address'

    def test_no_body(self, client):
        response = client.post('/register')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Request body required'


class TestLogin:
    """Tests for POST /login"""

    def test_login_success(self, app, client, register_user):
        """Valid credentials return a token for the user."""
        user = register_user('alice')

        response = client.post('/login', json={
            'email': user['email'],
            'password': user['password']
        })

        assert response.status_code == 200
        token = response.get_json()['token']
        payload = jwt.decode(token, app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
        assert payload['sub'] == str(user['id'])
        assert payload['type'] == 'access'

    def test_token_expires_after_configured_window(self, app, client, register_user):
        user = register_user('alice')
        token = get_auth_token(client, user['email'], user['password'])

        payload = jwt.decode(token, app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
        assert payload['exp'] - payload['iat'] == 3600

    def test_wrong_password_and_unknown_email_look_the_same(self, client, register_user):
        """Login failures never reveal whether the email exists."""
        register_user('alice')

        wrong_password = client.post('/login', json={
            'email': 'alice@x.com', 'password': 'nope'
        })
        unknown_email = client.post('/login', json={
            'email': 'nobody@x.com', 'password': 'pw123'
        })

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.get_json() == unknown_email.get_json() == {
            'message': 'Invalid email or password'
        }

    def test_login_email_case_insensitive(self, client, register_user):
        register_user('alice')

        response = client.post('/login', json={'email': 'Alice@X.COM', 'password': 'pw123'})

        assert response.status_code == 200

    def test_login_missing_password(self, client):
        response = client.post('/login', json={'email': 'alice@x.com'})

        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']


class TestTokenGate:
    """Tests for the bearer token check on protected routes."""

    def _token(self, app, user_id, secret=None, **overrides):
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'type': 'access',
            'iat': now,
            'exp': now + timedelta(hours=1),
        }
        payload.update(overrides)
        return jwt.encode(payload, secret or app.config['JWT_SECRET_KEY'], algorithm='HS256')

    def test_missing_token_is_401(self, client):
        response = client.get('/api/expenses')

        assert response.status_code == 401
        assert response.get_json() == {'message': 'Unauthorized, token missing'}

    def test_non_bearer_header_is_401(self, client):
        response = client.get('/api/expenses', headers={'Authorization': 'Basic abc'})

        assert response.status_code == 401

    def test_garbage_token_is_403(self, client):
        response = client.get('/api/expenses', headers={'Authorization': 'Bearer not.a.jwt'})

        assert response.status_code == 403
        assert response.get_json() == {'message': 'Invalid token'}

    def test_wrong_signature_is_403(self, app, client, register_user):
        user = register_user('alice')
        token = self._token(app, user['id'], secret='some-other-secret')

        response = client.get('/api/expenses', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 403

    def test_expired_token_is_403(self, app, client, register_user):
        user = register_user('alice')
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self._token(app, user['id'], iat=past, exp=past + timedelta(hours=1))

        response = client.get('/api/expenses', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 403
        assert response.get_json() == {'message': 'Token expired'}

    def test_wrong_token_type_is_403(self, app, client, register_user):
        user = register_user('alice')
        token = self._token(app, user['id'], type='refresh')

        response = client.get('/api/expenses', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 403

    def test_token_for_deleted_user_is_403(self, app, db, client, register_user):
        """A valid token stops working once its user is gone."""
        from models import User
        user = register_user('alice')
        token = get_auth_token(client, user['email'], user['password'])

        with app.app_context():
            db.session.delete(db.session.get(User, user['id']))
            db.session.commit()

        response = client.get('/api/expenses', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 403

    def test_valid_token_passes(self, client, auth_headers):
        response = client.get('/api/expenses', headers=auth_headers('alice'))

        assert response.status_code == 200
        assert response.get_json() == []
