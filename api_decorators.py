"""
JWT authentication for the expense API.

Tokens are stateless: they are minted at login, expire on their own, and are
never stored server-side. Logout is the client discarding its token.
"""
import logging
from functools import wraps
from datetime import datetime, timezone

import jwt
from flask import request, g, current_app

from errors import MissingTokenError, InvalidTokenError
from extensions import db
from models import User

logger = logging.getLogger(__name__)

TOKEN_TYPE = 'access'


def generate_access_token(user_id):
    """Generate a signed, time-limited access token.

    Args:
        user_id: The user's ID

    Returns:
        JWT access token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        # PyJWT requires a string subject
        'sub': str(user_id),
        'type': TOKEN_TYPE,
        'iat': now,
        'exp': now + current_app.config['JWT_ACCESS_TOKEN_EXPIRES'],
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def decode_token(token):
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict

    Raises:
        jwt.ExpiredSignatureError: Token has expired
        jwt.InvalidTokenError: Token is invalid
    """
    return jwt.decode(
        token,
        current_app.config['JWT_SECRET_KEY'],
        algorithms=[current_app.config['JWT_ALGORITHM']],
        options={'require': ['exp', 'sub']},
    )


def get_bearer_token():
    """Extract the bearer token from the Authorization header, or None."""
    auth_header = request.headers.get('Authorization', '')
    scheme, _, token = auth_header.partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return token.strip() or None


def verify_token(token):
    """Verify a token and return the user ID it asserts.

    Does not check that the user still exists; see jwt_required.

    Raises:
        MissingTokenError: No token presented
        InvalidTokenError: Bad signature, expired, malformed, or wrong type
    """
    if not token:
        raise MissingTokenError()

    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError('Token expired')
    except jwt.InvalidTokenError:
        raise InvalidTokenError()

    if payload.get('type') != TOKEN_TYPE:
        raise InvalidTokenError('Invalid token type')

    try:
        return int(payload['sub'])
    except (TypeError, ValueError):
        raise InvalidTokenError()


def jwt_required(f):
    """Decorator requiring a valid JWT access token.

    Sets g.current_user_id and g.current_user from the token.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        user_id = verify_token(get_bearer_token())

        # Reject tokens whose user no longer exists
        user = db.session.get(User, user_id)
        if user is None:
            logger.warning(f"Token presented for missing user ID {user_id}")
            raise InvalidTokenError('User not found')

        g.current_user_id = user_id
        g.current_user = user

        return f(*args, **kwargs)
    return decorated
