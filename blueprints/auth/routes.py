"""
Authentication routes: register, login.

Endpoints:
- POST /register - Create an account (no token issued)
- POST /login - Exchange email/password for an access token
"""
import logging

from flask import request, jsonify

from extensions import limiter
from api_decorators import generate_access_token
from errors import InvalidCredentialsError
from schemas import RegisterRequest, LoginRequest, parse_payload
from services.user_service import UserService
from blueprints.auth import auth_bp

logger = logging.getLogger(__name__)


@auth_bp.route('/register', methods=['POST'])
@limiter.limit("5 per minute")
def register():
    """Register a new user account.

    Request body:
        {
            "username": "alice",
            "email": "alice@example.com",
            "password": "secret"
        }

    Returns:
        {"message": "User registered successfully", "user": {...}}
    """
    payload = parse_payload(RegisterRequest, request.get_json(silent=True))

    user = UserService.register(payload.username, payload.email, payload.password)

    return jsonify({
        'message': 'User registered successfully',
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """Login and get an access token.

    Request body:
        {
            "email": "alice@example.com",
            "password": "secret"
        }

    Returns:
        {"message": "Login successful", "token": "..."}
    """
    payload = parse_payload(LoginRequest, request.get_json(silent=True))

    try:
        user = UserService.authenticate(payload.email, payload.password)
    except InvalidCredentialsError:
        logger.warning(f"Failed login attempt for email: {payload.email} from IP: {request.remote_addr}")
        raise

    logger.info(f"Successful login for user ID {user.id} from IP: {request.remote_addr}")

    return jsonify({
        'message': 'Login successful',
        'token': generate_access_token(user.id)
    })
