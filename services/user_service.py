"""
User service.

Handles registration and credential checks.
"""
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from errors import ConflictError, InvalidCredentialsError, StorageError
from extensions import db
from models import User

logger = logging.getLogger(__name__)

# Hash method -> hash compared against when the email is unknown, so both
# failure paths pay the same work factor
_DUMMY_HASHES = {}


class UserService:
    """Service for user registration and login."""

    @staticmethod
    def dummy_hash():
        """Return a throwaway hash made with the configured PASSWORD_HASH_METHOD."""
        method = current_app.config.get('PASSWORD_HASH_METHOD', 'pbkdf2:sha256')
        if method not in _DUMMY_HASHES:
            _DUMMY_HASHES[method] = generate_password_hash('not-a-real-password', method=method)
        return _DUMMY_HASHES[method]

    @staticmethod
    def get_by_email(email):
        return User.query.filter_by(email=email.strip().lower()).first()

    @staticmethod
    def register(username, email, password):
        """
        Register a new user.

        Args:
            username (str): Display name
            email (str): Email address, already validated and lower-cased
            password (str): Plaintext password, hashed before storage

        Returns:
            User: The created user

        Raises:
            ConflictError: If the email is already registered
            StorageError: If the user could not be saved
        """
        if UserService.get_by_email(email):
            raise ConflictError()

        user = User(username=username, email=email)
        user.set_password(password)

        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            db.session.rollback()
            raise ConflictError()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to save user {email}")
            raise StorageError()

        logger.info(f"Registered user ID {user.id}")
        return user

    @staticmethod
    def authenticate(email, password):
        """
        Check a user's credentials.

        Args:
            email (str): Email address
            password (str): Plaintext password

        Returns:
            User: The matching user

        Raises:
            InvalidCredentialsError: Unknown email or wrong password (same error for both)
        """
        user = UserService.get_by_email(email)

        if user is None:
            check_password_hash(UserService.dummy_hash(), password)
            raise InvalidCredentialsError()

        if not user.check_password(password):
            raise InvalidCredentialsError()

        return user
