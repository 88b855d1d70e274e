"""
Flask extensions instantiated without app binding.

These are initialized later in create_app() to support the application factory pattern.
"""
from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_cors import CORS

# Database
db = SQLAlchemy()

# Rate Limiter (will be configured with app)
limiter = Limiter(key_func=get_remote_address)

# Cross-origin requests from the browser front end
cors = CORS()
