"""Extensions used by the Flask application."""

from flask_cors import CORS
from flask_limiter import Limiter
from flask_sqlalchemy import SQLAlchemy

from .utils.client_address import resolve_client_address

db = SQLAlchemy()
cors = CORS()
limiter = Limiter(key_func=resolve_client_address, default_limits=[])

__all__ = ["db", "cors", "limiter"]
