"""
Flask extensions and initialization
"""
import logging

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from cvstudio.config import CLIENT_URL, CORS_ORIGINS, DEFAULT_RATE_LIMITS, FLASK_SECRET

logger = logging.getLogger(__name__)


def get_rate_limit_key():
    """
    Rate limit key: remote address, with health checks exempt.
    Returning None exempts the request from rate limiting.
    """
    if request.path in ('/ping', '/health', '/healthz'):
        return None
    return get_remote_address()


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=DEFAULT_RATE_LIMITS,
    storage_uri="memory://",
    strategy="fixed-window",
    headers_enabled=True,
)


def get_limiter() -> Limiter:
    """Get the rate limiter instance."""
    return limiter


def init_app_extensions(app: Flask):
    """Initializes Flask extensions: CORS and rate limiting."""
    limiter.init_app(app)
    app.limiter = limiter

    default_origins = [
        "http://localhost:5173",      # Vite default
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    all_origins = sorted(set(default_origins + [CLIENT_URL] + CORS_ORIGINS))

    cors_config = {
        "origins": all_origins,
        "methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-Requested-With"],
        "supports_credentials": True,
        "max_age": 3600,
        "expose_headers": ["Content-Type", "Content-Disposition"],
    }
    CORS(app, resources={r"/api/*": cors_config}, automatic_options=True, supports_credentials=True)

    app.secret_key = FLASK_SECRET
    logger.info("extensions.initialized", extra={"cors_origins": len(all_origins)})
