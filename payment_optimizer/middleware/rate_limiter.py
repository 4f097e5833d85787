"""Rate limiting middleware using Flask-Limiter."""
import logging
from typing import List

from flask import request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from payment_optimizer.config.settings import Config

logger = logging.getLogger(__name__)


def get_limiter_key() -> str:
    """
    Get rate limit key based on the client identifier header or IP address.

    Returns:
        String key for rate limiting
    """
    client_id = request.headers.get("X-Client-Id")
    if client_id:
        return f"rate_limit:client:{client_id}"

    # Fallback to IP address
    return get_remote_address()


def _default_limits(raw: str) -> List[str]:
    return [limit.strip() for limit in raw.split(";") if limit.strip()]


def create_rate_limiter(app) -> Limiter:
    """
    Create and configure Flask-Limiter instance.

    Storage is taken from ``RATELIMIT_STORAGE_URL`` (``memory://`` or a
    ``redis://`` URI).

    Args:
        app: Flask application instance

    Returns:
        Configured Limiter instance
    """
    enabled = app.config.get("RATELIMIT_ENABLED", Config.RATELIMIT_ENABLED)
    storage_uri = app.config.get("RATELIMIT_STORAGE_URL", Config.RATELIMIT_STORAGE_URL)
    default_limits = _default_limits(app.config.get("RATELIMIT_DEFAULT", Config.RATELIMIT_DEFAULT))

    if not enabled:
        # No-op limiter when rate limiting is disabled
        return Limiter(
            key_func=get_remote_address,
            app=app,
            default_limits=[],
            storage_uri="memory://",
            enabled=False,
        )

    try:
        limiter = Limiter(
            key_func=get_limiter_key,
            app=app,
            default_limits=default_limits,
            storage_uri=storage_uri,
            strategy="fixed-window",
            headers_enabled=True,
        )
        logger.info(f"Rate limiting enabled ({'; '.join(default_limits)}) with storage {storage_uri.split('://')[0]}")
        return limiter
    except Exception as e:
        logger.warning(f"Failed to initialize rate limiter: {e}, using memory storage")
        return Limiter(
            key_func=get_limiter_key,
            app=app,
            default_limits=default_limits,
            storage_uri="memory://",
        )
