"""Error handling middleware with Sentry integration."""
import logging
from typing import Dict, Type

import sentry_sdk
from flask import jsonify
from sentry_sdk.integrations.flask import FlaskIntegration

from payment_optimizer.domain.exceptions import (
    IllegalStateError,
    NoCapableProviderError,
    NoEvaluableProviderError,
    NotFoundError,
    PaymentOptimizerError,
    ProviderOperationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific class first; lookup walks the exception's MRO.
STATUS_CODES: Dict[Type[PaymentOptimizerError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    IllegalStateError: 409,
    NoCapableProviderError: 422,
    ProviderOperationError: 502,
    NoEvaluableProviderError: 503,
}


def status_code_for(error: PaymentOptimizerError) -> int:
    """Return the HTTP status code for a domain error (500 when unmapped)."""
    for cls in type(error).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    # Initialize Sentry if DSN is provided
    sentry_dsn = app.config.get("SENTRY_DSN")
    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get("FLASK_ENV", "production"),
        )
        logger.info("Sentry error tracking initialized")

    @app.errorhandler(PaymentOptimizerError)
    def domain_error(error: PaymentOptimizerError):
        """Translate domain errors into JSON responses."""
        status_code = status_code_for(error)
        body = {
            "status": "error",
            "error": type(error).__name__,
            "message": str(error),
        }
        if isinstance(error, NoEvaluableProviderError) and error.failures:
            body["failures"] = error.failures

        if status_code >= 500:
            logger.error(f"{type(error).__name__}: {error}")
        else:
            logger.info(f"{type(error).__name__}: {error}")
        return jsonify(body), status_code

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"status": "error", "error": "NotFound", "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({"status": "error", "error": "MethodNotAllowed", "message": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({"status": "error", "error": "InternalServerError", "message": "Internal server error"}), 500

    @app.errorhandler(429)
    def rate_limit_error(error):
        """Handle rate limit errors."""
        return jsonify({
            "status": "error",
            "error": "RateLimitExceeded",
            "message": "Rate limit exceeded. Please try again later."
        }), 429
