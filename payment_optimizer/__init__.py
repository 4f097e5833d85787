"""Flask application factory for the payment provider optimizer."""
import logging
import sys

from flask import Flask, jsonify

from payment_optimizer.api import health_blueprint, orders_blueprint, providers_blueprint
from payment_optimizer.config.settings import get_config
from payment_optimizer.infrastructure.service_container import ServiceContainer
from payment_optimizer.middleware.error_handler import init_error_handlers
from payment_optimizer.middleware.monitoring import register_metrics_middleware
from payment_optimizer.middleware.rate_limiter import create_rate_limiter


def create_app(config_class=None) -> Flask:
    """
    Create and configure Flask application with dependency injection.

    Implements Factory Pattern and Dependency Injection for scalability.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured Flask application
    """
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)

    # Load configuration
    config = config_class or get_config()
    app.config.from_object(config)

    # Configure logging FIRST (needed for all subsequent operations)
    _configure_logging(config)

    app.register_blueprint(health_blueprint)
    app.register_blueprint(orders_blueprint)
    app.register_blueprint(providers_blueprint)

    @app.route("/", methods=["GET"])
    def root():
        """Root endpoint."""
        return jsonify({
            "status": "ok",
            "service": "payment-optimizer",
            "message": "Service is running"
        }), 200

    # Validate configuration (missing provider credentials surface on first use)
    try:
        config.validate()
    except ValueError as e:
        _logger.warning(f"Configuration validation warning: {e}")

    _initialize_middleware(app)
    _initialize_services(app, config)

    _logger.info(f"Application ready - registered blueprints: {[bp.name for bp in app.blueprints.values()]}")
    return app


def _configure_logging(config) -> None:
    """Configure application logging."""
    level = logging.DEBUG if config.DEBUG else getattr(logging, config.LOG_LEVEL, logging.INFO)

    # Send everything to stdout
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


def _initialize_middleware(app: Flask) -> None:
    """
    Initialize middleware (rate limiting, monitoring, error handling).

    Args:
        app: Flask application instance
    """
    # Rate limiting
    limiter = create_rate_limiter(app)
    app.config['limiter'] = limiter

    # Monitoring (Prometheus metrics)
    register_metrics_middleware(app)

    # Error handling (Sentry)
    init_error_handlers(app)


def _initialize_services(app: Flask, config) -> None:
    """
    Initialize application services using Service Container.

    Args:
        app: Flask application instance
        config: Configuration class the services are built from
    """
    ServiceContainer.reset()
    container = ServiceContainer(config)

    # Store container in app config for access in views
    app.config['service_container'] = container

    logging.getLogger(__name__).debug("Services will be initialized on demand via ServiceContainer")
