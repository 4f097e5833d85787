"""Monitoring and metrics middleware using Prometheus."""
import logging
import time
from functools import wraps
from typing import Callable

from flask import current_app, has_app_context, request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from payment_optimizer.config.settings import Config
from payment_optimizer.domain.exceptions import PaymentOptimizerError
from payment_optimizer.middleware.error_handler import status_code_for

logger = logging.getLogger(__name__)

# Prometheus metrics
provider_quotes_total = Counter(
    'payment_provider_quotes_total',
    'Total number of commission quotes requested from providers',
    ['provider', 'status']
)

provider_operations_total = Counter(
    'payment_provider_operations_total',
    'Total number of remote operations executed on providers',
    ['provider', 'operation', 'status']
)

order_operations_total = Counter(
    'payment_order_operations_total',
    'Total number of order operations',
    ['operation', 'status']
)

provider_selection_duration = Histogram(
    'payment_provider_selection_duration_seconds',
    'Time spent quoting providers and selecting the cheapest one',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
)

api_requests_total = Counter(
    'payment_api_requests_total',
    'Total number of API requests',
    ['method', 'endpoint', 'status']
)

api_request_duration = Histogram(
    'payment_api_request_duration_seconds',
    'Time spent processing API requests',
    ['endpoint']
)


def metrics_enabled() -> bool:
    """Metrics switch of the running app; the environment default outside an app context."""
    if has_app_context():
        return bool(current_app.config.get("ENABLE_METRICS", Config.ENABLE_METRICS))
    return Config.ENABLE_METRICS


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics endpoint.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS", Config.ENABLE_METRICS):
        return

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    logger.info("Prometheus metrics enabled at /metrics")


def track_api_request(endpoint: str):
    """
    Decorator to track API request metrics for async views.

    Args:
        endpoint: Endpoint name for metrics
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status_code = 500
            try:
                response = await f(*args, **kwargs)
                status_code = response[1] if isinstance(response, tuple) else 200
                return response
            except PaymentOptimizerError as e:
                status_code = status_code_for(e)
                raise
            finally:
                if metrics_enabled():
                    try:
                        api_requests_total.labels(
                            method=request.method,
                            endpoint=endpoint,
                            status=status_code
                        ).inc()
                        api_request_duration.labels(endpoint=endpoint).observe(time.time() - start_time)
                    except Exception as e:
                        logger.debug(f"Failed to track API request metrics: {e}")
        return wrapper
    return decorator


def track_provider_quote(provider: str, success: bool) -> None:
    """
    Track a commission quote.

    Args:
        provider: Provider name
        success: Whether the provider produced a quote
    """
    try:
        if metrics_enabled():
            provider_quotes_total.labels(provider=provider, status="success" if success else "error").inc()
    except Exception as e:
        # Don't fail if metrics tracking fails
        logger.debug(f"Failed to track quote metrics: {e}")


def track_provider_operation(provider: str, operation: str, success: bool) -> None:
    """
    Track a remote provider operation.

    Args:
        provider: Provider name
        operation: Operation name (e.g., 'create', 'cancel', 'pay')
        success: Whether the provider reported success
    """
    try:
        if metrics_enabled():
            status = "success" if success else "error"
            provider_operations_total.labels(provider=provider, operation=operation, status=status).inc()
    except Exception as e:
        logger.debug(f"Failed to track provider operation metrics: {e}")


def track_order_operation(operation: str, success: bool) -> None:
    try:
        if metrics_enabled():
            order_operations_total.labels(operation=operation, status="success" if success else "error").inc()
    except Exception as e:
        logger.debug(f"Failed to track order operation metrics: {e}")


def track_provider_selection(duration: float) -> None:
    try:
        if metrics_enabled():
            provider_selection_duration.observe(duration)
    except Exception as e:
        logger.debug(f"Failed to track selection metrics: {e}")
