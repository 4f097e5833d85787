"""Provider API endpoints (provider-side view of orders)."""
import logging

from flask import Blueprint, current_app, jsonify

from payment_optimizer.application.services.provider_service import ProviderService
from payment_optimizer.middleware.monitoring import track_api_request


providers_blueprint = Blueprint("providers", __name__, url_prefix="/api/providers")
_logger = logging.getLogger(__name__)


def _get_provider_service() -> ProviderService:
    container = current_app.config.get('service_container')
    if not container:
        raise RuntimeError("Service container not available")
    return container.get_provider_service()


@providers_blueprint.route("", methods=["GET"])
@track_api_request("list_providers")
async def list_providers():
    """List registered providers with the payment methods each supports."""
    return jsonify(_get_provider_service().list_providers()), 200


@providers_blueprint.route("/<string:provider_name>/orders", methods=["GET"])
@track_api_request("list_provider_orders")
async def list_provider_orders(provider_name: str):
    orders = await _get_provider_service().list_provider_orders(provider_name)
    return jsonify([order.to_dict() for order in orders]), 200


@providers_blueprint.route("/<string:provider_name>/orders/<string:reference>", methods=["GET"])
@track_api_request("get_provider_order")
async def get_provider_order(provider_name: str, reference: str):
    """
    Fetch one order as the provider sees it.

    Returns:
        200 with the provider-side order, 404 when the provider or order is unknown
    """
    _logger.info(f"Provider order lookup: {provider_name}/{reference}")
    order = await _get_provider_service().get_provider_order(provider_name, reference)
    return jsonify(order.to_dict()), 200
