"""Order API endpoints."""
import logging
from decimal import Decimal
from typing import Any, List

from flask import Blueprint, current_app, jsonify, request

from payment_optimizer.application.dto import CreateOrderRequest, OrderItemRequest
from payment_optimizer.application.services.order_service import OrderService
from payment_optimizer.domain.enums import PaymentMethod
from payment_optimizer.domain.exceptions import ValidationError
from payment_optimizer.middleware.monitoring import track_api_request
from payment_optimizer.utils.money import to_decimal


orders_blueprint = Blueprint("orders", __name__, url_prefix="/api/orders")
_logger = logging.getLogger(__name__)

MIN_UNIT_PRICE = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("1000000")
MIN_QUANTITY = 1
MAX_QUANTITY = 100


def _get_order_service() -> OrderService:
    """
    Get order service from service container.

    Raises:
        RuntimeError: If service container is not available
    """
    container = current_app.config.get('service_container')
    if not container:
        raise RuntimeError("Service container not available")
    return container.get_order_service()


def _parse_product(raw: Any, position: int) -> OrderItemRequest:
    if not isinstance(raw, dict):
        raise ValidationError(f"products[{position}] must be an object")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"products[{position}].name is required")

    raw_price = raw.get("unitPrice")
    if isinstance(raw_price, bool) or raw_price is None:
        raise ValidationError(f"products[{position}].unitPrice is required and must be a number")
    try:
        unit_price = to_decimal(raw_price)
    except ValueError:
        raise ValidationError(f"products[{position}].unitPrice must be a number") from None
    if not MIN_UNIT_PRICE <= unit_price <= MAX_UNIT_PRICE:
        raise ValidationError(
            f"products[{position}].unitPrice must be between {MIN_UNIT_PRICE} and {MAX_UNIT_PRICE}"
        )

    quantity = raw.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"products[{position}].quantity is required and must be an integer")
    if not MIN_QUANTITY <= quantity <= MAX_QUANTITY:
        raise ValidationError(
            f"products[{position}].quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}"
        )

    return OrderItemRequest(name=name.strip(), unit_price=unit_price, quantity=quantity)


def parse_order_payload(body: Any) -> CreateOrderRequest:
    """
    Validate a create/quote request body.

    Expected payload:
    {
        "paymentMethod": "Cash",     # or the integer value (0..3)
        "products": [
            {"name": "Keyboard", "unitPrice": 100.0, "quantity": 2}
        ]
    }

    Raises:
        ValidationError: If a field is missing or out of range
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body required")

    if body.get("paymentMethod") is None:
        raise ValidationError("Missing required field: paymentMethod")
    payment_method = PaymentMethod.parse(body["paymentMethod"])

    products = body.get("products")
    if not isinstance(products, list) or not products:
        raise ValidationError("products must be a non-empty list")

    items: List[OrderItemRequest] = [_parse_product(raw, index) for index, raw in enumerate(products)]
    return CreateOrderRequest(payment_method=payment_method, products=items)


def _json_body() -> Any:
    return request.get_json(silent=True)


@orders_blueprint.route("", methods=["GET"])
@track_api_request("list_orders")
async def list_orders():
    """List every order, ordered by id."""
    orders = await _get_order_service().list_orders()
    return jsonify([order.to_dict() for order in orders]), 200


@orders_blueprint.route("", methods=["POST"])
@track_api_request("create_order")
async def create_order():
    """
    Create an order and assign it to the cheapest provider.

    Returns:
        201 with the order in Processing status
    """
    order_request = parse_order_payload(_json_body())
    _logger.info(
        f"Create order request: {len(order_request.products)} products, "
        f"{order_request.payment_method.display_name}"
    )
    order = await _get_order_service().create_order(order_request)
    return jsonify(order.to_dict()), 201


@orders_blueprint.route("/quote", methods=["POST"])
@track_api_request("quote_order")
async def quote_order():
    """Compare provider commissions for a prospective order."""
    order_request = parse_order_payload(_json_body())
    quote = await _get_order_service().quote_order(order_request)
    return jsonify(quote.to_dict()), 200


@orders_blueprint.route("/<int:order_id>", methods=["GET"])
@track_api_request("get_order")
async def get_order(order_id: int):
    order = await _get_order_service().get_order(order_id)
    return jsonify(order.to_dict()), 200


@orders_blueprint.route("/<int:order_id>/cancel", methods=["PUT"])
@track_api_request("cancel_order")
async def cancel_order(order_id: int):
    order = await _get_order_service().cancel_order(order_id)
    return jsonify(order.to_dict()), 200


@orders_blueprint.route("/<int:order_id>/pay", methods=["PUT"])
@track_api_request("pay_order")
async def pay_order(order_id: int):
    order = await _get_order_service().pay_order(order_id)
    return jsonify(order.to_dict()), 200
