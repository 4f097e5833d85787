"""Base class for payment providers reached over HTTP."""
import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import httpx

from payment_optimizer.domain.entities.order import Order
from payment_optimizer.domain.enums import OrderStatus, PaymentMethod
from payment_optimizer.domain.interfaces.payment_provider import IPaymentProvider, PaymentProviderResponse
from payment_optimizer.utils.money import round_money, to_decimal


class HttpPaymentProvider(IPaymentProvider):
    """
    Shared HTTP adapter for the integrated payment providers.

    Subclasses declare their name, commission table and the endpoints that
    differ between providers. Remote failures (HTTP errors, timeouts,
    malformed bodies) are turned into unsuccessful responses; they are
    never raised to the caller.
    """

    PROVIDER_NAME: str = ""
    FIXED_COMMISSIONS: Dict[PaymentMethod, Decimal] = {}
    PERCENTAGE_COMMISSIONS: Dict[PaymentMethod, Decimal] = {}
    METHOD_CODES: Dict[PaymentMethod, int] = {
        PaymentMethod.CASH: 0,
        PaymentMethod.CREDIT_CARD: 1,
    }
    ORDERS_PATH = "/Order"
    CANCEL_PATH = "/cancel"
    PAY_PATH = "/pay"

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Provider API base URL
            api_key: API key sent as ``x-api-key``
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (used by tests)

        Raises:
            ValueError: If base URL or API key is missing
        """
        self._logger = logging.getLogger(__name__)
        if not base_url or not base_url.strip():
            raise ValueError(f"{self.PROVIDER_NAME} base URL is not configured")
        if not api_key or not api_key.strip():
            raise ValueError(f"{self.PROVIDER_NAME} API key is not configured")

        self.base_url = base_url.strip().rstrip("/")
        self._api_key = api_key.strip()
        self._timeout = timeout_seconds
        self._transport = transport

    @property
    def name(self) -> str:
        return self.PROVIDER_NAME

    def supports_payment_method(self, method: PaymentMethod) -> bool:
        return method in self.FIXED_COMMISSIONS or method in self.PERCENTAGE_COMMISSIONS

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Make an HTTP request to the provider API.

        Raises:
            httpx.HTTPError: On transport failures (connection, timeout, ...)
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        async with httpx.AsyncClient(
            headers=self._get_headers(),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(method, url, params=params, json=json_data)

        self._logger.debug(f"{self.PROVIDER_NAME}: {method} {url} -> {response.status_code}")
        return response

    async def calculate_commission(self, order: Order) -> Decimal:
        method = order.payment_method
        if method in self.FIXED_COMMISSIONS:
            return self.FIXED_COMMISSIONS[method]
        if method in self.PERCENTAGE_COMMISSIONS:
            return round_money(order.amount * self.PERCENTAGE_COMMISSIONS[method])
        raise ValueError(f"{self.PROVIDER_NAME} does not support payment method {method.display_name}")

    def _build_order_request(self, order: Order) -> Dict[str, Any]:
        if order.payment_method not in self.METHOD_CODES:
            raise ValueError(f"{self.PROVIDER_NAME} does not support payment method {order.payment_method.display_name}")
        return {
            "method": self.METHOD_CODES[order.payment_method],
            "products": [
                {
                    "name": item.name,
                    "unitPrice": float(item.unit_price),
                    "quantity": item.quantity,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _extract_order_fields(data: Any, fallback_amount: Decimal) -> Tuple[str, Decimal, OrderStatus]:
        if not isinstance(data, dict):
            data = {}
        reference = data.get("orderId")
        if not reference:
            reference = str(uuid.uuid4())

        amount = fallback_amount
        raw_amount = data.get("amount")
        if isinstance(raw_amount, (int, float, Decimal)) and not isinstance(raw_amount, bool):
            amount = to_decimal(raw_amount)

        return str(reference), amount, OrderStatus.from_provider(data.get("status"))

    def _response_from_body(self, data: Any, message: str, fallback_amount: Decimal) -> PaymentProviderResponse:
        reference, amount, status = self._extract_order_fields(data, fallback_amount)
        return PaymentProviderResponse(
            success=True,
            message=message,
            provider_order_reference=reference,
            amount=amount,
            status=status,
            payload=data,
        )

    async def create_order(self, order: Order) -> PaymentProviderResponse:
        self._logger.info(f"Creating order {order.id} in {self.PROVIDER_NAME}")
        try:
            request_body = self._build_order_request(order)
            response = await self._make_request("POST", self.ORDERS_PATH, json_data=request_body)
            if response.is_error:
                self._logger.error(
                    f"{self.PROVIDER_NAME} rejected order {order.id}: "
                    f"{response.status_code} - {response.text[:500]}"
                )
                return PaymentProviderResponse.failure(
                    f"{self.PROVIDER_NAME} error: {response.status_code} - {response.text[:200]}"
                )
            data = response.json(parse_float=Decimal)
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(f"Error creating order {order.id} in {self.PROVIDER_NAME}: {e}")
            return PaymentProviderResponse.failure(f"{self.PROVIDER_NAME} request failed: {e}")

        return self._response_from_body(
            data, f"Order created successfully in {self.PROVIDER_NAME}", order.amount
        )

    async def get_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        try:
            response = await self._make_request("GET", f"{self.ORDERS_PATH}/{provider_order_reference}")
            if response.is_error:
                return PaymentProviderResponse.failure(
                    f"Error querying order in {self.PROVIDER_NAME}: {response.status_code}",
                    provider_order_reference,
                )
            data = response.json(parse_float=Decimal)
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(f"Error querying order {provider_order_reference} in {self.PROVIDER_NAME}: {e}")
            return PaymentProviderResponse.failure(str(e), provider_order_reference)

        result = self._response_from_body(
            data, f"Order retrieved successfully from {self.PROVIDER_NAME}", Decimal("0")
        )
        result.provider_order_reference = provider_order_reference
        return result

    async def _change_status(
        self, endpoint: str, provider_order_reference: str, target: OrderStatus, verb: str
    ) -> PaymentProviderResponse:
        try:
            response = await self._make_request("PUT", endpoint, params={"orderId": provider_order_reference})
        except httpx.HTTPError as e:
            self._logger.error(f"Error trying to {verb} order {provider_order_reference} in {self.PROVIDER_NAME}: {e}")
            return PaymentProviderResponse.failure(str(e), provider_order_reference)

        if response.is_error:
            self._logger.error(
                f"{self.PROVIDER_NAME} could not {verb} order {provider_order_reference}: {response.status_code}"
            )
            return PaymentProviderResponse.failure(
                f"Error trying to {verb} order in {self.PROVIDER_NAME}: {response.status_code}",
                provider_order_reference,
            )

        return PaymentProviderResponse(
            success=True,
            message=f"Order {target.display_name.lower()} successfully in {self.PROVIDER_NAME}",
            provider_order_reference=provider_order_reference,
            status=target,
        )

    async def cancel_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        return await self._change_status(self.CANCEL_PATH, provider_order_reference, OrderStatus.CANCELLED, "cancel")

    async def pay_order(self, provider_order_reference: str) -> PaymentProviderResponse:
        return await self._change_status(self.PAY_PATH, provider_order_reference, OrderStatus.PAID, "pay")

    async def list_orders(self) -> List[PaymentProviderResponse]:
        try:
            response = await self._make_request("GET", self.ORDERS_PATH)
            if response.is_error:
                self._logger.error(f"{self.PROVIDER_NAME} failed to list orders: {response.status_code}")
                return []
            data = response.json(parse_float=Decimal)
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(f"Error listing orders from {self.PROVIDER_NAME}: {e}")
            return []

        entries = data if isinstance(data, list) else [data]
        return [
            self._response_from_body(entry, f"{self.PROVIDER_NAME} order", Decimal("0"))
            for entry in entries
        ]
