"""Payment gateway HTTP client for creating and managing charges"""

import logging
import httpx
from typing import Any, Dict, List, Optional
from edunexia_charges.domain.models import ChargeRequest, ChargeResult
from edunexia_charges.domain.assembler import to_gateway_payload
from edunexia_charges.domain.money import to_cents
from edunexia_charges.domain.exceptions import GatewayError
from edunexia_charges.infrastructure.observability.metrics import gateway_latency_histogram, gateway_failure_counter
from edunexia_charges.config import settings

logger = logging.getLogger(__name__)


def gateway_error_message(response: httpx.Response) -> str:
    """Provider error description, falling back to the status code"""
    try:
        body = response.json()
        errors = body.get("errors") or []
        if errors and errors[0].get("description"):
            return errors[0]["description"]
        if body.get("message"):
            return body["message"]
    except (ValueError, AttributeError):
        pass
    return f"Gateway error: {response.status_code}"


def parse_charge(data: Dict[str, Any]) -> ChargeResult:
    net_value = data.get("netValue")
    return ChargeResult(
        id=data["id"],
        status=data.get("status", "PENDING"),
        value_cents=to_cents(data.get("value", 0)),
        invoice_url=data.get("invoiceUrl"),
        net_value_cents=to_cents(net_value) if net_value is not None else None,
    )


class GatewayClient:
    """Client for the external payment gateway charge API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.gateway_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.gateway_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"access_token": self.api_key, "Content-Type": "application/json"},
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Send a single request; no automatic retry.

        Raises:
            GatewayError: On timeout, network failure, HTTP errors, or invalid response
        """
        async with self._client() as client:
            try:
                with gateway_latency_histogram.time():
                    response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                gateway_failure_counter.inc()
                raise GatewayError(f"Gateway timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                gateway_failure_counter.inc()
                raise GatewayError(gateway_error_message(e.response), status_code=e.response.status_code) from e
            except httpx.RequestError as e:
                gateway_failure_counter.inc()
                raise GatewayError(f"Gateway unreachable: {e}") from e
            except ValueError as e:
                gateway_failure_counter.inc()
                raise GatewayError(f"Invalid response from gateway: {e}") from e

    async def create_charge(self, request: ChargeRequest, idempotency_key: Optional[str] = None) -> ChargeResult:
        """Submit a charge; the idempotency key is reused across retries of one wizard"""
        payload = to_gateway_payload(request)
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        logger.info("Creating charge", extra={"customer_id": request.customer_id, "billing_type": payload["billingType"]})

        data = await self._request("POST", "/payments", json=payload, headers=headers)
        try:
            result = parse_charge(data)
        except (KeyError, TypeError) as e:
            raise GatewayError(f"Invalid charge data from gateway: {e}") from e

        logger.info("Charge created", extra={"charge_id": result.id})
        return result

    async def get_charge(self, charge_id: str) -> ChargeResult:
        data = await self._request("GET", f"/payments/{charge_id}")
        try:
            return parse_charge(data)
        except (KeyError, TypeError) as e:
            raise GatewayError(f"Invalid charge data from gateway: {e}") from e

    async def list_charges(
        self,
        customer_id: str | None = None,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[ChargeResult]:
        params: Dict[str, Any] = {"limit": limit, "offset": offset}
        if customer_id:
            params["customer"] = customer_id
        if status:
            params["status"] = status

        data = await self._request("GET", "/payments", params=params)
        try:
            return [parse_charge(item) for item in data.get("data", [])]
        except (KeyError, TypeError) as e:
            raise GatewayError(f"Invalid charge data from gateway: {e}") from e

    async def cancel_charge(self, charge_id: str) -> None:
        logger.info("Cancelling charge", extra={"charge_id": charge_id})
        await self._request("POST", f"/payments/{charge_id}/cancel")
