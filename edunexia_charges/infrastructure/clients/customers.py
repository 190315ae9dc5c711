"""Read-only client for the gateway customer directory"""

import httpx
from typing import List, Optional
from edunexia_charges.domain.models import Customer
from edunexia_charges.domain.exceptions import GatewayError
from edunexia_charges.config import settings


class CustomerDirectoryClient:
    """Looks up customers used to populate the charge customer selector"""

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

    async def list_customers(
        self,
        name: str | None = None,
        cpf_cnpj: str | None = None,
        limit: int = 100,
    ) -> List[Customer]:
        """
        Fetch customers, optionally filtered by name or CPF/CNPJ.

        Raises:
            GatewayError: On timeout, HTTP errors, or invalid response
        """
        params = {"limit": limit}
        if name:
            params["name"] = name
        if cpf_cnpj:
            params["cpfCnpj"] = cpf_cnpj

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/customers",
                    params=params,
                    headers={"access_token": self.api_key},
                )
                response.raise_for_status()
                data = response.json()

                return [
                    Customer(
                        id=item["id"],
                        name=item["name"],
                        cpf_cnpj=item.get("cpfCnpj") or "",
                    )
                    for item in data.get("data", [])
                    if not item.get("deleted", False)
                ]

            except httpx.TimeoutException as e:
                raise GatewayError(f"Customer directory timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise GatewayError(
                    f"Customer directory error: {e.response.status_code}", status_code=e.response.status_code
                ) from e
            except httpx.RequestError as e:
                raise GatewayError(f"Customer directory unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise GatewayError(f"Invalid customer data from gateway: {e}") from e

    async def find_by_cpf_cnpj(self, cpf_cnpj: str) -> Optional[Customer]:
        """First customer registered under a CPF/CNPJ, or None"""
        digits = "".join(ch for ch in cpf_cnpj if ch.isdigit())
        customers = await self.list_customers(cpf_cnpj=digits, limit=1)
        return customers[0] if customers else None
