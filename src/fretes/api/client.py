"""
Shipping API client

Async HTTP client for the shipping backend. Every endpoint answers with a
``{"data": ...}`` envelope; a missing ``data`` key means an empty result.
Error responses may carry a ``message`` that is shown to the user verbatim.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..errors import ConnectivityError, RequestError
from ..models import Carrier, HireRequest, NewPackage, Package, PackageStatus, Quote, State

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _unwrap(response: httpx.Response) -> Any:
    """Return the ``data`` member of a response envelope, or None."""
    if not response.content:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("data")
    return None


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Server-provided error message, or the fallback when there is none."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class ShippingApiClient:
    """
    Client for the shipping backend REST API.

    No request is retried, cancelled or rate limited: a failure surfaces
    immediately as RequestError (non-2xx) or ConnectivityError (transport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL, defaults to settings.API_BASE_URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ShippingApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        **kwargs,
    ) -> Any:
        url = f"{API_PREFIX}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ConnectivityError() from e

        if not response.is_success:
            message = _error_message(response, fallback_message)
            logger.info(f"{method} {url} -> {response.status_code}: {message}")
            raise RequestError(message, status_code=response.status_code)

        logger.debug(f"{method} {url} -> {response.status_code}")
        return _unwrap(response)

    # ==========================================================================
    # Reference data
    # ==========================================================================

    async def list_carriers(self) -> list[Carrier]:
        data = await self._request("GET", "/carriers", "Erro ao carregar transportadoras.")
        return [Carrier.model_validate(item) for item in data or []]

    async def list_states(self) -> list[State]:
        data = await self._request("GET", "/states", "Erro ao carregar estados.")
        return [State.model_validate(item) for item in data or []]

    # ==========================================================================
    # Packages
    # ==========================================================================

    async def list_packages(self) -> list[Package]:
        data = await self._request("GET", "/packages", "Erro ao carregar pacotes.")
        return [Package.model_validate(item) for item in data or []]

    async def get_package(self, package_id: str) -> Optional[Package]:
        data = await self._request(
            "GET", f"/packages/{package_id}", "Erro ao carregar detalhes do pacote."
        )
        return Package.model_validate(data) if data else None

    async def get_package_by_tracking(self, tracking_code: str) -> Optional[Package]:
        """
        Look up a package by tracking code.

        Returns:
            The package, or None when the backend answers 404
        """
        try:
            data = await self._request(
                "GET", f"/packages/tracking/{tracking_code}", "Erro ao buscar pacote."
            )
        except RequestError as e:
            if e.is_not_found:
                return None
            raise
        return Package.model_validate(data) if data else None

    async def create_package(self, new_package: NewPackage) -> Optional[Package]:
        data = await self._request(
            "POST", "/packages", "Erro ao criar pacote.", json=new_package.to_payload()
        )
        return Package.model_validate(data) if data else None

    async def update_status(self, package_id: str, status: PackageStatus) -> Optional[Package]:
        data = await self._request(
            "PATCH",
            f"/packages/{package_id}/status",
            "Erro ao atualizar status.",
            json={"status": status.value},
        )
        return Package.model_validate(data) if data else None

    async def hire_carrier(self, package_id: str, hire: HireRequest) -> Optional[Package]:
        data = await self._request(
            "POST",
            f"/packages/{package_id}/hire",
            "Erro ao contratar transportadora.",
            json=hire.to_payload(),
        )
        return Package.model_validate(data) if data else None

    # ==========================================================================
    # Quotes
    # ==========================================================================

    async def list_quotes(self, destination_state: str, weight_kg: float) -> list[Quote]:
        params = {"estado_destino": destination_state, "peso_kg": str(weight_kg)}
        data = await self._request("GET", "/quotes", "Erro ao consultar cotações.", params=params)
        return [Quote.model_validate(item) for item in data or []]
