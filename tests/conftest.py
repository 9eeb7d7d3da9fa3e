"""Shared fixtures: an in-memory shipping backend served over httpx.MockTransport."""

import asyncio
import json
from copy import deepcopy
from typing import Callable, Optional

import httpx
import pytest

from fretes.api import ShippingApiClient

BASE_URL = "http://shipping.test"

FASTEX_ID = "5f1d3c2a-0000-4000-8000-000000000001"
SLOWCO_ID = "5f1d3c2a-0000-4000-8000-000000000002"
RAPIDO_ID = "5f1d3c2a-0000-4000-8000-000000000003"

CARRIERS = [
    {"id": FASTEX_ID, "nome": "FastEx", "criado_em": "2025-01-10T09:00:00Z"},
    {"id": SLOWCO_ID, "nome": "SlowCo", "criado_em": "2025-01-10T09:00:00Z"},
    {"id": RAPIDO_ID, "nome": "Rápido Sul", "criado_em": "2025-01-10T09:00:00Z"},
]

STATES = [
    {"codigo": "SP", "nome": "São Paulo", "nome_regiao": "Sudeste"},
    {"codigo": "RJ", "nome": "Rio de Janeiro", "nome_regiao": "Sudeste"},
    {"codigo": "BA", "nome": "Bahia", "nome_regiao": "Nordeste"},
]

PACKAGES = [
    {
        "id": "p1",
        "codigo_rastreio": "BR12300001",
        "produto": "Camisa tamanho G",
        "peso_kg": 0.6,
        "estado_destino": "SP",
        "status": "criado",
        "criado_em": "2025-02-01T12:00:00Z",
        "atualizado_em": "2025-02-01T12:00:00Z",
    },
    {
        "id": "p2",
        "codigo_rastreio": "BR12300002",
        "produto": "Notebook",
        "peso_kg": 2.5,
        "estado_destino": "RJ",
        "status": "enviado",
        "transportadora_id": SLOWCO_ID,
        "preco_contratado": "55.90",
        "prazo_contratado_dias": 5,
        "criado_em": "2025-02-02T12:00:00Z",
        "atualizado_em": "2025-02-03T12:00:00Z",
    },
    {
        "id": "p3",
        "codigo_rastreio": "BR12300003",
        "produto": "Envelope",
        "estado_destino": "BA",
        "status": "criado",
    },
]

QUOTES = [
    {"transportadora": "FastEx", "preco_estimado": 23.5, "prazo_estimado_dias": 3},
    {"transportadora": "SlowCo", "preco_estimado": 18.0, "prazo_estimado_dias": 7},
]

Override = Callable[[httpx.Request], httpx.Response]


class FakeShippingBackend:
    """Minimal stand-in for the shipping API, keeping state between calls."""

    def __init__(self):
        self.carriers = deepcopy(CARRIERS)
        self.states = deepcopy(STATES)
        self.packages = deepcopy(PACKAGES)
        self.quotes = deepcopy(QUOTES)
        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], Override] = {}
        self._created = 0
        self._hold_first_quote = False
        self._quote_calls = 0
        self.first_quote_arrived: Optional[asyncio.Event] = None
        self.release_first_quote: Optional[asyncio.Event] = None

    # ------------------------------------------------------------------
    # Test controls
    # ------------------------------------------------------------------

    def respond(self, method: str, path: str, status_code: int, body=None) -> None:
        """Answer a route with a fixed status and JSON body."""

        def override(request: httpx.Request) -> httpx.Response:
            if body is None:
                return httpx.Response(status_code)
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        self.overrides[(method, path)] = override

    def disconnect(self, method: str, path: str) -> None:
        """Make a route fail at the transport level."""

        def override(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.overrides[(method, path)] = override

    def hold_first_quote(self) -> None:
        """Keep the first quote request pending until release_first_quote is set."""
        self._hold_first_quote = True
        self.first_quote_arrived = asyncio.Event()
        self.release_first_quote = asyncio.Event()

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        override = self.overrides.get((method, path))
        if override is not None:
            return override(request)

        parts = path.removeprefix("/api/v1/").strip("/").split("/")

        if method == "GET" and parts == ["carriers"]:
            return httpx.Response(200, json={"data": self.carriers})
        if method == "GET" and parts == ["states"]:
            return httpx.Response(200, json={"data": self.states})
        if method == "GET" and parts == ["quotes"]:
            return await self._quotes(request)
        if parts[0] == "packages":
            return self._packages(method, parts[1:], request)
        return httpx.Response(404, json={"message": "rota não encontrada"})

    async def _quotes(self, request: httpx.Request) -> httpx.Response:
        self._quote_calls += 1
        if self._hold_first_quote and self._quote_calls == 1:
            self.first_quote_arrived.set()
            await self.release_first_quote.wait()
        return httpx.Response(200, json={"data": deepcopy(self.quotes)})

    def _find(self, package_id: str) -> Optional[dict]:
        return next((p for p in self.packages if p["id"] == package_id), None)

    def _packages(self, method: str, rest: list[str], request: httpx.Request) -> httpx.Response:
        if method == "GET" and not rest:
            return httpx.Response(200, json={"data": self.packages})

        if method == "POST" and not rest:
            body = json.loads(request.content)
            self._created += 1
            package = {
                "id": f"new-{self._created}",
                "codigo_rastreio": f"BR999{self._created:05d}",
                "produto": body["produto"],
                "peso_kg": body["peso_kg"],
                "estado_destino": body["estado_destino"],
                "status": "criado",
            }
            self.packages.append(package)
            return httpx.Response(201, json={"data": package})

        if method == "GET" and rest[0] == "tracking":
            package = next((p for p in self.packages if p["codigo_rastreio"] == rest[1]), None)
            if package is None:
                return httpx.Response(404, json={"message": "Pacote não encontrado"})
            return httpx.Response(200, json={"data": package})

        package = self._find(rest[0])
        if package is None:
            return httpx.Response(404, json={"message": "Pacote não encontrado"})

        if method == "GET" and len(rest) == 1:
            return httpx.Response(200, json={"data": package})

        if method == "PATCH" and rest[1:] == ["status"]:
            package["status"] = json.loads(request.content)["status"]
            return httpx.Response(200, json={"data": package})

        if method == "POST" and rest[1:] == ["hire"]:
            if package.get("transportadora_id"):
                return httpx.Response(
                    409, json={"message": "Pacote já possui transportadora contratada"}
                )
            body = json.loads(request.content)
            package["transportadora_id"] = body["transportadora_id"]
            package["preco_contratado"] = body["preco"]
            package["prazo_contratado_dias"] = body["prazo_dias"]
            return httpx.Response(200, json={"data": package})

        return httpx.Response(405, json={"message": "método não suportado"})


@pytest.fixture
def backend() -> FakeShippingBackend:
    return FakeShippingBackend()


@pytest.fixture
def make_client(backend: FakeShippingBackend) -> Callable[[], ShippingApiClient]:
    """Factory for clients wired to the fake backend."""

    def factory() -> ShippingApiClient:
        return ShippingApiClient(base_url=BASE_URL, transport=httpx.MockTransport(backend.handler))

    return factory
