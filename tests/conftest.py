"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, patch

import httpx
import pytest

# Set test environment variables before importing settings
os.environ.setdefault("INFAKT_API_KEY", "test-api-key")
os.environ.pop("INFAKT_DEBUG_LOG", None)

from infakt_mcp.tools.infakt_api import InFaktAPIClient  # noqa: E402


def make_response(status_code: int = 200, json_data=None, text: str | None = None) -> httpx.Response:
    """Build a real httpx response for mocked requests."""
    request = httpx.Request("GET", "https://api.infakt.pl/v3/test")
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text or "", request=request)


class RecordingDiagnostics:
    """Diagnostics sink that keeps events in memory."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def record(self, event: str, **fields) -> None:
        self.events.append((event, fields))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def client(diagnostics):
    """Create an InFaktAPIClient instance."""
    return InFaktAPIClient(
        api_key="test-api-key",
        base_url="https://api.infakt.pl/v3",
        diagnostics=diagnostics,
    )


@pytest.fixture
def mock_http(client):
    """Patch the client's HTTP layer; set mock_http.request.return_value per test."""
    http = AsyncMock()
    http.request = AsyncMock(return_value=make_response(200, {}))
    http.aclose = AsyncMock()
    with patch.object(client, "_get_client", AsyncMock(return_value=http)):
        yield http


@pytest.fixture
def mock_invoice_response():
    """Mock invoice response."""
    return {
        "id": 4321,
        "number": "1/10/2026",
        "client_id": 77,
        "client_company_name": "Acme Sp. z o.o.",
        "invoice_date": "2026-10-01",
        "sale_date": "2026-10-01",
        "payment_date": "2026-10-15",
        "payment_method": "transfer",
        "status": "draft",
        "currency": "PLN",
        "net_price": "500.00",
        "tax_price": "115.00",
        "gross_price": "615.00",
        "paid_price": "0.00",
        "services": [
            {
                "id": 9,
                "name": "Consulting",
                "tax_symbol": 23,
                "quantity": 1,
                "unit_net_price": "500.00",
                "net_price": "500.00",
                "tax_price": "115.00",
                "gross_price": "615.00",
            }
        ],
    }


@pytest.fixture
def mock_clients_response():
    """Mock clients list response in the entities envelope."""
    return {
        "metainfo": {"count": 2, "total_count": 2, "next": None, "previous": None},
        "entities": [
            {"id": 77, "company_name": "Acme Sp. z o.o.", "city": "Warszawa", "nip": "5260250274"},
            {"id": 78, "company_name": "Globex S.A.", "city": "Kraków", "nip": "6761013717"},
        ],
    }
