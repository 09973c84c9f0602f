"""Tests for the inFakt API client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import make_response
from infakt_mcp.errors import BackendError, InvalidAmountError, TransportError
from infakt_mcp.tools.infakt_api import API_KEY_HEADER, InFaktAPIClient


def sent(mock_http) -> dict:
    """Keyword arguments of the last request made through the mock."""
    return mock_http.request.call_args.kwargs


class TestInFaktAPIClientInit:
    """Tests for InFaktAPIClient initialization."""

    def test_init_with_explicit_params(self):
        client = InFaktAPIClient(
            api_key="custom-key",
            base_url="http://localhost:9000/v3",
            timeout=5.0,
            default_limit=10,
        )

        assert client.base_url == "http://localhost:9000/v3"
        assert client._api_key == "custom-key"
        assert client._timeout == 5.0
        assert client._default_limit == 10

    def test_init_from_settings(self):
        client = InFaktAPIClient()

        assert client.base_url == "https://api.infakt.pl/v3"
        assert client._api_key == "test-api-key"
        assert client._default_limit == 25

    def test_init_strips_trailing_slash(self):
        client = InFaktAPIClient(api_key="k", base_url="https://api.infakt.pl/v3/")

        assert client.base_url == "https://api.infakt.pl/v3"

    def test_headers_carry_api_key(self, client):
        headers = client._get_headers()

        assert headers[API_KEY_HEADER] == "test-api-key"
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_context_manager_closes_http_client(self):
        client = InFaktAPIClient(api_key="k")
        async with client as c:
            http = await c._get_client()
            assert isinstance(http, httpx.AsyncClient)
            assert await c._get_client() is http

        assert client._client is None


class TestListEndpoints:
    """Tests for list methods and their query parameters."""

    @pytest.mark.asyncio
    async def test_list_invoices_applies_default_limit(self, client, mock_http):
        mock_http.request.return_value = make_response(200, [])

        result = await client.list_invoices()

        assert result == []
        kwargs = sent(mock_http)
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "/invoices.json"
        assert kwargs["params"] == {"limit": 25}
        assert kwargs["headers"][API_KEY_HEADER] == "test-api-key"

    @pytest.mark.asyncio
    async def test_list_invoices_filters(self, client, mock_http):
        mock_http.request.return_value = make_response(200, [])

        await client.list_invoices(limit=5, offset=10, status="paid", paid=True, q=None)

        assert sent(mock_http)["params"] == {
            "limit": 5,
            "offset": 10,
            "status": "paid",
            "paid": "true",
        }

    @pytest.mark.asyncio
    async def test_list_clients_unwraps_entities(self, client, mock_http, mock_clients_response):
        mock_http.request.return_value = make_response(200, mock_clients_response)

        result = await client.list_clients(q="Acme")

        assert len(result) == 2
        assert result[0]["company_name"] == "Acme Sp. z o.o."
        assert sent(mock_http)["params"] == {"q": "Acme", "limit": 25}

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("list_clients", "/clients.json"),
            ("list_products", "/products.json"),
            ("list_bank_accounts", "/bank_accounts.json"),
            ("list_payments", "/payments.json"),
        ],
    )
    @pytest.mark.asyncio
    async def test_list_paths_use_default_limit(self, client, mock_http, method, path):
        mock_http.request.return_value = make_response(200, [])

        assert await getattr(client, method)() == []
        assert sent(mock_http)["url"] == path
        assert sent(mock_http)["params"]["limit"] == 25

    @pytest.mark.asyncio
    async def test_list_passes_extra_filters(self, client, mock_http):
        mock_http.request.return_value = make_response(200, [])

        await client.list_products(q="kawa", order="name", archived=False)
        assert sent(mock_http)["params"] == {
            "q": "kawa",
            "order": "name",
            "archived": "false",
            "limit": 25,
        }

        await client.list_bank_accounts(offset=5)
        assert sent(mock_http)["params"] == {"offset": 5, "limit": 25}

    @pytest.mark.asyncio
    async def test_list_payments_for_invoice(self, client, mock_http):
        mock_http.request.return_value = make_response(200, [{"id": 1, "invoice_id": 4321}])

        result = await client.list_payments(invoice_id=4321)

        assert result[0]["invoice_id"] == 4321
        assert sent(mock_http)["params"] == {"invoice_id": 4321, "limit": 25}


class TestRecordEndpoints:
    """Tests for get/create/update/delete requests."""

    @pytest.mark.asyncio
    async def test_get_invoice(self, client, mock_http, mock_invoice_response):
        mock_http.request.return_value = make_response(200, mock_invoice_response)

        result = await client.get_invoice(4321)

        assert result["number"] == "1/10/2026"
        assert sent(mock_http)["url"] == "/invoices/4321.json"

    @pytest.mark.asyncio
    async def test_create_invoice_normalizes_services(
        self, client, mock_http, mock_invoice_response, diagnostics
    ):
        mock_http.request.return_value = make_response(201, mock_invoice_response)

        result = await client.create_invoice({
            "invoice_date": "2026-10-01",
            "sale_date": "2026-10-01",
            "payment_date": "2026-10-15",
            "payment_method": "transfer",
            "client_id": 77,
            "services": [
                {"name": "Consulting", "tax_symbol": 23, "quantity": 1, "unit_net_price": "500"}
            ],
        })

        kwargs = sent(mock_http)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "/invoices.json"
        service = kwargs["json"]["invoice"]["services"][0]
        assert service["unit_net_price"] == "500.00"
        assert service["net_price"] == "500.00"
        assert service["tax_price"] == "115.00"
        assert service["gross_price"] == "615.00"

        assert (result["net_price"], result["tax_price"], result["gross_price"]) == (
            service["net_price"],
            service["tax_price"],
            service["gross_price"],
        )
        assert "invoice_services_normalized" in diagnostics.names()
        assert "invoice_created" in diagnostics.names()

    @pytest.mark.asyncio
    async def test_create_invoice_without_totals(self, mock_invoice_response):
        client = InFaktAPIClient(api_key="k", send_line_totals=False)
        http = AsyncMock()
        http.request = AsyncMock(return_value=make_response(201, mock_invoice_response))

        with patch.object(client, "_get_client", AsyncMock(return_value=http)):
            await client.create_invoice({
                "services": [{"name": "x", "tax_symbol": 23, "unit_net_price": 10}],
            })

        service = http.request.call_args.kwargs["json"]["invoice"]["services"][0]
        assert service == {"name": "x", "tax_symbol": 23, "unit_net_price": "10.00", "quantity": 1}

    @pytest.mark.asyncio
    async def test_create_invoice_invalid_price_makes_no_request(self, client, mock_http):
        with pytest.raises(InvalidAmountError):
            await client.create_invoice({
                "client_id": 77,
                "services": [{"name": "x", "tax_symbol": 23, "unit_net_price": "abc"}],
            })

        mock_http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_partial_update_does_not_send_services(self, client, mock_http, mock_invoice_response):
        mock_http.request.return_value = make_response(200, mock_invoice_response)

        await client.update_invoice(4321, {"notes": "Paid in advance"})

        kwargs = sent(mock_http)
        assert kwargs["method"] == "PUT"
        assert kwargs["url"] == "/invoices/4321.json"
        assert kwargs["json"] == {"invoice": {"notes": "Paid in advance"}}

    @pytest.mark.asyncio
    async def test_update_with_services_normalizes(self, client, mock_http, mock_invoice_response):
        mock_http.request.return_value = make_response(200, mock_invoice_response)

        await client.update_invoice(
            4321, {"services": [{"name": "x", "tax_symbol": 8, "quantity": 2, "unit_net_price": 50}]}
        )

        service = sent(mock_http)["json"]["invoice"]["services"][0]
        assert service["unit_net_price"] == "50.00"
        assert service["gross_price"] == "108.00"

    @pytest.mark.parametrize(
        ("method", "path", "wrapper"),
        [
            ("create_client", "/clients.json", "client"),
            ("create_product", "/products.json", "product"),
            ("create_bank_account", "/bank_accounts.json", "bank_account"),
            ("create_payment", "/payments.json", "payment"),
        ],
    )
    @pytest.mark.asyncio
    async def test_create_wraps_payload_verbatim(self, client, mock_http, method, path, wrapper):
        mock_http.request.return_value = make_response(201, {"id": 1})
        data = {"name": "A", "paid_price": "100", "extra_field": 5}

        result = await getattr(client, method)(data)

        assert result == {"id": 1}
        assert sent(mock_http)["url"] == path
        assert sent(mock_http)["json"] == {wrapper: data}

    @pytest.mark.parametrize(
        ("method", "path", "wrapper"),
        [
            ("update_client", "/clients/5.json", "client"),
            ("update_product", "/products/5.json", "product"),
            ("update_bank_account", "/bank_accounts/5.json", "bank_account"),
        ],
    )
    @pytest.mark.asyncio
    async def test_update_paths(self, client, mock_http, method, path, wrapper):
        mock_http.request.return_value = make_response(200, {"id": 5})

        await getattr(client, method)(5, {"city": "Gdańsk"})

        assert sent(mock_http)["method"] == "PUT"
        assert sent(mock_http)["url"] == path
        assert sent(mock_http)["json"] == {wrapper: {"city": "Gdańsk"}}

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("delete_invoice", "/invoices/3.json"),
            ("delete_client", "/clients/3.json"),
            ("delete_product", "/products/3.json"),
            ("delete_bank_account", "/bank_accounts/3.json"),
        ],
    )
    @pytest.mark.asyncio
    async def test_delete_has_no_body(self, client, mock_http, method, path):
        mock_http.request.return_value = make_response(204)

        assert await getattr(client, method)(3) is None
        assert sent(mock_http)["method"] == "DELETE"
        assert sent(mock_http)["url"] == path
        assert sent(mock_http)["json"] is None

    @pytest.mark.asyncio
    async def test_send_invoice_with_email(self, client, mock_http):
        mock_http.request.return_value = make_response(200, {})

        await client.send_invoice(4321, email="buyer@example.com")

        assert sent(mock_http)["url"] == "/invoices/4321/deliver_via_email.json"
        assert sent(mock_http)["json"] == {"email": "buyer@example.com"}

    @pytest.mark.asyncio
    async def test_send_invoice_defaults_to_client_email(self, client, mock_http):
        mock_http.request.return_value = make_response(204)

        await client.send_invoice(4321)

        assert sent(mock_http)["json"] == {}


class TestErrorMapping:
    """Tests for mapping failures to BackendError / TransportError."""

    @pytest.mark.asyncio
    async def test_not_found(self, client, mock_http, diagnostics):
        mock_http.request.return_value = make_response(404, {"error": "Not found"})

        with pytest.raises(BackendError) as exc_info:
            await client.get_invoice(999999)

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "inFakt API Error (404): Not found"
        assert "api_error" in diagnostics.names()

    @pytest.mark.asyncio
    async def test_message_field(self, client, mock_http):
        mock_http.request.return_value = make_response(401, {"message": "Invalid API key"})

        with pytest.raises(BackendError) as exc_info:
            await client.list_clients()

        assert exc_info.value.backend_message == "Invalid API key"

    @pytest.mark.asyncio
    async def test_validation_errors_dict(self, client, mock_http):
        mock_http.request.return_value = make_response(
            422, {"errors": {"client_id": ["can't be blank"], "services": ["is invalid"]}}
        )

        with pytest.raises(BackendError) as exc_info:
            await client.create_client({"company_name": "X"})

        assert exc_info.value.status_code == 422
        assert "client_id: can't be blank" in str(exc_info.value)
        assert exc_info.value.details["errors"]["services"] == ["is invalid"]

    @pytest.mark.asyncio
    async def test_plain_text_body(self, client, mock_http):
        mock_http.request.return_value = make_response(502, text="Bad Gateway from upstream")

        with pytest.raises(BackendError) as exc_info:
            await client.get_client(1)

        assert exc_info.value.status_code == 502
        assert "Bad Gateway from upstream" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_body_uses_reason_phrase(self, client, mock_http):
        mock_http.request.return_value = make_response(500)

        with pytest.raises(BackendError) as exc_info:
            await client.get_payment(1)

        assert str(exc_info.value) == "inFakt API Error (500): Internal Server Error"

    @pytest.mark.asyncio
    async def test_transport_error(self, client, mock_http, diagnostics):
        mock_http.request.side_effect = httpx.ConnectError("Name or service not known")

        with pytest.raises(TransportError) as exc_info:
            await client.list_products()

        assert exc_info.value.status_code is None
        assert "Name or service not known" in str(exc_info.value)
        assert "transport_error" in diagnostics.names()

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, client, mock_http):
        mock_http.request.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(TransportError):
            await client.get_invoice(1)

        assert mock_http.request.call_count == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self, client, mock_http):
        mock_http.request.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await client.get_invoice(1)
