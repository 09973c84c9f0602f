"""inFakt API client with API key authentication."""

from typing import Any

import httpx
import structlog

from infakt_mcp.config import get_settings
from infakt_mcp.diagnostics import DiagnosticsSink, NullDiagnostics
from infakt_mcp.errors import BackendError, InFaktAPIError, TransportError
from infakt_mcp.pricing import normalize_line_items

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "X-inFakt-ApiKey"


class InFaktAPIClient:
    """Async client for the inFakt v3 REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        default_limit: int | None = None,
        send_line_totals: bool | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.infakt_api_url).rstrip("/")
        self._api_key = api_key or settings.infakt_api_key.get_secret_value()
        self._timeout = timeout or settings.infakt_timeout
        self._default_limit = default_limit or settings.infakt_default_limit
        self._send_line_totals = (
            settings.send_line_totals if send_line_totals is None else send_line_totals
        )
        self._diagnostics: DiagnosticsSink = diagnostics or NullDiagnostics()

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "InFaktAPIClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with the API key."""
        return {
            API_KEY_HEADER: self._api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    # === Generic Request Methods ===

    @staticmethod
    def _error_message(response: httpx.Response) -> tuple[str, Any]:
        """Pull the most useful message out of an error response."""
        details: Any = None
        if response.content:
            try:
                details = response.json()
            except ValueError:
                details = None

        if isinstance(details, dict):
            for key in ("error", "message", "errors"):
                value = details.get(key)
                if not value:
                    continue
                if isinstance(value, str):
                    return value, details
                if isinstance(value, list):
                    return "; ".join(str(v) for v in value), details
                if isinstance(value, dict):
                    parts = []
                    for field, msgs in value.items():
                        if isinstance(msgs, list):
                            msgs = ", ".join(str(m) for m in msgs)
                        parts.append(f"{field}: {msgs}")
                    return "; ".join(parts), details

        text = response.text.strip() if response.content else ""
        if text:
            return text[:500], (details if details is not None else {"raw": text[:500]})
        return response.reason_phrase or "empty response", details

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated API request. No retries."""
        client = await self._get_client()
        logger.debug("infakt_request", method=method, path=path, params=params)

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                headers=self._get_headers(),
            )
        except httpx.RequestError as e:
            message = str(e) or e.__class__.__name__
            logger.warning("infakt_transport_error", method=method, path=path, error=message)
            self._diagnostics.record("transport_error", method=method, path=path, error=message)
            raise TransportError(f"inFakt API request failed: {message}") from e

        if response.status_code >= 400:
            message, details = self._error_message(response)
            logger.warning(
                "infakt_api_error",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            self._diagnostics.record(
                "api_error",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            raise BackendError(response.status_code, message, details=details)

        logger.debug("infakt_response", method=method, path=path, status=response.status_code)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise InFaktAPIError(
                f"Invalid JSON in response from {path}", status_code=response.status_code
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make GET request."""
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        """Make POST request."""
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        """Make PUT request."""
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        """Make DELETE request."""
        return await self._request("DELETE", path)

    # === Helpers ===

    def _list_params(self, filters: dict[str, Any]) -> dict[str, Any]:
        """Drop unset filters, stringify booleans, apply the default page size."""
        params: dict[str, Any] = {}
        for key, value in filters.items():
            if value is None:
                continue
            params[key] = str(value).lower() if isinstance(value, bool) else value
        params.setdefault("limit", self._default_limit)
        return params

    @staticmethod
    def _extract_items(result: Any) -> list[dict[str, Any]]:
        """Return list of records from a bare list or an entities envelope."""
        if isinstance(result, list):
            return result
        if isinstance(result, dict):
            items = result.get("entities")
            if isinstance(items, list):
                return items
        return []

    @staticmethod
    def _as_record(result: Any) -> dict[str, Any]:
        return result if isinstance(result, dict) else {}

    def _normalize_invoice(self, data: dict[str, Any]) -> dict[str, Any]:
        """Re-render line item prices; leave payloads without services alone."""
        if data.get("services") is None:
            return {k: v for k, v in data.items() if k != "services"}
        services = normalize_line_items(
            data["services"], include_totals=self._send_line_totals
        )
        self._diagnostics.record("invoice_services_normalized", input=data["services"], services=services)
        return {**data, "services": services}

    # === Invoice Endpoints ===

    async def list_invoices(
        self,
        limit: int | None = None,
        offset: int | None = None,
        q: str | None = None,
        invoice_date_from: str | None = None,
        invoice_date_to: str | None = None,
        sale_date_from: str | None = None,
        sale_date_to: str | None = None,
        status: str | None = None,
        paid: bool | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """List invoices. Extra filters are passed through as query parameters."""
        params = self._list_params({
            "limit": limit,
            "offset": offset,
            "q": q,
            "invoice_date_from": invoice_date_from,
            "invoice_date_to": invoice_date_to,
            "sale_date_from": sale_date_from,
            "sale_date_to": sale_date_to,
            "status": status,
            "paid": paid,
            **filters,
        })
        result = await self.get("/invoices.json", params=params)
        return self._extract_items(result)

    async def get_invoice(self, invoice_id: int) -> dict[str, Any]:
        """Get invoice by ID."""
        result = await self.get(f"/invoices/{invoice_id}.json")
        return self._as_record(result)

    async def create_invoice(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create an invoice; services are normalized before sending."""
        payload = self._normalize_invoice(data)
        result = await self.post("/invoices.json", json={"invoice": payload})
        record = self._as_record(result)
        logger.info("invoice_created", invoice_id=record.get("id"), net_price=record.get("net_price"))
        self._diagnostics.record(
            "invoice_created",
            invoice_id=record.get("id"),
            net_price=record.get("net_price"),
            gross_price=record.get("gross_price"),
        )
        return record

    async def update_invoice(self, invoice_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Update an invoice. Omitted fields are left to the API to keep."""
        payload = self._normalize_invoice(data)
        result = await self.put(f"/invoices/{invoice_id}.json", json={"invoice": payload})
        self._diagnostics.record("invoice_updated", invoice_id=invoice_id, fields=sorted(payload))
        return self._as_record(result)

    async def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice."""
        await self.delete(f"/invoices/{invoice_id}.json")

    async def send_invoice(self, invoice_id: int, email: str | None = None) -> dict[str, Any]:
        """Deliver an invoice by email, to the client's address unless overridden."""
        body = {"email": email} if email else {}
        result = await self.post(f"/invoices/{invoice_id}/deliver_via_email.json", json=body)
        return self._as_record(result)

    # === Client Endpoints ===

    async def list_clients(
        self,
        limit: int | None = None,
        offset: int | None = None,
        q: str | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """List clients."""
        params = self._list_params({"limit": limit, "offset": offset, "q": q, **filters})
        result = await self.get("/clients.json", params=params)
        return self._extract_items(result)

    async def get_client(self, client_id: int) -> dict[str, Any]:
        """Get client by ID."""
        result = await self.get(f"/clients/{client_id}.json")
        return self._as_record(result)

    async def create_client(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new client."""
        result = await self.post("/clients.json", json={"client": data})
        return self._as_record(result)

    async def update_client(self, client_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Update a client."""
        result = await self.put(f"/clients/{client_id}.json", json={"client": data})
        return self._as_record(result)

    async def delete_client(self, client_id: int) -> None:
        """Delete a client."""
        await self.delete(f"/clients/{client_id}.json")

    # === Product Endpoints ===

    async def list_products(
        self,
        limit: int | None = None,
        offset: int | None = None,
        q: str | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """List products."""
        params = self._list_params({"limit": limit, "offset": offset, "q": q, **filters})
        result = await self.get("/products.json", params=params)
        return self._extract_items(result)

    async def get_product(self, product_id: int) -> dict[str, Any]:
        """Get product by ID."""
        result = await self.get(f"/products/{product_id}.json")
        return self._as_record(result)

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new product."""
        result = await self.post("/products.json", json={"product": data})
        return self._as_record(result)

    async def update_product(self, product_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Update a product."""
        result = await self.put(f"/products/{product_id}.json", json={"product": data})
        return self._as_record(result)

    async def delete_product(self, product_id: int) -> None:
        """Delete a product."""
        await self.delete(f"/products/{product_id}.json")

    # === Bank Account Endpoints ===

    async def list_bank_accounts(self, **filters: Any) -> list[dict[str, Any]]:
        """List bank accounts."""
        result = await self.get("/bank_accounts.json", params=self._list_params(filters))
        return self._extract_items(result)

    async def get_bank_account(self, account_id: int) -> dict[str, Any]:
        """Get bank account by ID."""
        result = await self.get(f"/bank_accounts/{account_id}.json")
        return self._as_record(result)

    async def create_bank_account(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new bank account."""
        result = await self.post("/bank_accounts.json", json={"bank_account": data})
        return self._as_record(result)

    async def update_bank_account(self, account_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Update a bank account."""
        result = await self.put(
            f"/bank_accounts/{account_id}.json", json={"bank_account": data}
        )
        return self._as_record(result)

    async def delete_bank_account(self, account_id: int) -> None:
        """Delete a bank account."""
        await self.delete(f"/bank_accounts/{account_id}.json")

    # === Payment Endpoints ===

    async def list_payments(
        self,
        limit: int | None = None,
        offset: int | None = None,
        invoice_id: int | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """List payments, optionally for a single invoice."""
        params = self._list_params(
            {"limit": limit, "offset": offset, "invoice_id": invoice_id, **filters}
        )
        result = await self.get("/payments.json", params=params)
        return self._extract_items(result)

    async def get_payment(self, payment_id: int) -> dict[str, Any]:
        """Get payment by ID."""
        result = await self.get(f"/payments/{payment_id}.json")
        return self._as_record(result)

    async def create_payment(self, data: dict[str, Any]) -> dict[str, Any]:
        """Record a payment against an invoice."""
        result = await self.post("/payments.json", json={"payment": data})
        return self._as_record(result)
