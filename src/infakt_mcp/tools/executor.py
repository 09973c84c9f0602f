"""Tool executor that bridges MCP tool calls to the inFakt API."""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from infakt_mcp.errors import (
    InFaktAPIError,
    InFaktError,
    MissingArgumentError,
    UnknownToolError,
)
from infakt_mcp.tools.infakt_api import InFaktAPIClient

logger = structlog.get_logger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


@dataclass(frozen=True)
class ToolResult:
    """Text envelope returned to the MCP host."""

    text: str
    is_error: bool = False


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _require_id(tool_name: str, arguments: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    """Split the resource id from the rest of the arguments.

    There is no fallback id: a missing id fails here instead of turning
    into a lookup of record 0 on the API.
    """
    rest = dict(arguments)
    resource_id = rest.pop("id", None)
    if resource_id is None or isinstance(resource_id, bool):
        raise MissingArgumentError(tool_name, "id")
    if isinstance(resource_id, float) and resource_id.is_integer():
        resource_id = int(resource_id)
    if isinstance(resource_id, str) and resource_id.strip().isdigit():
        resource_id = int(resource_id.strip())
    if not isinstance(resource_id, int):
        raise MissingArgumentError(tool_name, "id")
    return resource_id, rest


class ToolExecutor:
    """Executes MCP tool calls against the inFakt API."""

    def __init__(self, client: InFaktAPIClient):
        self.client = client
        self._tool_handlers: dict[str, ToolHandler] = {
            # Invoices
            "list_invoices": self._list_invoices,
            "get_invoice": self._get_invoice,
            "create_invoice": self._create_invoice,
            "update_invoice": self._update_invoice,
            "delete_invoice": self._delete_invoice,
            "send_invoice": self._send_invoice,
            # Clients
            "list_clients": self._list_clients,
            "get_client": self._get_client,
            "create_client": self._create_client,
            "update_client": self._update_client,
            "delete_client": self._delete_client,
            # Products
            "list_products": self._list_products,
            "get_product": self._get_product,
            "create_product": self._create_product,
            "update_product": self._update_product,
            "delete_product": self._delete_product,
            # Bank accounts
            "list_bank_accounts": self._list_bank_accounts,
            "get_bank_account": self._get_bank_account,
            "create_bank_account": self._create_bank_account,
            "update_bank_account": self._update_bank_account,
            "delete_bank_account": self._delete_bank_account,
            # Payments
            "list_payments": self._list_payments,
            "get_payment": self._get_payment,
            "create_payment": self._create_payment,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._tool_handlers)

    async def execute(self, tool_name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Execute a tool call. Never raises: failures come back flagged as errors."""
        arguments = arguments or {}

        try:
            handler = self._tool_handlers.get(tool_name)
            if handler is None:
                raise UnknownToolError(tool_name)

            logger.info("executing_tool", tool=tool_name, args=arguments)
            text = await handler(arguments)
            logger.info("tool_executed", tool=tool_name, success=True)
            return ToolResult(text=text)
        except InFaktAPIError as e:
            logger.warning(
                "tool_api_error",
                tool=tool_name,
                status=e.status_code,
                details=e.details,
            )
            return ToolResult(text=f"Error: {e}", is_error=True)
        except InFaktError as e:
            logger.warning("tool_rejected", tool=tool_name, error=str(e))
            return ToolResult(text=f"Error: {e}", is_error=True)
        except Exception as e:
            logger.exception("tool_execution_error", tool=tool_name)
            return ToolResult(text=f"Error: {e}", is_error=True)

    # === Invoice Handlers ===

    async def _list_invoices(self, arguments: dict[str, Any]) -> str:
        return _to_json(await self.client.list_invoices(**arguments))

    async def _get_invoice(self, arguments: dict[str, Any]) -> str:
        invoice_id, _ = _require_id("get_invoice", arguments)
        return _to_json(await self.client.get_invoice(invoice_id))

    async def _create_invoice(self, arguments: dict[str, Any]) -> str:
        invoice = await self.client.create_invoice(dict(arguments))
        return f"Invoice created successfully:\n{_to_json(invoice)}"

    async def _update_invoice(self, arguments: dict[str, Any]) -> str:
        invoice_id, data = _require_id("update_invoice", arguments)
        invoice = await self.client.update_invoice(invoice_id, data)
        return f"Invoice updated successfully:\n{_to_json(invoice)}"

    async def _delete_invoice(self, arguments: dict[str, Any]) -> str:
        invoice_id, _ = _require_id("delete_invoice", arguments)
        await self.client.delete_invoice(invoice_id)
        return f"Invoice {invoice_id} deleted successfully"

    async def _send_invoice(self, arguments: dict[str, Any]) -> str:
        invoice_id, rest = _require_id("send_invoice", arguments)
        await self.client.send_invoice(invoice_id, email=rest.get("email"))
        return f"Invoice {invoice_id} sent successfully via email"

    # === Client Handlers ===

    async def _list_clients(self, arguments: dict[str, Any]) -> str:
        return _to_json(await self.client.list_clients(**arguments))

    async def _get_client(self, arguments: dict[str, Any]) -> str:
        client_id, _ = _require_id("get_client", arguments)
        return _to_json(await self.client.get_client(client_id))

    async def _create_client(self, arguments: dict[str, Any]) -> str:
        client = await self.client.create_client(dict(arguments))
        return f"Client created successfully:\n{_to_json(client)}"

    async def _update_client(self, arguments: dict[str, Any]) -> str:
        client_id, data = _require_id("update_client", arguments)
        client = await self.client.update_client(client_id, data)
        return f"Client updated successfully:\n{_to_json(client)}"

    async def _delete_client(self, arguments: dict[str, Any]) -> str:
        client_id, _ = _require_id("delete_client", arguments)
        await self.client.delete_client(client_id)
        return f"Client {client_id} deleted successfully"

    # === Product Handlers ===

    async def _list_products(self, arguments: dict[str, Any]) -> str:
        return _to_json(await self.client.list_products(**arguments))

    async def _get_product(self, arguments: dict[str, Any]) -> str:
        product_id, _ = _require_id("get_product", arguments)
        return _to_json(await self.client.get_product(product_id))

    async def _create_product(self, arguments: dict[str, Any]) -> str:
        product = await self.client.create_product(dict(arguments))
        return f"Product created successfully:\n{_to_json(product)}"

    async def _update_product(self, arguments: dict[str, Any]) -> str:
        product_id, data = _require_id("update_product", arguments)
        product = await self.client.update_product(product_id, data)
        return f"Product updated successfully:\n{_to_json(product)}"

    async def _delete_product(self, arguments: dict[str, Any]) -> str:
        product_id, _ = _require_id("delete_product", arguments)
        await self.client.delete_product(product_id)
        return f"Product {product_id} deleted successfully"

    # === Bank Account Handlers ===

    async def _list_bank_accounts(self, arguments: dict[str, Any]) -> str:
        return _to_json(await self.client.list_bank_accounts(**arguments))

    async def _get_bank_account(self, arguments: dict[str, Any]) -> str:
        account_id, _ = _require_id("get_bank_account", arguments)
        return _to_json(await self.client.get_bank_account(account_id))

    async def _create_bank_account(self, arguments: dict[str, Any]) -> str:
        account = await self.client.create_bank_account(dict(arguments))
        return f"Bank account created successfully:\n{_to_json(account)}"

    async def _update_bank_account(self, arguments: dict[str, Any]) -> str:
        account_id, data = _require_id("update_bank_account", arguments)
        account = await self.client.update_bank_account(account_id, data)
        return f"Bank account updated successfully:\n{_to_json(account)}"

    async def _delete_bank_account(self, arguments: dict[str, Any]) -> str:
        account_id, _ = _require_id("delete_bank_account", arguments)
        await self.client.delete_bank_account(account_id)
        return f"Bank account {account_id} deleted successfully"

    # === Payment Handlers ===

    async def _list_payments(self, arguments: dict[str, Any]) -> str:
        return _to_json(await self.client.list_payments(**arguments))

    async def _get_payment(self, arguments: dict[str, Any]) -> str:
        payment_id, _ = _require_id("get_payment", arguments)
        return _to_json(await self.client.get_payment(payment_id))

    async def _create_payment(self, arguments: dict[str, Any]) -> str:
        payment = await self.client.create_payment(dict(arguments))
        return f"Payment created successfully:\n{_to_json(payment)}"
