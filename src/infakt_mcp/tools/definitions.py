"""Tool definitions for MCP clients calling the inFakt API.

These schemas describe the tools an AI agent can use to work with inFakt
invoices, clients, products, bank accounts and payments. Each tool maps to
exactly one inFakt API endpoint.
"""

from typing import Any

DATE_HINT = "(YYYY-MM-DD)"
PRICE_HINT = 'decimal string with two places and a period separator, e.g. "1800.00" (not "1800" or "1800,00")'


def _id_property(resource: str) -> dict[str, Any]:
    return {"type": "integer", "description": f"{resource} ID"}


def _id_only_schema(resource: str, action: str = "") -> dict[str, Any]:
    description = f"{resource} ID to {action}" if action else f"{resource} ID"
    return {
        "type": "object",
        "properties": {"id": {"type": "integer", "description": description}},
        "required": ["id"],
    }


PAGINATION_PROPERTIES: dict[str, Any] = {
    "limit": {
        "type": "integer",
        "description": "Maximum number of records to return (default: 25)",
        "minimum": 1,
    },
    "offset": {
        "type": "integer",
        "description": "Number of records to skip (default: 0)",
        "minimum": 0,
    },
}

# === Invoice Tools ===

INVOICE_SERVICE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Service/product name"},
        "tax_symbol": {
            "type": ["number", "string"],
            "description": 'VAT rate in percent (e.g. 23, 8, 5, 0) or "zw" / "np" / "oo" for exempt lines',
        },
        "quantity": {"type": "number", "description": "Quantity (default: 1)"},
        "unit_net_price": {
            "type": ["string", "number"],
            "description": f"Unit net price as a {PRICE_HINT}",
        },
        "unit": {"type": "string", "description": "Unit of measurement (e.g. szt, usł, h)"},
    },
    "required": ["name", "tax_symbol", "quantity", "unit_net_price"],
}

LIST_INVOICES_TOOL: dict[str, Any] = {
    "name": "list_invoices",
    "description": "List invoices with optional filters. Returns up to 25 invoices unless a limit is given.",
    "input_schema": {
        "type": "object",
        "properties": {
            **PAGINATION_PROPERTIES,
            "q": {"type": "string", "description": "Search query string"},
            "invoice_date_from": {"type": "string", "description": f"Invoice date from {DATE_HINT}"},
            "invoice_date_to": {"type": "string", "description": f"Invoice date to {DATE_HINT}"},
            "sale_date_from": {"type": "string", "description": f"Sale date from {DATE_HINT}"},
            "sale_date_to": {"type": "string", "description": f"Sale date to {DATE_HINT}"},
            "status": {"type": "string", "description": "Filter by status (e.g. draft, sent, printed, paid)"},
            "paid": {"type": "boolean", "description": "Filter by paid status"},
        },
        "required": [],
    },
}

GET_INVOICE_TOOL: dict[str, Any] = {
    "name": "get_invoice",
    "description": "Get the full details of an invoice, including its services and totals.",
    "input_schema": _id_only_schema("Invoice"),
}

CREATE_INVOICE_TOOL: dict[str, Any] = {
    "name": "create_invoice",
    "description": (
        "Create a new invoice. Net, tax and gross amounts are calculated for each service "
        "from unit_net_price, quantity and tax_symbol. IMPORTANT: unit_net_price must be a "
        f"{PRICE_HINT}. Example service: "
        '{"name": "Consulting", "tax_symbol": 23, "quantity": 1, "unit_net_price": "500.00"} '
        "gives net 500.00, tax 115.00, gross 615.00."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "invoice_date": {"type": "string", "description": f"Invoice date {DATE_HINT}"},
            "sale_date": {"type": "string", "description": f"Sale date {DATE_HINT}"},
            "payment_date": {"type": "string", "description": f"Payment due date {DATE_HINT}"},
            "payment_method": {
                "type": "string",
                "description": "Payment method (e.g. transfer, cash, card)",
            },
            "client_id": {"type": "integer", "description": "Client ID"},
            "services": {
                "type": "array",
                "description": "Services/products on the invoice",
                "items": INVOICE_SERVICE_SCHEMA,
                "minItems": 1,
            },
            "notes": {"type": "string", "description": "Additional notes"},
            "currency": {"type": "string", "description": "Currency code (default: PLN)"},
            "kind": {"type": "string", "description": "Invoice kind (default: vat)"},
        },
        "required": [
            "invoice_date",
            "sale_date",
            "payment_date",
            "payment_method",
            "client_id",
            "services",
        ],
    },
}

UPDATE_INVOICE_TOOL: dict[str, Any] = {
    "name": "update_invoice",
    "description": (
        "Update an existing invoice. Only the fields you pass are changed; leave out "
        "services to keep the current line items. If services are passed they replace "
        f"the existing ones and each unit_net_price must be a {PRICE_HINT}."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "id": _id_property("Invoice"),
            "invoice_date": {"type": "string", "description": f"Invoice date {DATE_HINT}"},
            "sale_date": {"type": "string", "description": f"Sale date {DATE_HINT}"},
            "payment_date": {"type": "string", "description": f"Payment due date {DATE_HINT}"},
            "payment_method": {"type": "string", "description": "Payment method"},
            "client_id": {"type": "integer", "description": "Client ID"},
            "services": {
                "type": "array",
                "description": "Replacement services/products",
                "items": INVOICE_SERVICE_SCHEMA,
            },
            "notes": {"type": "string", "description": "Additional notes"},
        },
        "required": ["id"],
    },
}

DELETE_INVOICE_TOOL: dict[str, Any] = {
    "name": "delete_invoice",
    "description": "Delete an invoice by ID.",
    "input_schema": _id_only_schema("Invoice", "delete"),
}

SEND_INVOICE_TOOL: dict[str, Any] = {
    "name": "send_invoice",
    "description": "Send an invoice by email. Uses the client's email address unless one is given.",
    "input_schema": {
        "type": "object",
        "properties": {
            "id": {"type": "integer", "description": "Invoice ID to send"},
            "email": {
                "type": "string",
                "description": "Recipient email address (optional, defaults to the client's email)",
            },
        },
        "required": ["id"],
    },
}

# === Client Tools ===

CLIENT_PROPERTIES: dict[str, Any] = {
    "company_name": {"type": "string", "description": "Company name"},
    "first_name": {"type": "string", "description": "First name"},
    "last_name": {"type": "string", "description": "Last name"},
    "street": {"type": "string", "description": "Street name"},
    "street_number": {"type": "string", "description": "Street number"},
    "flat_number": {"type": "string", "description": "Flat number"},
    "city": {"type": "string", "description": "City"},
    "country": {"type": "string", "description": "Country code (e.g. PL)"},
    "postal_code": {"type": "string", "description": "Postal code (e.g. 00-001)"},
    "nip": {"type": "string", "description": "Tax ID (NIP)"},
    "email": {"type": "string", "description": "Email address"},
    "phone": {"type": "string", "description": "Phone number"},
    "bank_account": {"type": "string", "description": "Bank account number"},
    "note": {"type": "string", "description": "Additional notes"},
}

LIST_CLIENTS_TOOL: dict[str, Any] = {
    "name": "list_clients",
    "description": "List clients. Use q to search by name or NIP.",
    "input_schema": {
        "type": "object",
        "properties": {
            **PAGINATION_PROPERTIES,
            "q": {"type": "string", "description": "Search query string"},
        },
        "required": [],
    },
}

GET_CLIENT_TOOL: dict[str, Any] = {
    "name": "get_client",
    "description": "Get details of a specific client by ID.",
    "input_schema": _id_only_schema("Client"),
}

CREATE_CLIENT_TOOL: dict[str, Any] = {
    "name": "create_client",
    "description": "Create a new client (the buyer on invoices).",
    "input_schema": {
        "type": "object",
        "properties": CLIENT_PROPERTIES,
        "required": ["company_name", "street", "city", "country", "postal_code"],
    },
}

UPDATE_CLIENT_TOOL: dict[str, Any] = {
    "name": "update_client",
    "description": "Update an existing client. Only the fields you pass are changed.",
    "input_schema": {
        "type": "object",
        "properties": {"id": _id_property("Client"), **CLIENT_PROPERTIES},
        "required": ["id"],
    },
}

DELETE_CLIENT_TOOL: dict[str, Any] = {
    "name": "delete_client",
    "description": "Delete a client by ID.",
    "input_schema": _id_only_schema("Client", "delete"),
}

# === Product Tools ===

PRODUCT_PROPERTIES: dict[str, Any] = {
    "name": {"type": "string", "description": "Product name"},
    "description": {"type": "string", "description": "Product description"},
    "quantity": {"type": "number", "description": "Quantity"},
    "unit": {"type": "string", "description": "Unit of measurement (e.g. szt, kg, usł)"},
    "net_price": {"type": "string", "description": f"Net price as a {PRICE_HINT}"},
    "tax_symbol": {
        "type": ["number", "string"],
        "description": 'VAT rate in percent (e.g. 23) or "zw" for exempt',
    },
}

LIST_PRODUCTS_TOOL: dict[str, Any] = {
    "name": "list_products",
    "description": "List products saved in the product catalogue.",
    "input_schema": {
        "type": "object",
        "properties": {
            **PAGINATION_PROPERTIES,
            "q": {"type": "string", "description": "Search query string"},
        },
        "required": [],
    },
}

GET_PRODUCT_TOOL: dict[str, Any] = {
    "name": "get_product",
    "description": "Get details of a specific product by ID.",
    "input_schema": _id_only_schema("Product"),
}

CREATE_PRODUCT_TOOL: dict[str, Any] = {
    "name": "create_product",
    "description": "Create a new product in the catalogue.",
    "input_schema": {
        "type": "object",
        "properties": PRODUCT_PROPERTIES,
        "required": ["name", "quantity", "net_price", "tax_symbol"],
    },
}

UPDATE_PRODUCT_TOOL: dict[str, Any] = {
    "name": "update_product",
    "description": "Update an existing product. Only the fields you pass are changed.",
    "input_schema": {
        "type": "object",
        "properties": {"id": _id_property("Product"), **PRODUCT_PROPERTIES},
        "required": ["id"],
    },
}

DELETE_PRODUCT_TOOL: dict[str, Any] = {
    "name": "delete_product",
    "description": "Delete a product by ID.",
    "input_schema": _id_only_schema("Product", "delete"),
}

# === Bank Account Tools ===

BANK_ACCOUNT_PROPERTIES: dict[str, Any] = {
    "bank_name": {"type": "string", "description": "Bank name"},
    "account_number": {"type": "string", "description": "Bank account number (IBAN)"},
    "swift": {"type": "string", "description": "SWIFT/BIC code"},
    "default": {"type": "boolean", "description": "Use as the default account on invoices"},
}

LIST_BANK_ACCOUNTS_TOOL: dict[str, Any] = {
    "name": "list_bank_accounts",
    "description": "List the bank accounts configured for the company.",
    "input_schema": {"type": "object", "properties": {}, "required": []},
}

GET_BANK_ACCOUNT_TOOL: dict[str, Any] = {
    "name": "get_bank_account",
    "description": "Get details of a specific bank account by ID.",
    "input_schema": _id_only_schema("Bank account"),
}

CREATE_BANK_ACCOUNT_TOOL: dict[str, Any] = {
    "name": "create_bank_account",
    "description": "Add a bank account.",
    "input_schema": {
        "type": "object",
        "properties": BANK_ACCOUNT_PROPERTIES,
        "required": ["bank_name", "account_number"],
    },
}

UPDATE_BANK_ACCOUNT_TOOL: dict[str, Any] = {
    "name": "update_bank_account",
    "description": "Update an existing bank account.",
    "input_schema": {
        "type": "object",
        "properties": {"id": _id_property("Bank account"), **BANK_ACCOUNT_PROPERTIES},
        "required": ["id"],
    },
}

DELETE_BANK_ACCOUNT_TOOL: dict[str, Any] = {
    "name": "delete_bank_account",
    "description": "Delete a bank account by ID.",
    "input_schema": _id_only_schema("Bank account", "delete"),
}

# === Payment Tools ===

LIST_PAYMENTS_TOOL: dict[str, Any] = {
    "name": "list_payments",
    "description": "List recorded payments, optionally for one invoice.",
    "input_schema": {
        "type": "object",
        "properties": {
            **PAGINATION_PROPERTIES,
            "invoice_id": {"type": "integer", "description": "Filter by invoice ID"},
        },
        "required": [],
    },
}

GET_PAYMENT_TOOL: dict[str, Any] = {
    "name": "get_payment",
    "description": "Get details of a specific payment by ID.",
    "input_schema": _id_only_schema("Payment"),
}

CREATE_PAYMENT_TOOL: dict[str, Any] = {
    "name": "create_payment",
    "description": (
        f"Record a payment against an invoice. paid_price must be a {PRICE_HINT}; "
        "it is sent exactly as given."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "invoice_id": {"type": "integer", "description": "Invoice ID this payment is for"},
            "paid_date": {"type": "string", "description": f"Payment date {DATE_HINT}"},
            "paid_price": {"type": "string", "description": "Amount paid"},
            "payment_method": {
                "type": "string",
                "description": "Payment method (e.g. transfer, cash, card)",
            },
            "description": {"type": "string", "description": "Payment description"},
        },
        "required": ["invoice_id", "paid_date", "paid_price", "payment_method"],
    },
}

# === Tool Collections ===

INVOICE_TOOLS: list[dict[str, Any]] = [
    LIST_INVOICES_TOOL,
    GET_INVOICE_TOOL,
    CREATE_INVOICE_TOOL,
    UPDATE_INVOICE_TOOL,
    DELETE_INVOICE_TOOL,
    SEND_INVOICE_TOOL,
]

CLIENT_TOOLS: list[dict[str, Any]] = [
    LIST_CLIENTS_TOOL,
    GET_CLIENT_TOOL,
    CREATE_CLIENT_TOOL,
    UPDATE_CLIENT_TOOL,
    DELETE_CLIENT_TOOL,
]

PRODUCT_TOOLS: list[dict[str, Any]] = [
    LIST_PRODUCTS_TOOL,
    GET_PRODUCT_TOOL,
    CREATE_PRODUCT_TOOL,
    UPDATE_PRODUCT_TOOL,
    DELETE_PRODUCT_TOOL,
]

BANK_ACCOUNT_TOOLS: list[dict[str, Any]] = [
    LIST_BANK_ACCOUNTS_TOOL,
    GET_BANK_ACCOUNT_TOOL,
    CREATE_BANK_ACCOUNT_TOOL,
    UPDATE_BANK_ACCOUNT_TOOL,
    DELETE_BANK_ACCOUNT_TOOL,
]

PAYMENT_TOOLS: list[dict[str, Any]] = [
    LIST_PAYMENTS_TOOL,
    GET_PAYMENT_TOOL,
    CREATE_PAYMENT_TOOL,
]

# All available tools
ALL_TOOLS: list[dict[str, Any]] = (
    INVOICE_TOOLS + CLIENT_TOOLS + PRODUCT_TOOLS + BANK_ACCOUNT_TOOLS + PAYMENT_TOOLS
)

TOOLS_BY_NAME: dict[str, dict[str, Any]] = {tool["name"]: tool for tool in ALL_TOOLS}
