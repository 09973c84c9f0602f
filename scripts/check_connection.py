#!/usr/bin/env python3
"""Check that the configured inFakt API key works.

Lists a few clients and invoices and prints a short summary. Nothing is
created or changed.

Usage:
    export INFAKT_API_KEY=...
    python scripts/check_connection.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infakt_mcp.config import load_settings
from infakt_mcp.errors import ConfigurationError, InFaktAPIError
from infakt_mcp.tools.infakt_api import InFaktAPIClient


async def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"API: {settings.infakt_api_url}")
    async with InFaktAPIClient() as client:
        try:
            clients = await client.list_clients(limit=5)
            invoices = await client.list_invoices(limit=5)
            accounts = await client.list_bank_accounts()
        except InFaktAPIError as e:
            print(f"FAILED: {e}", file=sys.stderr)
            return 1

    print(f"Clients (first {len(clients)}):")
    for record in clients:
        print(f"  {record.get('id')}: {record.get('company_name')}")
    print(f"Invoices (first {len(invoices)}):")
    for record in invoices:
        print(f"  {record.get('id')}: {record.get('number')} {record.get('gross_price')} {record.get('status')}")
    print(f"Bank accounts: {len(accounts)}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
