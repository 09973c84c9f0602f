"""Invoice line item price normalization.

inFakt expects every line item amount as a decimal string with exactly two
fractional digits and a period separator, e.g. ``"1800.00"``. A bare
``"1800"`` has been read by the backend as grosze (18.00 PLN), so unit prices
are always re-rendered before an invoice is created or its services updated.

Totals are derived per line:

    net   = round2(unit_net_price * quantity)
    tax   = round2(net * rate / 100)
    gross = net + tax

Rounding is ROUND_HALF_UP on Decimal, so ``gross == net + tax`` holds exactly.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from infakt_mcp.errors import InvalidAmountError

TWO_PLACES = Decimal("0.01")

# Polish VAT symbols that carry no tax: exempt, not subject, reverse charge
EXEMPT_TAX_SYMBOLS = frozenset({"zw", "np", "oo"})


def parse_amount(value: Any, field: str | None = None) -> Decimal:
    """Parse a numeric value or decimal string into a Decimal.

    A single comma is accepted as the decimal separator on input
    (``"12,50"``). Raises InvalidAmountError for anything else.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value, field)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int | float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(" ", "")
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(value, field) from None
    else:
        raise InvalidAmountError(value, field)

    if not amount.is_finite():
        raise InvalidAmountError(value, field)
    return amount


def round_amount(value: Decimal, field: str | None = None) -> Decimal:
    """Quantize to cents. Amounts too large for the Decimal context are invalid."""
    try:
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmountError(value, field) from None


def format_amount(value: Any, field: str | None = None) -> str:
    """Render an amount as a two-decimal, period-separated string."""
    return f"{round_amount(parse_amount(value, field), field):.2f}"


def tax_rate_for(tax_symbol: Any) -> Decimal:
    """Return the tax percentage for an inFakt tax symbol.

    Numeric symbols (23, "8", 5.0) are percentages; exemption sentinels
    are 0%.
    """
    if isinstance(tax_symbol, str) and tax_symbol.strip().lower() in EXEMPT_TAX_SYMBOLS:
        return Decimal("0")
    rate = parse_amount(tax_symbol, "tax_symbol")
    if rate < 0:
        raise InvalidAmountError(tax_symbol, "tax_symbol")
    return rate


def parse_quantity(value: Any) -> Decimal:
    if value is None or value == "" or value == 0:
        return Decimal("1")
    quantity = parse_amount(value, "quantity")
    if quantity <= 0:
        raise InvalidAmountError(value, "quantity")
    return quantity


def _plain_number(value: Decimal) -> int | float:
    """Quantities go back to the API as JSON numbers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class NormalizedLineItem:
    """A line item with rendered prices and derived totals."""

    unit_net_price: Decimal
    quantity: Decimal
    tax_rate: Decimal
    net_price: Decimal
    tax_price: Decimal
    gross_price: Decimal
    extra: Mapping[str, Any]

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "NormalizedLineItem":
        if "unit_net_price" not in item:
            raise InvalidAmountError(None, "unit_net_price")
        unit_price = parse_amount(item["unit_net_price"], "unit_net_price")
        quantity = parse_quantity(item.get("quantity"))
        tax_rate = tax_rate_for(item.get("tax_symbol", 0))

        unit_rounded = round_amount(unit_price, "unit_net_price")
        net = round_amount(unit_price * quantity, "net_price")
        tax = round_amount(net * tax_rate / 100, "tax_price")
        return cls(
            unit_net_price=unit_rounded,
            quantity=quantity,
            tax_rate=tax_rate,
            net_price=net,
            tax_price=tax,
            gross_price=net + tax,
            extra=dict(item),
        )

    def to_payload(self, include_totals: bool = True) -> dict[str, Any]:
        """Render as an inFakt ``services`` entry."""
        payload = dict(self.extra)
        payload["quantity"] = _plain_number(self.quantity)
        payload["unit_net_price"] = f"{self.unit_net_price:.2f}"
        if include_totals:
            payload["net_price"] = f"{self.net_price:.2f}"
            payload["tax_price"] = f"{self.tax_price:.2f}"
            payload["gross_price"] = f"{self.gross_price:.2f}"
        return payload


def normalize_line_item(item: Mapping[str, Any]) -> NormalizedLineItem:
    """Parse and compute totals for a single line item."""
    return NormalizedLineItem.from_item(item)


def normalize_line_items(
    items: Iterable[Mapping[str, Any]], include_totals: bool = True
) -> list[dict[str, Any]]:
    """Normalize invoice services into API-ready dicts.

    Raises InvalidAmountError on the first item that cannot be parsed, so no
    request is made with a partially normalized invoice.
    """
    return [normalize_line_item(item).to_payload(include_totals) for item in items]
