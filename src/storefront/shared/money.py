"""Monetary rounding for the currencies the store charges in.

Amounts are stored as floats (as every price field in the domain is) but all
arithmetic goes through `Decimal` built from the float's string form, so
19.99 * 2 is 39.98 and never 39.980000000000004.
"""

from decimal import ROUND_HALF_UP, Decimal

DEFAULT_CURRENCY = "USD"

# Minor-unit precision per supported currency
CURRENCY_PRECISION = {
    "USD": 2,
    "EUR": 2,
    "VES": 2,
}

SUPPORTED_CURRENCIES = frozenset(CURRENCY_PRECISION)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value, currency: str = DEFAULT_CURRENCY) -> Decimal:
    """Round `value` half-up to the currency's minor unit."""
    places = CURRENCY_PRECISION.get(currency.upper(), 2)
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def round_money(value, currency: str = DEFAULT_CURRENCY) -> float:
    return float(quantize(value, currency))


def line_subtotal(unit_price, quantity: int, currency: str = DEFAULT_CURRENCY) -> float:
    return round_money(to_decimal(unit_price) * quantity, currency)


def sum_money(values, currency: str = DEFAULT_CURRENCY) -> float:
    total = sum((to_decimal(v) for v in values), Decimal("0"))
    return round_money(total, currency)


def is_supported_currency(currency: str | None) -> bool:
    return bool(currency) and currency.upper() in SUPPORTED_CURRENCIES
