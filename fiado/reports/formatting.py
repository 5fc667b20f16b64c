"""Money formatting for display and export."""

from decimal import ROUND_HALF_UP, Decimal


CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_decimal_comma(value: Decimal) -> str:
    """
    Two fraction digits with a comma separator and no grouping.

    >>> format_decimal_comma(Decimal("1234.5"))
    '1234,50'
    """
    return f"{round_money(value):.2f}".replace(".", ",")


def format_currency(value: Decimal) -> str:
    """
    Display form with Brazilian grouping.

    >>> format_currency(Decimal("1234.5"))
    'R$ 1.234,50'
    """
    grouped = f"{round_money(value):,.2f}"
    # swap separators: 1,234.50 -> 1.234,50
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {grouped}"
