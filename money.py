import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal, str]


def to_minor_units(value: Number) -> int:
    """Round an amount to a whole number of minor units (half-up)."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError("Invalid amount") from exc
    if not amount.is_finite():
        raise ValueError("Invalid amount")
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_amount(value: str) -> int:
    """
    Parse a formatted amount such as ``"Rp 150.000"``.

    Every non-digit is dropped, so thousands separators in any locale are
    accepted; fractional minor units are not representable in this format.
    """
    digits = re.sub(r"\D", "", value or "")
    if not digits:
        return 0
    return int(digits)


def format_rupiah(amount: int) -> str:
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"
