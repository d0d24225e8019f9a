"""
Amount parsing for bounty notices.

Game logs format ISK amounts with whatever grouping and decimal separators the
client locale produced, so `1,500.00`, `1.500,00` and `1,500` all show up. The
only reliable signal is position: a fractional part is always exactly two
digits, so a separator three characters from the end marks cents.

Short strings (three characters or fewer) cannot hold a thousands group and are
parsed directly, with `,` read as the decimal point (`"1,5"` -> 1.5).
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

SEPARATORS = (".", ",")

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


def _strip_separators(text: str) -> str:
    for sep in SEPARATORS:
        text = text.replace(sep, "")
    return text


def parse_amount(text: str) -> Decimal:
    """Return the exact amount encoded in `text`, or zero when it is not a number."""
    s = (text or "").strip()
    if not s:
        return _ZERO
    digits = _strip_separators(s)
    if not (digits.isascii() and digits.isdigit()):
        return _ZERO
    if len(s) <= 3:
        try:
            return Decimal(s.replace(",", "."))
        except InvalidOperation:
            return _ZERO

    if s[-3] in SEPARATORS:
        return Decimal(int(digits)) / _HUNDRED
    return Decimal(int(digits))
