"""
utils/money.py
--------------
VND display formatting and parsing of amounts typed in chat.
"""

import re
from typing import Optional

from config import AMOUNT_INPUT_MULTIPLIER, CURRENCY_SYMBOL

_NON_NUMERIC = re.compile(r"[^0-9.,]")


def format_vnd(amount: float) -> str:
    """
    Format an amount the vi-VN way, e.g. 315000 -> '315.000đ'.
    Fractions (amortized contributions) are rounded to whole dong.
    """
    whole = round(amount)
    text = f"{abs(whole):,}".replace(",", ".")
    sign = "-" if whole < 0 else ""
    return f"{sign}{text}{CURRENCY_SYMBOL}"


def parse_amount(text: str) -> Optional[int]:
    """
    Parse an amount typed in thousands, the way the dashboard's currency
    input works: '315' -> 315000, '0.5' or '0,5' -> 500.

    Returns:
        The amount in dong, or None if the text holds no number or is
        negative.
    """
    if "-" in text:
        return None
    raw = _NON_NUMERIC.sub("", text).replace(",", ".")
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return round(value * AMOUNT_INPUT_MULTIPLIER)
