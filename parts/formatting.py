"""Display helpers shared by the PDF renderer, email bodies and templates."""

import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, Decimal]

_TAG_RE = re.compile(r"<[^>]*>")


def _as_date(value):
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value


def format_date(value: Union[str, date, None], fmt: str = "%d/%m/%Y") -> str:
    if not value:
        return ""
    return _as_date(value).strftime(fmt)


def format_datetime(value: Union[str, datetime, None]) -> str:
    return format_date(value, "%d/%m/%Y %H:%M")


def format_number(value: Optional[Number], decimals: int = 0) -> str:
    if value is None:
        return ""
    quant = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{decimals}f}"


def format_currency(value: Optional[Number], symbol: str = "₪") -> str:
    """Shekel amount with two decimals, e.g. ``₪1,234.50``."""
    if value is None:
        return ""
    text = format_number(value, 2)
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}"


def truncate(text: Optional[str], max_length: int) -> str:
    text = text or ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def strip_html(html: Optional[str]) -> str:
    return _TAG_RE.sub("", html or "")
