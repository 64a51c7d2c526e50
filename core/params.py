from typing import Optional

from rest_framework.exceptions import ValidationError


def int_param(params, name: str) -> Optional[int]:
    """Integer query parameter ``name``, ``None`` when absent."""
    raw = params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be a whole number."}) from None
