import logging
from typing import Any, Dict, Optional, Tuple

from django.db import IntegrityError, transaction

from parts.models import Supplier

logger = logging.getLogger(__name__)

FIELDS = [
    "company_name",
    "primary_contact_name",
    "primary_contact_phone",
    "email",
    "address",
    "city",
    "notes",
]


def generate_supplier_code() -> str:
    """Next free ``SUP-NNNN`` code."""
    codes = Supplier.objects.filter(supplier_code__startswith="SUP-").values_list(
        "supplier_code", flat=True
    )
    numbers = [int(c[4:]) for c in codes if c[4:].isdigit()]
    return f"SUP-{max(numbers, default=0) + 1:04d}"


def add_supplier(details: Dict[str, Any]) -> Tuple[bool, str, Optional[int]]:
    name = (details.get("company_name") or "").strip()
    if not name:
        return False, "Supplier name is required and cannot be empty.", None
    values = {}
    for field in FIELDS:
        val = details.get(field)
        if isinstance(val, str):
            val = val.strip() or None
        values[field] = val
    values["company_name"] = name
    try:
        with transaction.atomic():
            supplier = Supplier.objects.create(
                supplier_code=(details.get("supplier_code") or "").strip()
                or generate_supplier_code(),
                is_active=details.get("is_active", True),
                **values,
            )
    except IntegrityError:
        return False, f"Supplier '{name}' already exists.", None
    logger.info("Added supplier %s (%s)", supplier.company_name, supplier.supplier_code)
    return True, f"Supplier '{supplier.company_name}' added.", supplier.pk


def get_all_suppliers(include_inactive: bool = False):
    qs = Supplier.objects.all()
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return qs
