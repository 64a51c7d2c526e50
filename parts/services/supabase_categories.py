import logging
from typing import Dict, List

from parts.models import PartCategory
from .supabase_cache import get_cached
from .supabase_client import SupabaseException, get_supabase_client

logger = logging.getLogger(__name__)

_CACHE_TTL = 300  # seconds


def _builtin_categories() -> Dict[str, dict]:
    return {
        value: {"value": value, "label": label, "icon": None, "sort_order": idx}
        for idx, (value, label) in enumerate(PartCategory.choices)
    }


def _load_categories_from_supabase() -> Dict[str, dict]:
    """Category labels from the Supabase ``part_categories`` table.

    Rows carry ``value``, ``label``, ``icon`` and ``sort_order``. Rows whose
    value is not a known category are ignored; categories missing from the
    table keep their built-in label.
    """

    cats = _builtin_categories()
    client = get_supabase_client()
    if client is None:
        return cats
    try:  # pragma: no cover - network interaction
        resp = (
            client.table("part_categories")
            .select("value,label,icon,sort_order")
            .execute()
        )
    except SupabaseException:  # pragma: no cover - network interaction
        logger.exception("Failed to fetch part categories from Supabase")
        return cats

    for row in resp.data or []:
        value = (row.get("value") or "").strip().lower()
        if value not in cats:
            logger.debug("Ignoring unknown part category %r", value)
            continue
        entry = cats[value]
        if row.get("label"):
            entry["label"] = row["label"]
        entry["icon"] = row.get("icon") or entry["icon"]
        if row.get("sort_order") is not None:
            entry["sort_order"] = row["sort_order"]
    return cats


get_categories = get_cached(_load_categories_from_supabase, _CACHE_TTL)
get_categories.__doc__ = "Cached category mapping, refreshed from Supabase when expired."


def category_label(value: str) -> str:
    value = PartCategory.coerce(value)
    return get_categories().get(value, {}).get("label") or PartCategory(value).label


def category_choices() -> List[tuple]:
    rows = sorted(get_categories().values(), key=lambda c: (c["sort_order"], c["label"]))
    return [(c["value"], c["label"]) for c in rows]
