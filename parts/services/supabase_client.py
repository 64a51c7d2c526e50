import logging
from typing import Optional

from django.conf import settings
from supabase import Client, SupabaseException, create_client

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client() -> Optional[Client]:
    """Return the shared Supabase client, or ``None`` when unavailable.

    Built once from ``SUPABASE_URL`` and ``SUPABASE_KEY`` and reused. Missing
    configuration or a failed connection is logged and gives ``None``; the
    lookup tables then fall back to their built-in values.
    """

    global _client
    if _client is not None:
        return _client

    url = getattr(settings, "SUPABASE_URL", "")
    key = getattr(settings, "SUPABASE_KEY", "")
    if not url or not key:
        logger.warning("Supabase is not configured")
        return None
    try:  # pragma: no cover - network interaction
        _client = create_client(url, key)
    except SupabaseException:  # pragma: no cover - network interaction
        logger.exception("Failed to initialise Supabase client")
        return None
    return _client
