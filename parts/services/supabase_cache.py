"""Time-based caching for Supabase lookup tables."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)


T = TypeVar("T")


@dataclass
class _CacheState(Generic[T]):
    value: T | None = None
    time: float | None = None


def get_cached(fetch_func: Callable[[], T], ttl: int) -> Callable[..., T]:
    """Wrap ``fetch_func`` so its result is reused for ``ttl`` seconds.

    Call the wrapper with ``force=True`` to refresh immediately. When a
    refresh fails and a previous value exists, the stale value is returned.
    ``clear()`` drops the cached value.
    """

    lock = threading.Lock()
    state: _CacheState[T] = _CacheState()

    def wrapper(force: bool = False) -> T:
        with lock:
            now = time.monotonic()
            if (
                not force
                and state.value is not None
                and state.time is not None
                and now - state.time < ttl
            ):
                return state.value
            try:
                state.value = fetch_func()
            except Exception:
                if state.value is not None:
                    logger.exception("Failed to refresh cached value; serving stale copy")
                    return state.value
                raise
            state.time = now
            return state.value

    def clear() -> None:
        with lock:
            state.value = None
            state.time = None

    wrapper.clear = clear  # type: ignore[attr-defined]
    wrapper._state = state  # type: ignore[attr-defined]
    return wrapper


__all__ = ["get_cached"]
