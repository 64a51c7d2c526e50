import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from parts.services import supabase_cache, supabase_categories, supabase_client


class DummyResp:
    def __init__(self, data):
        self.data = data


class DummyClient:
    def table(self, name):
        assert name == "part_categories"
        return self

    def select(self, fields):
        assert fields == "value,label,icon,sort_order"
        return self

    def execute(self):
        return DummyResp(
            [
                {"value": "motor", "label": "Motors & drives", "icon": "cog", "sort_order": 0},
                {"value": " CABLE ", "label": "Ropes", "icon": None, "sort_order": 99},
                {"value": "escalator", "label": "Escalators", "icon": None, "sort_order": 1},
                {"value": None, "label": "Broken", "icon": None, "sort_order": None},
            ]
        )


@pytest.fixture
def supabase_configured(settings, monkeypatch):
    settings.SUPABASE_URL = "https://example.supabase.co"
    settings.SUPABASE_KEY = "key"
    monkeypatch.setattr(supabase_client, "_client", None)
    yield
    supabase_categories.get_categories.clear()


def test_load_categories_from_supabase(supabase_configured, monkeypatch):
    monkeypatch.setattr(supabase_client, "create_client", lambda url, key: DummyClient())

    cats = supabase_categories._load_categories_from_supabase()

    assert cats["motor"]["label"] == "Motors & drives"
    assert cats["motor"]["icon"] == "cog"
    assert cats["cable"]["label"] == "Ropes"
    assert cats["cable"]["sort_order"] == 99
    assert cats["door"]["label"] == "Doors"
    assert "escalator" not in cats


def test_load_categories_supabase_exception(supabase_configured, monkeypatch):
    class FailingClient(DummyClient):
        def table(self, name):
            raise supabase_categories.SupabaseException("fail")

    monkeypatch.setattr(supabase_client, "create_client", lambda u, k: FailingClient())

    cats = supabase_categories._load_categories_from_supabase()

    assert cats == supabase_categories._builtin_categories()


def test_unconfigured_supabase_uses_builtin_labels(settings, monkeypatch):
    settings.SUPABASE_URL = ""
    monkeypatch.setattr(supabase_client, "_client", None)
    supabase_categories.get_categories.clear()

    assert supabase_client.get_supabase_client() is None
    assert supabase_categories.category_label("hydraulic") == "Hydraulic"
    assert supabase_categories.category_label("unknown") == "Other"
    choices = supabase_categories.category_choices()
    assert choices[0] == ("motor", "Motor")
    assert len(choices) == 9
    supabase_categories.get_categories.clear()


def test_category_choices_follow_sort_order(supabase_configured, monkeypatch):
    monkeypatch.setattr(supabase_client, "create_client", lambda url, key: DummyClient())
    supabase_categories.get_categories.clear()

    choices = supabase_categories.category_choices()

    assert choices[0] == ("motor", "Motors & drives")
    assert choices[-1] == ("cable", "Ropes")


def test_get_cached_reuses_value_until_forced():
    calls = []

    def fetch():
        calls.append(1)
        return len(calls)

    cached = supabase_cache.get_cached(fetch, ttl=60)
    assert cached() == 1
    assert cached() == 1
    assert cached(force=True) == 2
    cached.clear()
    assert cached() == 3


def test_get_cached_serves_stale_value_on_failure():
    results = iter([{"a": 1}])

    def fetch():
        return next(results)

    cached = supabase_cache.get_cached(fetch, ttl=60)
    assert cached() == {"a": 1}
    assert cached(force=True) == {"a": 1}


def test_get_cached_raises_without_previous_value():
    def fetch():
        raise RuntimeError("down")

    cached = supabase_cache.get_cached(fetch, ttl=60)
    with pytest.raises(RuntimeError):
        cached()


def test_get_cached_thread_safe():
    calls = []

    def slow_load():
        time.sleep(0.01)
        calls.append(1)
        return {"motor": {"label": "Motor"}}

    cached = supabase_cache.get_cached(slow_load, ttl=60)
    with ThreadPoolExecutor(max_workers=5) as ex:
        results = list(ex.map(lambda _: cached(), range(5)))

    assert len(calls) == 1
    assert all(r == {"motor": {"label": "Motor"}} for r in results)
