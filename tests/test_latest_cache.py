from __future__ import annotations

from datastore.latest_cache import LatestReadingCache


def test_cache_starts_empty() -> None:
    cache = LatestReadingCache()

    assert cache.is_empty()
    assert cache.get() is None


def test_put_replaces_wholesale() -> None:
    cache = LatestReadingCache()

    cache.put({"timestamp": "2025-06-05T14:23:45Z", "temperature": 20})
    cache.put({"timestamp": "2025-06-05T14:24:45Z", "humidity": 40})

    assert cache.get() == {"timestamp": "2025-06-05T14:24:45Z", "humidity": 40}


def test_get_returns_deep_copy() -> None:
    cache = LatestReadingCache()
    original = {"timestamp": "2025-06-05T14:23:45Z", "nested": {"value": 1}}
    cache.put(original)

    original["nested"]["value"] = 2
    fetched = cache.get()
    assert fetched == {"timestamp": "2025-06-05T14:23:45Z", "nested": {"value": 1}}

    fetched["nested"]["value"] = 3  # type: ignore[index]
    assert cache.get()["nested"]["value"] == 1  # type: ignore[index]
