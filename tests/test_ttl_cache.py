from conftest import FakeTimer
from divtrack.infrastructure.cache.ttl_cache import CachetoolsTTLCache


def test_entries_expire_with_the_timer():
    timer = FakeTimer()
    cache = CachetoolsTTLCache(60, timer=timer)
    cache.set("AAPL", 1)

    timer.advance(59)
    assert cache.get("AAPL") == 1
    timer.advance(2)
    assert cache.get("AAPL") is None


def test_oldest_entry_is_evicted_at_maxsize():
    cache = CachetoolsTTLCache(60, maxsize=1, timer=FakeTimer())
    cache.set("KO", 2)
    cache.set("AAPL", 1)

    assert cache.get("KO") is None
    assert cache.get("AAPL") == 1
