from cabinshare.core.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def test_get_returns_stored_value():
    cache = TTLCache(ttl_seconds=60, clock=FakeClock())
    cache.set("user_roles:u1", "roles")

    assert cache.get("user_roles:u1") == "roles"
    assert cache.size() == 1


def test_missing_key_returns_none():
    cache = TTLCache(ttl_seconds=60)
    assert cache.get("nope") is None


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=60, clock=clock)
    cache.set("k", "v")

    clock.advance(59)
    assert cache.get("k") == "v"

    clock.advance(1)
    assert cache.get("k") is None
    # Expired entries are evicted on read
    assert cache.size() == 0


def test_delete_removes_entry():
    cache = TTLCache(ttl_seconds=60)
    cache.set("k", "v")

    cache.delete("k")
    cache.delete("k")  # deleting twice is fine

    assert cache.get("k") is None


def test_clear_removes_everything():
    cache = TTLCache(ttl_seconds=60)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.clear()

    assert cache.size() == 0


def test_zero_ttl_disables_cache():
    cache = TTLCache(ttl_seconds=0)
    cache.set("k", "v")

    assert cache.enabled is False
    assert cache.get("k") is None
    assert cache.size() == 0
