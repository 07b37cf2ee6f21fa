from src.academy_system.academy_system.database.connection import SupabaseConfig
from src.academy_system.academy_system.realtime.cache import QueryCache
from src.academy_system.academy_system.realtime.listener import RealtimeInvalidator, changed_table


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _counting_loader():
    calls = []

    def load():
        calls.append(1)
        return len(calls)

    return load, calls


def test_value_served_until_stale():
    clock = Clock()
    cache = QueryCache(clock=clock)
    load, calls = _counting_loader()

    assert cache.get_or_load("k", ["coaches"], load, ttl=10) == 1
    clock.now = 9.9
    assert cache.get_or_load("k", ["coaches"], load, ttl=10) == 1
    clock.now = 10.0
    assert cache.get_or_load("k", ["coaches"], load, ttl=10) == 2
    assert len(calls) == 2


def test_zero_ttl_never_stores():
    cache = QueryCache(clock=Clock())
    load, calls = _counting_loader()

    cache.get_or_load("k", ["coaches"], load, ttl=0)
    cache.get_or_load("k", ["coaches"], load, ttl=0)

    assert len(calls) == 2


def test_table_change_drops_only_dependent_entries():
    cache = QueryCache(clock=Clock())
    payroll, payroll_calls = _counting_loader()
    dashboard, dashboard_calls = _counting_loader()
    cache.get_or_load("payroll", ["coaches", "pt_sessions"], payroll, ttl=60)
    cache.get_or_load("dashboard", ["students", "payments"], dashboard, ttl=60)

    assert cache.invalidate_table("pt_sessions") == 1
    assert cache.invalidate_table("unknown") == 0

    assert cache.get_or_load("payroll", ["coaches", "pt_sessions"], payroll, ttl=60) == 2
    assert cache.get_or_load("dashboard", ["students", "payments"], dashboard, ttl=60) == 1
    assert len(payroll_calls) == 2
    assert len(dashboard_calls) == 1


def test_change_during_load_is_not_cached():
    cache = QueryCache(clock=Clock())
    source = {"hours": 8}

    def load_then_change():
        seen = source["hours"]
        source["hours"] = 9
        cache.invalidate_table("coach_attendance")
        return seen

    assert cache.get_or_load("payroll:2025-03", ["coach_attendance"], load_then_change, ttl=60) == 8
    assert cache.get_or_load("payroll:2025-03", ["coach_attendance"], lambda: source["hours"], ttl=60) == 9


def test_change_on_unrelated_table_during_load_still_caches():
    cache = QueryCache(clock=Clock())
    load, calls = _counting_loader()

    def load_with_noise():
        cache.invalidate_table("payments")
        return load()

    cache.get_or_load("k", ["coaches"], load_with_noise, ttl=60)
    cache.get_or_load("k", ["coaches"], load_with_noise, ttl=60)

    assert len(calls) == 1


def test_changed_table_envelopes():
    assert changed_table({"data": {"table": "coaches", "type": "UPDATE"}}) == "coaches"
    assert changed_table({"table": "payments"}) == "payments"
    assert changed_table({"data": {}}) is None
    assert changed_table("noise") is None


def test_invalidator_handles_change_without_network():
    cache = QueryCache(clock=Clock())
    load, calls = _counting_loader()
    cache.get_or_load("payroll:2025-03", ["coach_attendance"], load, ttl=60)
    invalidator = RealtimeInvalidator(SupabaseConfig(url="http://x", key="k"), cache, ["coach_attendance", "coach_attendance"])

    invalidator.handle_change({"data": {"table": "coach_attendance"}})
    invalidator.handle_change({"unexpected": True})

    assert cache.get_or_load("payroll:2025-03", ["coach_attendance"], load, ttl=60) == 2
    assert invalidator.tables == ("coach_attendance",)
