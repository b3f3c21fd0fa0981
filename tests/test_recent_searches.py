import asyncio
import json

from app.client.recent_searches import (
    MAX_RECENT_SEARCHES,
    RECENT_SEARCHES_KEY,
    RETENTION_MS,
    OriginStorage,
    RecentSearchStore,
)

DAY_MS = 24 * 60 * 60 * 1000


class Clock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now


def make_store(storage=None, clock=None):
    storage = storage if storage is not None else OriginStorage().context()
    return RecentSearchStore(storage, clock=clock or Clock())


def test_newest_first_without_duplicates():
    clock = Clock()
    store = make_store(clock=clock)
    for term in ["galaxy", "pixel", "galaxy"]:
        clock.now += 1
        store.save(term)

    assert store.get_recent_searches() == ["galaxy", "pixel"]


def test_keeps_at_most_five():
    store = make_store()
    for i in range(8):
        store.save(f"term {i}")

    terms = store.get_recent_searches()
    assert len(terms) == MAX_RECENT_SEARCHES
    assert terms == ["term 7", "term 6", "term 5", "term 4", "term 3"]


def test_blank_terms_ignored_and_trimmed():
    store = make_store()
    store.save("   ")
    store.save(None)
    store.save("  iphone 15 ")
    assert store.get_recent_searches() == ["iphone 15"]


def test_entries_expire_after_seven_days():
    clock = Clock()
    store = make_store(clock=clock)
    store.save("old")
    clock.now += 3 * DAY_MS
    store.save("recent")

    clock.now += 4 * DAY_MS  # "old" is now exactly seven days old
    assert store.get_recent_searches() == ["recent"]

    clock.now += RETENTION_MS
    assert store.get_recent_searches() == []


def test_expired_entries_are_removed_from_storage():
    storage = {}
    clock = Clock()
    store = make_store(storage, clock)
    store.save("old")

    clock.now += 8 * DAY_MS
    store.clean_expired()
    assert json.loads(storage[RECENT_SEARCHES_KEY]) == []


def test_unreadable_storage_is_treated_as_empty():
    storage = {RECENT_SEARCHES_KEY: "not json"}
    assert make_store(storage).get_recent_searches() == []

    storage[RECENT_SEARCHES_KEY] = json.dumps([{"term": "ok", "timestamp": Clock()()}, {"term": ""}, "junk"])
    assert make_store(storage).get_recent_searches() == ["ok"]


def test_clear():
    store = make_store()
    store.save("galaxy")
    store.clear()
    assert store.get_recent_searches() == []


def test_subscribers_see_local_changes():
    store = make_store()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.save("galaxy")
    store.save("pixel")
    unsubscribe()
    store.save("iphone")

    assert seen == [["galaxy"], ["pixel", "galaxy"]]


def test_changes_broadcast_to_other_contexts():
    origin = OriginStorage()
    clock = Clock()
    tab_a = make_store(origin.context(), clock)
    tab_b = make_store(origin.context(), clock)

    seen_by_b = []
    tab_b.subscribe(seen_by_b.append)

    tab_a.save("galaxy")
    assert seen_by_b == [["galaxy"]]
    assert tab_b.get_recent_searches() == ["galaxy"]

    tab_a.clear()
    assert seen_by_b[-1] == []


def test_writer_context_gets_no_storage_event():
    origin = OriginStorage()
    ctx = origin.context()
    other = origin.context()
    events = []
    ctx.add_listener(events.append)
    other_events = []
    other.add_listener(other_events.append)

    ctx["k"] = "v"

    assert events == []
    assert [(e.key, e.old_value, e.new_value) for e in other_events] == [("k", None, "v")]


def test_failing_listener_does_not_break_others():
    origin = OriginStorage()
    writer = origin.context()
    reader = origin.context()
    received = []

    def broken(event):
        raise RuntimeError("listener bug")

    reader.add_listener(broken)
    reader.add_listener(received.append)
    writer["k"] = "v"

    assert len(received) == 1


def test_periodic_cleanup_prunes_storage():
    storage = {}
    clock = Clock()
    store = make_store(storage, clock)
    store.save("old")
    clock.now += 8 * DAY_MS

    async def scenario():
        task = store.start_periodic_cleanup(interval=3600)
        await asyncio.sleep(0.01)
        task.cancel()

    asyncio.run(scenario())
    assert json.loads(storage[RECENT_SEARCHES_KEY]) == []


def test_closed_context_stops_receiving_events():
    origin = OriginStorage()
    writer = origin.context()
    reader = origin.context()
    events = []
    reader.add_listener(events.append)

    reader.close()
    writer["k"] = "v"

    assert events == []
    assert reader["k"] == "v"


def test_closed_store_stops_notifying():
    origin = OriginStorage()
    clock = Clock()
    tab_a = make_store(origin.context(), clock)
    tab_b = make_store(origin.context(), clock)
    seen_by_b = []
    tab_b.subscribe(seen_by_b.append)

    tab_b.close()
    tab_a.save("galaxy")
    tab_b.save("pixel")

    assert seen_by_b == []
    assert tab_b.get_recent_searches() == ["pixel", "galaxy"]
