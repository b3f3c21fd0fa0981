"""
Recently submitted search terms, persisted in origin-scoped key/value
storage shared by every browsing context (tab) of the same origin.

Entries are `{"term": str, "timestamp": ms}`, newest first, at most
MAX_RECENT_SEARCHES, each kept for RETENTION_MS. Expired entries are
pruned lazily on every read/write and periodically by a background task.
"""
import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, MutableMapping, Optional

logger = logging.getLogger(__name__)

RECENT_SEARCHES_KEY = "ora_recent_searches"
MAX_RECENT_SEARCHES = 5
RETENTION_MS = 7 * 24 * 60 * 60 * 1000
CLEANUP_INTERVAL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class StorageEvent:
    key: str
    old_value: Optional[str]
    new_value: Optional[str]


class OriginStorage:
    """Key/value store shared by all contexts of one origin."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._contexts: List["StorageContext"] = []

    def context(self) -> "StorageContext":
        ctx = StorageContext(self)
        self._contexts.append(ctx)
        return ctx

    def detach(self, ctx: "StorageContext") -> None:
        if ctx in self._contexts:
            self._contexts.remove(ctx)

    def _write(self, source: "StorageContext", key: str, value: Optional[str]) -> None:
        old = self._data.get(key)
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        if old == value:
            return

        # the writing context is not notified, only its siblings
        event = StorageEvent(key=key, old_value=old, new_value=value)
        for ctx in list(self._contexts):
            if ctx is not source:
                ctx._dispatch(event)


class StorageContext(MutableMapping):
    """One browsing context's view of an OriginStorage."""

    def __init__(self, origin: OriginStorage):
        self._origin = origin
        self._listeners: List[Callable[[StorageEvent], None]] = []

    def __getitem__(self, key: str) -> str:
        return self._origin._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._origin._write(self, key, str(value))

    def __delitem__(self, key: str) -> None:
        if key not in self._origin._data:
            raise KeyError(key)
        self._origin._write(self, key, None)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._origin._data))

    def __len__(self) -> int:
        return len(self._origin._data)

    def add_listener(self, listener: Callable[[StorageEvent], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[StorageEvent], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        """Stops receiving storage events; the shared data is kept."""
        self._listeners.clear()
        self._origin.detach(self)

    def _dispatch(self, event: StorageEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Storage listener failed for key %r", event.key)


def _now_ms() -> float:
    return time.time() * 1000


class RecentSearchStore:
    def __init__(
        self,
        storage: MutableMapping[str, str],
        clock: Callable[[], float] = _now_ms,
        key: str = RECENT_SEARCHES_KEY,
        max_entries: int = MAX_RECENT_SEARCHES,
        retention_ms: float = RETENTION_MS,
    ):
        self.storage = storage
        self.clock = clock
        self.key = key
        self.max_entries = max_entries
        self.retention_ms = retention_ms
        self._listeners: List[Callable[[List[str]], None]] = []

        if isinstance(storage, StorageContext):
            storage.add_listener(self._on_storage_event)

    # ---------- persistence ----------

    def _read(self) -> List[dict]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable recent searches: %r", raw)
            return []
        if not isinstance(entries, list):
            return []
        return [
            e for e in entries
            if isinstance(e, dict) and e.get("term") and isinstance(e.get("timestamp"), (int, float))
        ]

    def _write(self, entries: List[dict]) -> None:
        self.storage[self.key] = json.dumps(entries)
        self._notify()

    # ---------- public API ----------

    def clean_expired(self) -> List[dict]:
        entries = self._read()
        now = self.clock()
        valid = [e for e in entries if now - e["timestamp"] < self.retention_ms]
        if len(valid) != len(entries):
            logger.info("Removed %d expired recent search(es)", len(entries) - len(valid))
            self._write(valid)
        return valid

    def get_recent_searches(self) -> List[str]:
        return [e["term"] for e in self.clean_expired()]

    def save(self, term: Optional[str]) -> None:
        if not term or not term.strip():
            return
        term = term.strip()

        entries = [e for e in self.clean_expired() if e["term"] != term]
        entries.insert(0, {"term": term, "timestamp": self.clock()})
        if len(entries) > self.max_entries:
            logger.debug("Dropping %d oldest recent search(es)", len(entries) - self.max_entries)
            entries = entries[: self.max_entries]
        self._write(entries)

    def clear(self) -> None:
        self.storage.pop(self.key, None)
        self._notify()

    def subscribe(self, listener: Callable[[List[str]], None]) -> Callable[[], None]:
        """
        `listener` gets the current terms after every change made here or,
        via storage events, in another context. Returns an unsubscribe callable.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._listeners.clear()
        if isinstance(self.storage, StorageContext):
            self.storage.remove_listener(self._on_storage_event)

    def _notify(self) -> None:
        terms = [e["term"] for e in self._read()]
        for listener in list(self._listeners):
            listener(terms)

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key == self.key and event.new_value != event.old_value:
            self._notify()

    # ---------- periodic cleanup ----------

    async def run_periodic_cleanup(self, interval: float = CLEANUP_INTERVAL_SECONDS) -> None:
        while True:
            self.clean_expired()
            await asyncio.sleep(interval)

    def start_periodic_cleanup(self, interval: float = CLEANUP_INTERVAL_SECONDS) -> "asyncio.Task[None]":
        return asyncio.get_running_loop().create_task(self.run_periodic_cleanup(interval))
