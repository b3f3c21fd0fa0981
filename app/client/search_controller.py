"""
Search-as-you-type controller with infinite scroll.

All mutable state lives on an explicit SearchSession. States:

    IDLE -> SEARCHING -> RESULTS -> LOADING_MORE -> RESULTS ... -> EXHAUSTED

A short page (fewer than `page_size` items) is the only "no more results"
signal. Every new search bumps `request_seq`; responses belonging to an
older sequence number are dropped, so a slow stale response can never
overwrite a newer one.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set
from urllib.parse import urlencode

from app.client.api_client import CatalogClient, CatalogClientError
from app.client.recent_searches import RecentSearchStore

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3
PAGE_SIZE = 20
MIN_QUERY_LENGTH = 2

SEARCH_FAILED_MESSAGE = "Failed to load search results. Please try again."
CATALOGUE_FAILED_MESSAGE = "Failed to load products. Please try again."


class SearchState(str, Enum):
    idle = "idle"
    searching = "searching"
    results = "results"
    loading_more = "loading_more"
    exhausted = "exhausted"


@dataclass
class SearchSession:
    query: str = ""
    entity_id: Optional[int] = None
    page: int = 1
    results: List[Dict[str, Any]] = field(default_factory=list)
    state: SearchState = SearchState.idle
    is_loading: bool = False
    has_more: bool = True
    message: Optional[str] = None
    error: Optional[str] = None
    pill_clicked: bool = False
    recommended_pills: List[str] = field(default_factory=list)
    # zero-result query: grid shows the unfiltered catalogue instead
    fallback: bool = False
    request_seq: int = 0


@dataclass(frozen=True)
class PanelVisibility:
    recent_searches: bool
    popular_searches: bool
    recommended_pills: bool
    results_text: bool


def page_title(term: Optional[str]) -> str:
    return f"ora | Buy {term}" if term else "ora | Buy Mobiles"


def vertical_names(products: List[Dict[str, Any]]) -> List[str]:
    names: List[str] = []
    for product in products:
        name = product.get("vertical_name")
        if name and name not in names:
            names.append(name)
    return names


class SearchController:
    def __init__(
        self,
        client: CatalogClient,
        recent: Optional[RecentSearchStore] = None,
        page_size: int = PAGE_SIZE,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        session: Optional[SearchSession] = None,
    ):
        self.client = client
        self.recent = recent
        self.page_size = page_size
        self.debounce_seconds = debounce_seconds
        self.session = session or SearchSession()
        self._debounce_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    # ---------- task bookkeeping ----------

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_debounce(self) -> None:
        if self._debounce_task and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def wait_idle(self) -> None:
        """Waits for the pending debounce timer and every in-flight search."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if self._debounce_task and not self._debounce_task.done():
                pending.append(self._debounce_task)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ---------- input ----------

    def on_input(self, text: str) -> asyncio.Task:
        """
        Restarts the debounce timer. In-flight requests are left alone;
        their responses are discarded by sequence number.
        """
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounced(text))
        return self._debounce_task

    async def _debounced(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        query = (text or "").strip()
        if not query:
            self.session.pill_clicked = False
            self.session.message = None
        self._spawn(self.search(query))

    async def submit(self, text: str) -> str:
        """Enter key: search immediately and return the shareable URL."""
        self._cancel_debounce()
        query = (text or "").strip()
        await self.search(query)
        return "/search?" + urlencode({"q": query})

    async def select_pill(self, label: str, entity_id: Optional[int] = None) -> None:
        self._cancel_debounce()
        self.session.pill_clicked = True
        await self.search(label.strip(), entity_id=entity_id)

    def clear(self) -> None:
        self._cancel_debounce()
        s = self.session
        s.request_seq += 1  # anything still in flight is now stale
        s.query = ""
        s.entity_id = None
        s.page = 1
        s.results = []
        s.state = SearchState.idle
        s.is_loading = False
        s.has_more = True
        s.message = None
        s.error = None
        s.pill_clicked = False
        s.recommended_pills = []
        s.fallback = False

    # ---------- fetching ----------

    async def _fetch(self, query: str, page: int, entity_id: Optional[int]) -> List[Dict[str, Any]]:
        return await self.client.search(q=query, page=page, limit=self.page_size, entity_id=entity_id)

    def _apply_page(self, products: List[Dict[str, Any]], append: bool) -> None:
        s = self.session
        if append:
            s.results.extend(products)
        else:
            s.results = list(products)
        s.has_more = len(products) == self.page_size
        s.state = SearchState.results if s.has_more else SearchState.exhausted
        s.is_loading = False

    async def search(self, query: Optional[str], entity_id: Optional[int] = None) -> None:
        s = self.session
        query = (query or "").strip()
        s.request_seq += 1
        seq = s.request_seq

        s.query = query
        s.entity_id = entity_id
        s.page = 1
        s.has_more = True
        s.fallback = False
        s.error = None

        if entity_id is None and 0 < len(query) < MIN_QUERY_LENGTH:
            s.results = []
            s.message = None
            s.is_loading = False
            s.state = SearchState.idle
            return

        s.state = SearchState.searching
        s.is_loading = True
        try:
            products = await self._fetch(query, 1, entity_id)
        except CatalogClientError:
            logger.exception("Search failed for %r", query)
            if seq == s.request_seq:
                s.results = []
                s.error = SEARCH_FAILED_MESSAGE
                s.is_loading = False
                s.state = SearchState.idle
            return

        if seq != s.request_seq:
            logger.debug("Dropping stale response for %r (seq %d < %d)", query, seq, s.request_seq)
            return

        if query:
            s.message = (
                f'No results for "{query}"'
                if not products and entity_id is None
                else f'Showing results for "{query}"'
            )
            if self.recent and entity_id is None:
                self.recent.save(query)
        else:
            s.message = None

        if not products and query and entity_id is None:
            await self._load_catalogue(seq)
            return

        self._apply_page(products, append=False)
        if not s.pill_clicked and products:
            s.recommended_pills = vertical_names(products)

    async def _load_catalogue(self, seq: int) -> None:
        s = self.session
        try:
            products = await self._fetch("", 1, None)
        except CatalogClientError:
            logger.exception("Catalogue fallback failed")
            if seq == s.request_seq:
                s.results = []
                s.error = CATALOGUE_FAILED_MESSAGE
                s.is_loading = False
                s.state = SearchState.idle
            return

        if seq != s.request_seq:
            return
        s.fallback = True
        s.page = 1
        self._apply_page(products, append=False)

    async def on_sentinel_visible(self) -> bool:
        """
        Loads the next page when the scroll sentinel intersects the
        viewport. Returns True when a page was appended.
        """
        s = self.session
        if s.is_loading or not s.has_more or s.state != SearchState.results:
            return False

        seq = s.request_seq
        next_page = s.page + 1
        query = "" if s.fallback else s.query
        entity_id = None if s.fallback else s.entity_id

        s.state = SearchState.loading_more
        s.is_loading = True
        try:
            products = await self._fetch(query, next_page, entity_id)
        except CatalogClientError:
            logger.exception("Loading page %d failed for %r", next_page, query)
            if seq == s.request_seq:
                s.is_loading = False
                s.state = SearchState.results
            return False

        if seq != s.request_seq:
            return False
        s.page = next_page
        self._apply_page(products, append=True)
        return True

    # ---------- view state ----------

    def visibility(self) -> PanelVisibility:
        s = self.session
        input_empty = not s.query
        has_recent = bool(self.recent and self.recent.get_recent_searches())
        return PanelVisibility(
            recent_searches=input_empty and has_recent,
            popular_searches=input_empty,
            recommended_pills=not input_empty and not s.pill_clicked,
            results_text=not input_empty,
        )
