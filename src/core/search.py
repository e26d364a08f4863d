from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Sequence

from core import pagination
from core.debounce import Debouncer
from core.errors import BackendError, SearchFailed
from core.models import NormalizedProduct
from core.normalizer import normalize_products
from core.pagination import PAGE_SIZE, Page
from utils.logger import get_logger

_logger = get_logger(__name__)

ChangeListener = Callable[[], None]
ErrorListener = Callable[[SearchFailed], None]


class SearchState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SEARCHING = "searching"
    READY = "ready"
    FAILED = "failed"


class SearchController:
    """
    Owns the query, the debounce timer and the paginated result set.

    Every remote call is tagged with a sequence number. Only the response of
    the most recently issued call is applied; anything older is dropped, so
    a slow response for "ab" can never replace the results for "abc".
    """

    def __init__(
        self,
        backend,
        session_manager,
        *,
        debouncer: Optional[Debouncer] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._backend = backend
        self._session = session_manager
        self._debouncer = debouncer or Debouncer()
        self.page_size = page_size

        self.query = ""
        self.page = 1
        self.state = SearchState.IDLE
        self.last_error: Optional[SearchFailed] = None
        self._results: List[NormalizedProduct] = []
        self._seq = 0

        self._listeners: List[ChangeListener] = []
        self._error_listeners: List[ErrorListener] = []

    # ---------------------------
    # Notifications
    # ---------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Errors of debounced searches have no caller, they land here."""
        self._error_listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _set_state(self, state: SearchState) -> None:
        if state != self.state:
            _logger.debug(f"Search state {self.state.value} -> {state.value}")
        self.state = state
        self._notify()

    # ---------------------------
    # Query input
    # ---------------------------

    @property
    def results(self) -> Sequence[NormalizedProduct]:
        return tuple(self._results)

    @property
    def debounce_pending(self) -> bool:
        return self._debouncer.pending

    def set_query(self, text: str) -> None:
        """
        Store the query and restart the debounce timer. Without a session the
        query is only stored.
        """
        self.query = text
        if not self._session.is_authenticated:
            return

        if not text.strip():
            self._debouncer.cancel()
            self._clear_results()
            return

        self._debouncer.schedule(self._debounced_search)
        self._set_state(SearchState.DEBOUNCING)

    async def submit(self, text: Optional[str] = None) -> None:
        """Search right away, dropping any pending debounce timer."""
        if text is not None:
            self.query = text
        self._debouncer.cancel()
        if not self._session.is_authenticated:
            _logger.debug("Search submitted without a session, ignored.")
            return
        await self._run_search(self.query)

    async def _debounced_search(self) -> None:
        try:
            await self._run_search(self.query)
        except SearchFailed as e:
            for listener in list(self._error_listeners):
                listener(e)

    async def _run_search(self, query: str) -> None:
        term = query.strip()
        if not term:
            self._clear_results()
            return

        self._seq += 1
        seq = self._seq
        self._set_state(SearchState.SEARCHING)
        _logger.info(f"Searching products for '{term}' (#{seq})")

        try:
            records = await self._backend.search_products(term, self._session.token)
        except (SearchFailed, BackendError) as e:
            if seq != self._seq:
                _logger.debug(f"Dropping failure of superseded search #{seq}: {e}")
                return
            _logger.error(f"Search for '{term}' failed: {e}")
            self.last_error = e if isinstance(e, SearchFailed) else SearchFailed(str(e))
            self._set_state(SearchState.FAILED)
            if self.last_error is e:
                raise
            raise self.last_error from e

        if seq != self._seq:
            _logger.debug(f"Dropping response of superseded search #{seq}")
            return

        self._results = normalize_products(records or [])
        self.page = 1
        self.last_error = None
        _logger.info(f"Search #{seq} returned {len(self._results)} products")
        # the operator kept typing while this search was in flight
        if self._debouncer.pending:
            self._set_state(SearchState.DEBOUNCING)
        else:
            self._set_state(SearchState.READY)

    def _clear_results(self) -> None:
        # in-flight responses become stale
        self._seq += 1
        self._results = []
        self.page = 1
        self.last_error = None
        self._set_state(SearchState.IDLE)

    def reset(self) -> None:
        self._debouncer.cancel()
        self.query = ""
        self._clear_results()

    # ---------------------------
    # Pagination
    # ---------------------------

    @property
    def total_pages(self) -> int:
        return pagination.total_pages(len(self._results), self.page_size)

    def visible_page(self) -> Page[NormalizedProduct]:
        return pagination.paginate(self._results, self.page_size, self.page)

    def go_to_page(self, page: int) -> int:
        page = pagination.clamp_page(page, len(self._results), self.page_size)
        if page != self.page:
            self.page = page
            self._notify()
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def prev_page(self) -> int:
        return self.go_to_page(self.page - 1)
