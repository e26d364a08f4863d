from __future__ import annotations

from typing import List, Optional

from core.debounce import Debouncer
from core.errors import BackendError
from core.models import Location, Session
from core.normalizer import unwrap_locations
from core.print_queue import QueueManager
from core.search import SearchController
from core.session import SessionManager
from db.session_store import SessionStore
from utils.logger import get_logger

_logger = get_logger(__name__)


class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - session: token, user and selected location
      - search: query, debounce timer and paginated results
      - queue: print queue and pending quantities
      - locations: locations offered on the login screen
    """

    def __init__(
        self,
        backend,
        store: Optional[SessionStore] = None,
        *,
        debouncer: Optional[Debouncer] = None,
    ) -> None:
        self.backend = backend
        self.session = SessionManager(backend, store or SessionStore())
        self.search = SearchController(backend, self.session, debouncer=debouncer)
        self.queue = QueueManager(backend, self.session)
        self.locations: List[Location] = []

        self.session.add_listener(self._handle_session_change)
        self.search.add_listener(self._scope_pending_quantities)

    def _handle_session_change(self, session: Session) -> None:
        # nothing from the previous operator may survive a logout
        if not session.is_authenticated:
            self.reset()

    def _scope_pending_quantities(self) -> None:
        visible = self.search.visible_page().items
        self.queue.retain_pending(p.id for p in visible)

    def reset(self) -> None:
        """Start over: query, results, queue and pending quantities, not the session."""
        self.search.reset()
        self.queue.reset()
        _logger.debug("Search and queue reset.")

    async def load_locations(self) -> List[Location]:
        """
        Fetch the location list for the login screen. Failures are logged and
        leave the list empty, the server default location still works.
        """
        try:
            response = await self.backend.fetch_locations()
        except BackendError as e:
            _logger.warning(f"Failed to fetch locations: {e}")
            self.locations = []
        else:
            self.locations = unwrap_locations(response)
        return self.locations
