from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional

from core.errors import AuthenticationFailed, BackendError, StorageError
from core.models import Session
from utils.logger import get_logger

_logger = get_logger(__name__)

SessionListener = Callable[[Session], None]


class SessionManager:
    """
    Owns the authenticated session. Every other component asks this one
    whether a token exists before talking to the backend.

    The session store is read once by ``restore_session`` and written only by
    ``login`` and ``logout``.
    """

    def __init__(self, backend, store) -> None:
        self._backend = backend
        self._store = store
        self._session = Session()
        self._listeners: List[SessionListener] = []
        self._logging_in = False

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def login_in_progress(self) -> bool:
        return self._logging_in

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _set_session(self, session: Session) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    async def restore_session(self) -> Session:
        """
        Optimistic restore: a persisted token is trusted without asking the
        backend. An empty store just means nobody is logged in.
        """
        try:
            session = await self._store.load()
        except StorageError as e:
            _logger.error(f"Could not restore session: {e}")
            return self._session
        if session.is_authenticated:
            _logger.info("Restored persisted session.")
            self._set_session(session)
        else:
            _logger.debug("No persisted session found.")
        return self._session

    async def login(
        self, username: str, password: str, location: Optional[str] = None
    ) -> Session:
        if self._logging_in:
            raise AuthenticationFailed("A login attempt is already in progress.")

        location = location or None
        self._logging_in = True
        try:
            try:
                response = await self._backend.login(username, password, location)
            except BackendError as e:
                _logger.warning(f"Login request for '{username}' failed: {e}")
                raise AuthenticationFailed(str(e)) from e

            token = _extract_token(response)
            if not token:
                _logger.warning(f"Login response for '{username}' carried no token.")
                raise AuthenticationFailed("Login failed")

            session = Session(
                token=token,
                user=response.get("user"),
                selected_location=location,
            )
            try:
                await self._store.save(session)
            except StorageError as e:
                _logger.error(f"Could not persist session for '{username}': {e}")
                raise AuthenticationFailed(str(e)) from e
        finally:
            self._logging_in = False

        _logger.info(f"User '{username}' logged in (location: {location or 'default'}).")
        self._set_session(session)
        return session

    async def logout(self) -> None:
        """
        Drop the session and tell listeners, so search results and the print
        queue are wiped before the persisted entries are removed.
        """
        self._set_session(Session())
        try:
            await self._store.clear()
        except StorageError as e:
            # the in-memory session is already gone
            _logger.error(f"Could not clear persisted session: {e}")
        _logger.info("User logged out.")


def _extract_token(response: Any) -> Optional[str]:
    if not isinstance(response, Mapping):
        return None
    token = response.get("token")
    if token is None or not str(token).strip():
        return None
    return str(token)
