"""
Application service object.

AppState is built once at startup and owns the session together with the
executor, credential store, auth client and history service. Routes reach
it through the get_state dependency; nothing here is module-global.
"""

import logging
import threading

import httpx
from fastapi import Request

from .config import Settings
from .exceptions import ResourceNotFoundError
from .schemas.auth import Session
from .schemas.execute import HTTP_METHODS, Exchange, ExecuteRequest
from .schemas.history import SyncResult
from .schemas.send import SendResponse
from .services.auth_service import AuthClient
from .services.credential_store import CredentialStore
from .services.history_service import HistoryService
from .services.http_executor import RequestExecutor
from .services.remote_store import RemoteHistoryStore

logger = logging.getLogger(__name__)


class AppState:
    """Session plus the services that act on its behalf."""

    def __init__(
        self,
        settings: Settings,
        executor: RequestExecutor,
        credentials: CredentialStore,
        auth: AuthClient,
        history: HistoryService,
    ):
        self.settings = settings
        self.executor = executor
        self.credentials = credentials
        self.auth = auth
        self.history = history
        self._session: Session | None = None
        self._session_lock = threading.Lock()

    @classmethod
    def build(
        cls,
        settings: Settings | None = None,
        credentials: CredentialStore | None = None,
        transport: httpx.BaseTransport | None = None,
        remote_transport: httpx.BaseTransport | None = None,
    ) -> "AppState":
        """
        Wire up the default services.

        Args:
            settings: Runtime settings, defaults when omitted
            credentials: Credential store, the per-user file when omitted
            transport: httpx transport for user requests
            remote_transport: httpx transport for the auth and history APIs
        """
        settings = settings or Settings()
        return cls(
            settings=settings,
            executor=RequestExecutor(settings, transport=transport),
            credentials=credentials or CredentialStore(settings.app_name),
            auth=AuthClient(settings, transport=remote_transport),
            history=HistoryService(RemoteHistoryStore(settings, transport=remote_transport), settings),
        )

    @property
    def session(self) -> Session | None:
        with self._session_lock:
            return self._session

    def _set_session(self, session: Session | None) -> None:
        with self._session_lock:
            self._session = session

    def restore(self) -> SyncResult:
        """Resume the persisted session, if any, and load its history."""
        session = self.credentials.load()
        self._set_session(session)
        if session is None:
            return SyncResult.skipped()
        logger.info("Restored session for %s", session.email)
        return self.history.load_all(session)

    def login(self, email: str, password: str, signup: bool = False) -> Session:
        """
        Authenticate, persist the session and load its history.

        Raises:
            AuthError: with a user-facing message when authentication fails;
                the current session and the credential file are untouched
        """
        if signup:
            session = self.auth.sign_up(email, password)
        else:
            session = self.auth.sign_in(email, password)
        self._set_session(session)
        self.credentials.save(session)
        # Nothing of a previous session stays visible, even if the load fails
        self.history.clear()
        outcome = self.history.load_all(session)
        if outcome.error:
            logger.warning("Could not load history for %s: %s", session.email, outcome.error)
        return session

    def logout(self) -> None:
        self._set_session(None)
        self.history.clear()
        self.credentials.clear()

    def send(self, draft: ExecuteRequest) -> SendResponse:
        """
        Execute the draft and, with a session, persist the exchange.

        Transport failures are persisted like any other outcome. The
        persistence outcome is reported alongside the result and never
        changes it.

        Raises:
            RequestInFlightError: if another send has not returned yet
        """
        result = self.executor.execute(draft.method, draft.url, draft.body)
        exchange = Exchange.from_result(draft, result)
        history = self.history.append(self.session, exchange)
        return SendResponse(result=result, history=history)

    def draft_from_history(self, record_id: str) -> ExecuteRequest:
        """Copy a stored record into a new editable draft."""
        record = self.history.get(record_id)
        if record is None:
            raise ResourceNotFoundError("History record", record_id)
        method = record.method if record.method in HTTP_METHODS else "GET"
        return ExecuteRequest(method=method, url=record.url, body=record.request_body)


def get_state(request: Request) -> AppState:
    """
    Dependency function for FastAPI to get the application state.

    Usage:
        @router.get("/items")
        def get_items(state: AppState = Depends(get_state)):
            ...
    """
    return request.app.state.restty
