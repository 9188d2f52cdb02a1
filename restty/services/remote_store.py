"""
Client for the remote history table.

The hosted store is a PostgREST-style REST API: rows are filtered with
`column=eq.value` query parameters, ordered with `order=` and limited with
`limit=`. Every call is scoped to the session owner.
"""

import logging

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import RemoteStoreError
from ..schemas.auth import Session
from ..schemas.history import HistoryRecord

logger = logging.getLogger(__name__)

HISTORY_PATH = "/rest/v1/history"


class RemoteHistoryStore:
    """
    Create, list and delete history rows owned by the session user.

    Every failure (transport error, non-2xx status, unexpected payload)
    is raised as RemoteStoreError.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    def _headers(self, session: Session) -> dict[str, str]:
        return {
            "apikey": self._settings.api_key,
            "Authorization": f"Bearer {session.token}",
        }

    def _request(self, operation: str, method: str, session: Session, **kwargs) -> httpx.Response:
        headers = self._headers(session)
        headers.update(kwargs.pop("headers", {}))
        try:
            with httpx.Client(
                base_url=self._settings.remote_url,
                timeout=self._settings.request_timeout,
                transport=self._transport,
            ) as client:
                response = client.request(method, HISTORY_PATH, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteStoreError(operation, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise RemoteStoreError(
                operation,
                f"{response.status_code} {response.text}".strip(),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _parse_rows(operation: str, response: httpx.Response) -> list[HistoryRecord]:
        try:
            rows = response.json()
            if not isinstance(rows, list):
                raise RemoteStoreError(operation, "expected a JSON array")
            return [HistoryRecord.model_validate(row) for row in rows]
        except (ValueError, ValidationError) as e:
            raise RemoteStoreError(operation, f"unexpected payload: {e}") from e

    def list_records(self, session: Session, limit: int) -> list[HistoryRecord]:
        """Return up to `limit` of the owner's records, newest first."""
        response = self._request(
            "list history",
            "GET",
            session,
            params={
                "user_id": f"eq.{session.user_id}",
                "order": "created_at.desc",
                "limit": str(limit),
            },
        )
        return self._parse_rows("list history", response)

    def create(self, session: Session, record: HistoryRecord) -> HistoryRecord:
        """Insert a record and return the server-assigned representation."""
        response = self._request(
            "create history",
            "POST",
            session,
            json=record.to_remote(),
            headers={"Prefer": "return=representation"},
        )
        rows = self._parse_rows("create history", response)
        if not rows:
            raise RemoteStoreError("create history", "no representation returned")
        return rows[-1]

    def delete(self, session: Session, record_id: str) -> None:
        """Delete one of the owner's records by id."""
        self._request(
            "delete history",
            "DELETE",
            session,
            params={
                "id": f"eq.{record_id}",
                "user_id": f"eq.{session.user_id}",
            },
        )
        logger.debug("Deleted remote history record %s", record_id)
