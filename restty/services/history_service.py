"""
History service reconciling the in-memory history with the remote store.

This service owns the ordered, most-recent-first list of history records.
The remote store is the source of truth on load; afterwards the local list
follows successful inserts and deletes. Every remote failure leaves the
local list exactly as it was and is reported as a SyncResult.
"""

import logging
import threading

from ..config import Settings
from ..exceptions import RemoteStoreError
from ..schemas.auth import Session
from ..schemas.execute import Exchange
from ..schemas.history import HistoryRecord, SyncResult, SyncStatus
from .remote_store import RemoteHistoryStore

logger = logging.getLogger(__name__)


def truncation_marker(cut_bytes: int) -> str:
    return f"... [truncated {cut_bytes} bytes]"


def truncate(text: str, max_bytes: int) -> str:
    """
    Cut text to at most max_bytes of UTF-8 and append a marker.

    The marker states exactly how many bytes were removed. A cut that would
    split a multi-byte character backs off to the previous character
    boundary, so the kept prefix may be up to three bytes short of max_bytes;
    only text whose cut falls on a character boundary (all ASCII text, for
    instance) keeps exactly max_bytes. A str cannot hold part of a character.

    Args:
        text: Text to truncate
        max_bytes: Byte budget for the kept prefix

    Returns:
        text unchanged if it fits, otherwise the kept prefix plus marker

    Example:
        >>> truncate("abcdef", 4)
        'abcd... [truncated 2 bytes]'
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text

    kept = encoded[:max_bytes].decode("utf-8", errors="ignore")
    kept_bytes = len(kept.encode("utf-8"))
    return kept + truncation_marker(len(encoded) - kept_bytes)


class HistoryService:
    """
    Owns the Ordered History List and synchronises it with the remote store.

    While no session is present every operation is a no-op returning a
    SKIPPED result. List mutations are serialised; network calls are not.

    Every clear() and successful load_all() starts a new generation. A
    load or append whose network call began in an earlier generation
    leaves the list alone, so a result for a previous session never lands
    in the current one.
    """

    def __init__(self, store: RemoteHistoryStore, settings: Settings):
        self._store = store
        self._settings = settings
        self._records: list[HistoryRecord] = []
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def limit(self) -> int:
        return self._settings.history_limit

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        """Snapshot of the list, most recent first."""
        with self._lock:
            return tuple(self._records)

    def get(self, record_id: str) -> HistoryRecord | None:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._generation += 1

    def build_record(self, session: Session, exchange: Exchange) -> HistoryRecord:
        """Build the truncated, not yet persisted record for an exchange."""
        request_body = exchange.request_body or None
        if request_body is not None:
            request_body = truncate(request_body, self._settings.max_body_bytes)
        return HistoryRecord(
            user_id=session.user_id,
            method=exchange.method,
            url=exchange.url,
            request_body=request_body,
            status_label=exchange.status_label,
            response_body=truncate(exchange.response_body, self._settings.max_response_bytes),
            elapsed=exchange.elapsed,
        )

    def load_all(self, session: Session | None) -> SyncResult:
        """
        Replace the list with the owner's newest records from the remote store.

        Args:
            session: Current session, or None in anonymous mode

        Returns:
            OK with the record count, SKIPPED without a session or when the
            list was cleared or reloaded meanwhile, or FAILED with the list
            left untouched
        """
        if session is None:
            return SyncResult.skipped()

        started = self.generation
        try:
            fetched = self._store.list_records(session, self.limit)
        except RemoteStoreError as e:
            logger.warning("Failed to load history: %s", e)
            return SyncResult.failed(str(e))

        with self._lock:
            if self._generation != started:
                logger.debug("Discarding history load superseded by a newer one")
                return SyncResult.skipped()
            self._records = list(fetched[: self.limit])
            self._generation += 1
            count = len(self._records)
        logger.debug("Loaded %d history records", count)
        return SyncResult(status=SyncStatus.OK, count=count)

    def append(self, session: Session | None, exchange: Exchange) -> SyncResult:
        """
        Persist an exchange and prepend the server's record to the list.

        Args:
            session: Current session, or None in anonymous mode
            exchange: The completed exchange, whatever its status

        Returns:
            OK with the persisted record, SKIPPED without a session (no
            network call is made), or FAILED with the list unchanged. If the
            list was cleared or reloaded during the upload the record is
            returned but not inserted.
        """
        if session is None:
            return SyncResult.skipped()

        draft = self.build_record(session, exchange)
        started = self.generation
        try:
            persisted = self._store.create(session, draft)
        except RemoteStoreError as e:
            logger.warning("Failed to save history: %s", e)
            return SyncResult.failed(str(e))

        with self._lock:
            if self._generation == started:
                self._records.insert(0, persisted)
                del self._records[self.limit:]
            else:
                logger.debug("History changed during upload; not inserting %s", persisted.id)
            count = len(self._records)
        return SyncResult(status=SyncStatus.OK, record=persisted, count=count)

    def delete(self, session: Session | None, record_id: str) -> SyncResult:
        """
        Delete a record remotely, then drop the matching local entry.

        Returns:
            OK (removed tells whether a local entry matched), SKIPPED without
            a session or id, or FAILED with the list unchanged. The id is gone
            remotely, so it is dropped from whatever list is current.
        """
        if session is None or not record_id:
            return SyncResult.skipped()

        try:
            self._store.delete(session, record_id)
        except RemoteStoreError as e:
            logger.warning("Failed to delete history record %s: %s", record_id, e)
            return SyncResult.failed(str(e))

        with self._lock:
            removed = False
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    removed = True
                    break
            count = len(self._records)
        return SyncResult(status=SyncStatus.OK, removed=removed, count=count)
