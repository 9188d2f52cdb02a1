"""
Pydantic schemas for request history.

Defines the persisted history record, the explicit outcome of history
synchronisation calls and the list response.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HistoryRecord(BaseModel):
    """
    Schema for a persisted exchange.

    Field aliases are the column names of the remote history table.

    Attributes:
        id: Assigned by the remote store; None before persistence
        user_id: Owner of the record
        method: HTTP method used
        url: Target URL
        request_body: Body sent with the request, possibly truncated
        status_label: Outcome label such as "200 OK" or "Error"
        response_body: Formatted response body, possibly truncated
        elapsed: Display string of the round-trip time
        created_at: Server-assigned timestamp; None before persistence
    """
    id: str | None = None
    user_id: str
    method: str
    url: str
    request_body: str | None = Field(default=None, alias="body")
    status_label: str = Field(alias="status")
    response_body: str = Field(alias="response")
    elapsed: str = Field(alias="time")
    created_at: datetime | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_remote(self) -> dict:
        """Serialise for upload, leaving server-assigned fields to the server."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude={"id", "created_at"},
        )


class SyncStatus(str, Enum):
    """Outcome of a history synchronisation call."""
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncResult(BaseModel):
    """
    Explicit outcome of load_all, append and delete.

    OK is a hard success, SKIPPED a no-op (no session, empty id) and
    FAILED a soft failure that left the in-memory list unchanged.
    """
    status: SyncStatus
    record: HistoryRecord | None = None
    removed: bool = False
    count: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.OK

    @classmethod
    def skipped(cls) -> "SyncResult":
        return cls(status=SyncStatus.SKIPPED)

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(status=SyncStatus.FAILED, error=error)


class HistoryListResponse(BaseModel):
    """Schema for the history list response."""
    items: list[HistoryRecord]
    total: int
