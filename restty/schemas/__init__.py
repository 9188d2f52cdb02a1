"""
Pydantic schemas package.

Exports all schemas shared by the services and the API routes.
"""

from .execute import (
    HttpMethod,
    HTTP_METHODS,
    BODY_METHODS,
    ExecuteRequest,
    ExecutionResult,
    Exchange,
)

from .history import (
    HistoryRecord,
    SyncStatus,
    SyncResult,
    HistoryListResponse,
)

from .auth import (
    Session,
    AuthRequest,
    SessionResponse,
)

from .send import SendResponse

__all__ = [
    # Execute schemas
    "HttpMethod",
    "HTTP_METHODS",
    "BODY_METHODS",
    "ExecuteRequest",
    "ExecutionResult",
    "Exchange",
    # History schemas
    "HistoryRecord",
    "SyncStatus",
    "SyncResult",
    "HistoryListResponse",
    # Auth schemas
    "Session",
    "AuthRequest",
    "SessionResponse",
    # Send schema
    "SendResponse",
]
