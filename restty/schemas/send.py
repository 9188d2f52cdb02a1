"""
Pydantic schema for the response of a send.
"""

from pydantic import BaseModel

from .execute import ExecutionResult
from .history import SyncResult


class SendResponse(BaseModel):
    """
    Schema for a completed send.

    The result is always present; history reports what happened to its
    persistence and never changes the result.
    """
    result: ExecutionResult
    history: SyncResult
