"""
History record API routes.

Provides endpoints for viewing, reloading and deleting the signed-in user's
request history. Records are created by executing requests.
"""

from fastapi import APIRouter, Depends

from ..schemas.execute import ExecuteRequest
from ..schemas.history import HistoryListResponse, SyncResult
from ..state import AppState, get_state


router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=HistoryListResponse)
def list_history(state: AppState = Depends(get_state)):
    """Get the in-memory history, most recent first."""
    items = list(state.history.records)
    return HistoryListResponse(items=items, total=len(items))


@router.post("/reload", response_model=SyncResult)
def reload_history(state: AppState = Depends(get_state)):
    """
    Reload history from the remote store.

    A failed reload keeps the current list and reports status "failed".
    """
    return state.history.load_all(state.session)


@router.get("/{history_id}/draft", response_model=ExecuteRequest)
def load_draft(history_id: str, state: AppState = Depends(get_state)):
    """
    Copy a history record into a new editable request draft.

    Raises:
        ResourceNotFoundError: 404 if the record is not in the list
    """
    return state.draft_from_history(history_id)


@router.delete("/{history_id}", response_model=SyncResult)
def delete_history(history_id: str, state: AppState = Depends(get_state)):
    """
    Delete a history record remotely, then locally.

    Args:
        history_id: Server-assigned id of the record
        state: Application state

    Returns:
        SyncResult; removed is True only if a local entry was dropped
    """
    return state.history.delete(state.session, history_id)
