"""
Request execution API routes.

Sends the composed request and, for an authenticated user, records the
exchange in history. The exchange result is returned whether or not it
could be persisted.
"""

from fastapi import APIRouter, Depends, status

from ..exceptions import ErrorResponse
from ..schemas.execute import ExecuteRequest
from ..schemas.send import SendResponse
from ..state import AppState, get_state


router = APIRouter(prefix="/api/execute", tags=["execute"])


@router.post(
    "",
    response_model=SendResponse,
    responses={
        status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "A request is already in flight"},
    }
)
def execute_request(draft: ExecuteRequest, state: AppState = Depends(get_state)):
    """
    Execute the request draft.

    Transport failures come back as a result with status_label "Error",
    not as an HTTP error.

    Args:
        draft: Method, URL and optional body
        state: Application state

    Returns:
        SendResponse with the result and the history outcome
    """
    return state.send(draft)
