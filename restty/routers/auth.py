"""
Authentication API routes.

Login and sign-up persist the session and load its history; logout forgets
both. Rejections are returned as 401 with a user-facing message.
"""

from fastapi import APIRouter, Depends, status

from ..exceptions import ErrorResponse
from ..schemas.auth import AuthRequest, SessionResponse
from ..state import AppState, get_state


router = APIRouter(prefix="/api/auth", tags=["auth"])

_AUTH_ERRORS = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Authentication rejected"},
}


@router.get("/session", response_model=SessionResponse)
def get_session(state: AppState = Depends(get_state)):
    """Return who is signed in, if anyone."""
    return SessionResponse.from_session(state.session)


@router.post("/login", response_model=SessionResponse, responses=_AUTH_ERRORS)
def login(credentials: AuthRequest, state: AppState = Depends(get_state)):
    """Sign in with email and password."""
    session = state.login(credentials.email, credentials.password)
    return SessionResponse.from_session(session)


@router.post("/signup", response_model=SessionResponse, responses=_AUTH_ERRORS)
def signup(credentials: AuthRequest, state: AppState = Depends(get_state)):
    """
    Register a new account and sign in to it.

    If the account needs email confirmation first, a 401 with error code
    AUTH_CONFIRMATION_REQUIRED tells the user to check their inbox.
    """
    session = state.login(credentials.email, credentials.password, signup=True)
    return SessionResponse.from_session(session)


@router.post("/logout", response_model=SessionResponse)
def logout(state: AppState = Depends(get_state)):
    """Forget the session, its credential file and the in-memory history."""
    state.logout()
    return SessionResponse.from_session(None)
