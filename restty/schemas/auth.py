"""
Pydantic schemas for authentication and the persisted session.
"""

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """
    Authenticated user's token and identifiers.

    Attributes:
        token: Bearer token for the remote store
        user_id: Owner identifier stamped on every history record
        email: Display identifier
    """
    token: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    email: str

    model_config = ConfigDict(frozen=True)


class AuthRequest(BaseModel):
    """Schema for login and sign-up submissions."""
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    """Public view of the current session; never exposes the token."""
    authenticated: bool
    user_id: str | None = None
    email: str | None = None

    @classmethod
    def from_session(cls, session: Session | None) -> "SessionResponse":
        if session is None:
            return cls(authenticated=False)
        return cls(authenticated=True, user_id=session.user_id, email=session.email)
