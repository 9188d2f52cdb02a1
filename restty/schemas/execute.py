"""
Pydantic schemas for request execution.

Defines the editable request draft, the execution result and the
completed exchange handed to the history layer.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# HTTP methods supported by the system
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")

# Methods whose body is sent with the request
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class ExecuteRequest(BaseModel):
    """Schema for the editable request draft."""
    method: HttpMethod = "GET"
    url: str = Field(min_length=1)
    body: str | None = None


class ExecutionResult(BaseModel):
    """
    Schema for the outcome of a single exchange.

    Transport failures use the same shape with status_label "Error".
    """
    status_label: str
    response_body: str
    elapsed: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_transport_error(self) -> bool:
        return self.status_label == "Error"


class Exchange(BaseModel):
    """One completed request/response pair."""
    method: HttpMethod
    url: str
    request_body: str | None = None
    status_label: str
    response_body: str
    elapsed: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_result(cls, draft: ExecuteRequest, result: ExecutionResult) -> "Exchange":
        body = draft.body if draft.method in BODY_METHODS and draft.body else None
        return cls(
            method=draft.method,
            url=draft.url,
            request_body=body,
            status_label=result.status_label,
            response_body=result.response_body,
            elapsed=result.elapsed,
        )
