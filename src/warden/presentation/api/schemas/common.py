"""Response envelopes shared by all endpoints.

Success: ``{"ok": true, "value": ...}``
Failure: ``{"ok": false, "kind": "...", "message": "..."}``
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Successful operation result."""

    ok: Literal[True] = True
    value: T


class ErrorEnvelope(BaseModel):
    """Failed operation result with a stable, machine-readable kind."""

    ok: Literal[False] = False
    kind: str = Field(..., description="Stable error kind, e.g. INVALID_CREDENTIALS")
    message: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
