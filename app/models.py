"""Pydantic models returned by the HTTP API."""

from pydantic import BaseModel, Field


class ExplanationResponse(BaseModel):
    """Successful explanation payload."""

    explanation: str
    suggestions: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error payload returned to HTTP clients."""

    error: str
