"""Exceptions raised by the explanation pipeline."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for pipeline failures."""

    message: str
    code: str = "service_error"
    status_code: int = 500

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class InvalidSubmission(ServiceError):
    """Raised when a submission is rejected before any processing."""

    code: str = "invalid_submission"
    status_code: int = 400


@dataclass(eq=False)
class DecodeError(ServiceError):
    """Raised when an inline-text attachment is not valid UTF-8."""

    code: str = "decode_error"
    status_code: int = 422


@dataclass(eq=False)
class GenerationFailure(ServiceError):
    """Raised when the generative service yields no usable explanation."""

    code: str = "generation_error"
    status_code: int = 500
    upstream_status: int | None = None
