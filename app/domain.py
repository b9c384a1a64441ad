"""Request-scoped value types that flow through the explanation pipeline.

A request moves through ``Submission`` -> ``AttachmentClass`` ->
``AssembledPrompt`` -> ``ExplanationResult``. None of them outlives the
request that created it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AttachmentClass(str, Enum):
    """How an attachment is handed to the generative service."""

    NONE = "none"
    INLINE_TEXT = "inline_text"
    MULTIMODAL_BINARY = "multimodal_binary"
    UNSUPPORTED = "unsupported"


class RequestState(str, Enum):
    """Lifecycle of a single explanation request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    CLASSIFIED = "classified"
    ASSEMBLED = "assembled"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Attachment:
    """An uploaded file held in memory."""

    data: bytes
    content_type: str
    filename: str


@dataclass(frozen=True)
class Submission:
    text: str = ""
    attachment: Attachment | None = None


@dataclass(frozen=True)
class MultimodalPart:
    """Binary payload forwarded to the service as base64."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class AssembledPrompt:
    prompt_text: str
    multimodal_part: MultimodalPart | None = None


@dataclass(frozen=True)
class ExplanationResult:
    explanation_text: str
