"""Content-type based attachment classification."""

from __future__ import annotations

from typing import Literal

from app.domain import AttachmentClass

AttachmentPolicy = Literal["permissive", "strict"]

INLINE_TEXT_TYPES = frozenset(
    {
        "application/json",
        "application/javascript",
        "application/typescript",
    }
)

# Families the generative service accepts natively as inline data.
NATIVE_BINARY_PREFIXES = ("image/", "audio/", "video/")
NATIVE_BINARY_TYPES = frozenset({"application/pdf"})


def normalize_content_type(content_type: str | None) -> str:
    """Lower-case a MIME type and drop parameters such as ``charset``."""

    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def classify_attachment(
    content_type: str | None,
    policy: AttachmentPolicy = "permissive",
) -> AttachmentClass:
    """Decide how an attachment with ``content_type`` is forwarded.

    The first matching rule wins:

    1. no content type at all -> ``NONE``; a parameters-only value such as
       ``"; charset=utf-8"`` still counts as present
    2. ``text/*`` or a known source format -> ``INLINE_TEXT``
    3. anything else -> ``MULTIMODAL_BINARY``

    Under the ``strict`` policy, rule 3 only covers the families listed in
    ``NATIVE_BINARY_PREFIXES``/``NATIVE_BINARY_TYPES`` and the remainder is
    ``UNSUPPORTED``.
    """

    if not content_type:
        return AttachmentClass.NONE

    mime_type = normalize_content_type(content_type)

    if mime_type.startswith("text/") or mime_type in INLINE_TEXT_TYPES:
        return AttachmentClass.INLINE_TEXT

    if policy == "strict" and not (
        mime_type.startswith(NATIVE_BINARY_PREFIXES) or mime_type in NATIVE_BINARY_TYPES
    ):
        return AttachmentClass.UNSUPPORTED

    return AttachmentClass.MULTIMODAL_BINARY
