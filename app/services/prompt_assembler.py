"""Merge submission text and a classified attachment into one prompt."""

from __future__ import annotations

import base64

from app.domain import AssembledPrompt, Attachment, AttachmentClass, MultimodalPart
from app.exceptions import DecodeError, InvalidSubmission

FENCE = "```"


def inline_block(filename: str, content: str) -> str:
    """Render decoded file content as a labelled, fenced block."""

    return f"[Attached File: {filename}]\n{FENCE}\n{content}\n{FENCE}"


def assemble_prompt(
    text: str,
    attachment: Attachment | None,
    attachment_class: AttachmentClass,
) -> AssembledPrompt:
    """Build the outbound prompt for one submission.

    Inline-text content is appended verbatim and is not re-checked against the
    text length limit.
    """

    if attachment_class is AttachmentClass.NONE or attachment is None:
        return AssembledPrompt(prompt_text=text.strip())

    if attachment_class is AttachmentClass.INLINE_TEXT:
        try:
            content = attachment.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Attachment {attachment.filename!r} is not valid UTF-8 text"
            ) from exc

        block = inline_block(attachment.filename, content)
        stripped = text.strip()
        prompt_text = f"{stripped}\n\n{block}" if stripped else block
        return AssembledPrompt(prompt_text=prompt_text)

    if attachment_class is AttachmentClass.MULTIMODAL_BINARY:
        encoded = base64.b64encode(attachment.data).decode("ascii")
        return AssembledPrompt(
            prompt_text=text,
            multimodal_part=MultimodalPart(mime_type=attachment.content_type, data=encoded),
        )

    raise InvalidSubmission(
        f"Attachments of type {attachment.content_type!r} are not supported",
        status_code=415,
    )
