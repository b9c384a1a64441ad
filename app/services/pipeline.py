"""Validate -> classify -> assemble -> dispatch, for one submission."""

from __future__ import annotations

import logging
import uuid

from app.config import Settings
from app.domain import ExplanationResult, RequestState, Submission
from app.exceptions import InvalidSubmission, ServiceError
from app.services.classifier import classify_attachment
from app.services.explanation_gateway import ExplanationGateway
from app.services.prompt_assembler import assemble_prompt

logger = logging.getLogger(__name__)


class ExplanationPipeline:
    """Runs the fixed stage order for each submission.

    Holds no per-request state; one instance may serve concurrent requests.
    """

    def __init__(self, gateway: ExplanationGateway, settings: Settings) -> None:
        self._gateway = gateway
        self._settings = settings

    def validate(self, submission: Submission) -> None:
        """Reject submissions before any attachment work happens."""

        has_text = bool(submission.text.strip())
        if not has_text and submission.attachment is None:
            raise InvalidSubmission("Please provide some text or attach a file.")

        if len(submission.text) > self._settings.max_text_length:
            raise InvalidSubmission(
                f"Text length exceeds limit of {self._settings.max_text_length} characters."
            )

    async def run(
        self, submission: Submission, request_id: str | None = None
    ) -> ExplanationResult:
        request_id = request_id or uuid.uuid4().hex
        self._transition(request_id, RequestState.RECEIVED)

        try:
            self.validate(submission)
            self._transition(request_id, RequestState.VALIDATED)

            attachment = submission.attachment
            attachment_class = classify_attachment(
                attachment.content_type if attachment else None,
                policy=self._settings.attachment_policy,
            )
            self._transition(
                request_id,
                RequestState.CLASSIFIED,
                attachment_class=attachment_class.value,
                content_type=attachment.content_type if attachment else None,
                attachment_bytes=len(attachment.data) if attachment else 0,
            )

            prompt = assemble_prompt(submission.text, attachment, attachment_class)
            self._transition(
                request_id,
                RequestState.ASSEMBLED,
                prompt_chars=len(prompt.prompt_text),
                multimodal=prompt.multimodal_part is not None,
            )

            self._transition(request_id, RequestState.DISPATCHED)
            result = await self._gateway.explain(prompt)
        except ServiceError as exc:
            self._transition(
                request_id, RequestState.FAILED, error_code=exc.code, error=exc.message
            )
            raise

        self._transition(
            request_id,
            RequestState.COMPLETED,
            explanation_chars=len(result.explanation_text),
        )
        return result

    @staticmethod
    def _transition(request_id: str, state: RequestState, **fields: object) -> None:
        logger.info(
            "Explanation request %s",
            state.value,
            extra={"request_id": request_id, "state": state.value, **fields},
        )
