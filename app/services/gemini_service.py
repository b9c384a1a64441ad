"""Adapter for the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import Settings
from app.domain import AssembledPrompt
from app.exceptions import GenerationFailure

logger = logging.getLogger(__name__)


class GeminiService:
    """Wrapper around Gemini's content generation endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    @property
    def endpoint(self) -> str:
        base_url = self._settings.gemini_base_url.rstrip("/")
        return f"{base_url}/models/{self._settings.gemini_model}:generateContent"

    def build_payload(self, prompt: AssembledPrompt) -> dict[str, Any]:
        """Translate an assembled prompt into a Gemini request body."""

        parts: list[dict[str, Any]] = []
        if prompt.prompt_text.strip():
            parts.append({"text": prompt.prompt_text})
        if prompt.multimodal_part is not None:
            parts.append(
                {
                    "inlineData": {
                        "mimeType": prompt.multimodal_part.mime_type,
                        "data": prompt.multimodal_part.data,
                    }
                }
            )

        return {
            "systemInstruction": {
                "parts": [{"text": self._settings.explanation_instruction}],
            },
            "contents": [{"role": "user", "parts": parts}],
        }

    async def generate(self, prompt: AssembledPrompt) -> str:
        """Request an explanation for ``prompt`` from Gemini."""

        headers = {
            "x-goog-api-key": self._settings.gemini_api_key,
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self.endpoint,
                headers=headers,
                json=self.build_payload(prompt),
                timeout=self._settings.generation_timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Gemini generation timed out", exc_info=exc)
            raise GenerationFailure("Generative service timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Gemini generation failed",
                extra={
                    "status_code": exc.response.status_code,
                    "response_text": exc.response.text,
                },
            )
            raise GenerationFailure(
                "Generative service returned an error",
                upstream_status=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected Gemini HTTP error")
            raise GenerationFailure("Generative service request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Non-JSON Gemini response", extra={"response_text": response.text})
            raise GenerationFailure("Invalid generative service payload") from exc

        feedback = data.get("promptFeedback") if isinstance(data, dict) else None
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            logger.warning("Gemini blocked the prompt", extra={"block_reason": block_reason})
            raise GenerationFailure("Generative service blocked the prompt")

        try:
            candidate = data["candidates"][0]
            parts = candidate["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.error("Malformed Gemini response", extra={"raw_response": data})
            raise GenerationFailure("Invalid generative service payload") from exc

        if not text.strip():
            logger.error(
                "Gemini returned empty content",
                extra={"finish_reason": candidate.get("finishReason")},
            )
            raise GenerationFailure("Generative service returned empty content")

        return text
