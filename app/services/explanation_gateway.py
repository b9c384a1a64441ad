"""Single-attempt dispatch of assembled prompts to a generative backend."""

from __future__ import annotations

from typing import Protocol

from app.domain import AssembledPrompt, ExplanationResult
from app.exceptions import GenerationFailure


class ExplanationGenerator(Protocol):
    """Anything that turns an assembled prompt into explanation text."""

    async def generate(self, prompt: AssembledPrompt) -> str: ...


class ExplanationGateway:
    """Invoke the generator once and normalize its outcome."""

    def __init__(self, generator: ExplanationGenerator) -> None:
        self._generator = generator

    async def explain(self, prompt: AssembledPrompt) -> ExplanationResult:
        try:
            text = await self._generator.generate(prompt)
        except GenerationFailure:
            raise
        except Exception as exc:
            raise GenerationFailure("Generative service request failed") from exc

        if not isinstance(text, str) or not text.strip():
            raise GenerationFailure("Generative service returned empty content")

        return ExplanationResult(explanation_text=text)
