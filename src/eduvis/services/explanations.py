"""Explanation flow for uploaded visuals."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from eduvis.domain.flows import (
    EXPLANATION_APOLOGY,
    ExplanationRequest,
    ExplanationResult,
)

_logger = logging.getLogger(__name__)

EXPLANATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "explanation": {
            "type": "string",
            "description": "The explanation of the visual concept.",
        }
    },
    "required": ["explanation"],
    "additionalProperties": False,
}


class ExplanationClient(Protocol):
    """Interface for an LLM call that describes an image."""

    async def explain(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured explanation data."""


def build_explanation_prompt(request: ExplanationRequest) -> str:
    """Build the instruction sent alongside the image."""
    return (
        "You are an expert educator across multiple scientific domains. "
        "Your task is to explain the concept shown in the provided image.\n\n"
        f"The user has specified the domain: {request.domain.value}\n\n"
        "Analyze the image and provide a clear, concise, and easy-to-understand "
        "explanation of the concept it illustrates."
    )


@dataclass
class ExplanationService:
    """Explains the concept shown in an uploaded image."""

    client: ExplanationClient
    model: str
    store: bool = False

    async def explain(self, request: ExplanationRequest) -> ExplanationResult:
        """Explain the image, returning an apology on any failure."""
        try:
            raw = await self.client.explain(
                model=self.model,
                store=self.store,
                image_data_url=request.photo_data_uri,
                schema=EXPLANATION_SCHEMA,
                prompt=build_explanation_prompt(request),
            )
            result = ExplanationResult.model_validate(raw)
        except ValidationError:
            _logger.exception("Explanation response did not match the schema")
            return ExplanationResult(explanation=EXPLANATION_APOLOGY)
        except Exception:
            _logger.exception(
                "Error generating explanation", extra={"domain": request.domain.value}
            )
            return ExplanationResult(explanation=EXPLANATION_APOLOGY)

        if not result.explanation.strip():
            _logger.warning("Explanation response was empty")
            return ExplanationResult(explanation=EXPLANATION_APOLOGY)
        return result
