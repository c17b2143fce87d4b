"""Educational visual generation flow."""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Protocol

from eduvis.domain.domains import Domain
from eduvis.domain.flows import (
    REFUSAL_MESSAGE,
    REFUSAL_PHRASE,
    GenerationResult,
    ImageGenerationOutput,
    VisualRequest,
)
from eduvis.domain.media import to_data_uri

_logger = logging.getLogger(__name__)


class ImageGenerationClient(Protocol):
    """Interface for a model call that may return text and an image."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        size: str,
        moderation: str,
        store: bool,
    ) -> ImageGenerationOutput:
        """Return any text the model produced and the first image payload."""


def build_guardrail_instructions() -> str:
    """Build the fixed system prompt that limits output to the known domains."""
    domain_lines = "\n".join(
        f"- {domain.label} (e.g., {domain.examples})" for domain in Domain
    )
    return (
        "You are an Educational and Scientific Image Generator Bot.\n"
        "Your purpose is to generate accurate, labeled, and helpful visuals "
        "strictly related to education.\n"
        "You ONLY support the following domains:\n\n"
        f"{domain_lines}\n\n"
        "If a user asks for anything unrelated to education (e.g., memes, "
        "fantasy, cartoons, gaming, celebrities, animals, fictional characters, "
        "or NSFW content), do not generate an image and respond strictly with:\n\n"
        f"{REFUSAL_MESSAGE}\n\n"
        "Stay consistent and never break these rules."
    )


def build_visual_prompt(request: VisualRequest) -> str:
    """Build the per-request generation prompt."""
    return (
        "Generate an educational image of the following concept in the "
        "specified domain:\n\n"
        f"Domain: {request.domain.value}\n"
        f"Concept: {request.prompt}\n\n"
        "If the request is outside of supported domains, respond with the "
        "error message above."
    )


def is_refusal(text: str | None) -> bool:
    """Return true when model text contains the fixed refusal phrase."""
    return bool(text) and REFUSAL_PHRASE.lower() in text.lower()


@dataclass
class VisualService:
    """Turns a concept and domain into an image data URI."""

    client: ImageGenerationClient
    model: str
    size: str = "1024x1024"
    moderation: str = "auto"
    store: bool = False

    async def generate(self, request: VisualRequest) -> GenerationResult:
        """Generate an educational visual, normalizing every failure."""
        try:
            output = await self.client.generate(
                model=self.model,
                instructions=build_guardrail_instructions(),
                prompt=build_visual_prompt(request),
                size=self.size,
                moderation=self.moderation,
                store=self.store,
            )
        except Exception:
            _logger.exception(
                "Error generating image", extra={"domain": request.domain.value}
            )
            return GenerationResult(image=REFUSAL_MESSAGE)

        if is_refusal(output.text):
            _logger.info("Visual request refused: domain=%s", request.domain.value)
            return GenerationResult(image=REFUSAL_MESSAGE)
        if not output.image_base64:
            _logger.warning(
                "Image generation returned no media: domain=%s", request.domain.value
            )
            return GenerationResult(image=REFUSAL_MESSAGE)

        try:
            image_bytes = base64.b64decode(output.image_base64, validate=True)
        except binascii.Error:
            _logger.exception("Image generation returned an invalid payload")
            return GenerationResult(image=REFUSAL_MESSAGE)
        return GenerationResult(
            image=to_data_uri(image_bytes, default_mime_type="image/png")
        )
