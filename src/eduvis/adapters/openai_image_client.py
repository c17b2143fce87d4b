"""OpenAI Responses API client for image generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from eduvis.domain.flows import ImageGenerationOutput
from eduvis.services.visuals import ImageGenerationClient


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image client that drives the Responses API image_generation tool."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIImageClient":
        """Create an OpenAI image client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

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
        """Request text and image output in a single call."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=prompt,
            tools=[
                {
                    "type": "image_generation",
                    "size": size,
                    "moderation": moderation,
                }
            ],
            store=store,
        )
        images = [
            item.result
            for item in response.output
            if getattr(item, "type", None) == "image_generation_call"
            and getattr(item, "result", None)
        ]
        return ImageGenerationOutput(
            text=response.output_text or "",
            image_base64=images[0] if images else None,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.client.close()
