"""OpenAI Responses API client for image explanations."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from eduvis.services.explanations import ExplanationClient


@dataclass
class OpenAIExplanationClient(ExplanationClient):
    """Explanation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIExplanationClient":
        """Create an OpenAI explanation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def explain(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "visual_explanation",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.client.close()
