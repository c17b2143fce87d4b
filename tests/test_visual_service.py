"""Tests for the visual generation flow."""

import asyncio

from eduvis.domain.domains import Domain
from eduvis.domain.flows import (
    REFUSAL_MESSAGE,
    ImageGenerationOutput,
    VisualRequest,
)
from eduvis.services.visuals import (
    VisualService,
    build_guardrail_instructions,
    is_refusal,
)
from tests.conftest import PNG_BASE64, FakeImageClient


def _generate(client: FakeImageClient, prompt: str, domain: Domain) -> str:
    service = VisualService(client=client, model="gpt-4.1-mini", size="1536x1024")
    result = asyncio.run(service.generate(VisualRequest(prompt=prompt, domain=domain)))
    return result.image


def test_generate_returns_png_data_uri() -> None:
    client = FakeImageClient()

    image = _generate(client, "The process of photosynthesis", Domain.BIOLOGY)

    assert image == f"data:image/png;base64,{PNG_BASE64}"
    call = client.calls[0]
    assert call["model"] == "gpt-4.1-mini"
    assert call["size"] == "1536x1024"
    assert "Domain: Biology" in call["prompt"]
    assert "Concept: The process of photosynthesis" in call["prompt"]


def test_generate_surfaces_model_refusal() -> None:
    client = FakeImageClient(
        output=ImageGenerationOutput(
            text=REFUSAL_MESSAGE.removeprefix("❌ "), image_base64=PNG_BASE64
        )
    )

    image = _generate(client, "draw me a meme of a cat", Domain.BIOLOGY)

    assert image == REFUSAL_MESSAGE
    assert image == (
        '❌ "I don\'t do that. I only create educational and scientific visuals."'
    )


def test_generate_without_media_returns_refusal() -> None:
    client = FakeImageClient(output=ImageGenerationOutput(text="Sure!"))

    assert _generate(client, "Ohm's law", Domain.PHYSICS) == REFUSAL_MESSAGE


def test_generate_normalizes_client_errors() -> None:
    client = FakeImageClient(error=RuntimeError("upstream exploded"))

    assert _generate(client, "Benzene ring", Domain.CHEMISTRY) == REFUSAL_MESSAGE


def test_generate_rejects_invalid_payload() -> None:
    client = FakeImageClient(output=ImageGenerationOutput(image_base64="***"))

    assert _generate(client, "Binary search", Domain.COMPUTER_SCIENCE) == (
        REFUSAL_MESSAGE
    )


def test_every_result_is_image_or_marked() -> None:
    outputs = [
        ImageGenerationOutput(image_base64=PNG_BASE64),
        ImageGenerationOutput(text="I DON'T DO THAT."),
        ImageGenerationOutput(),
    ]
    for domain in Domain:
        for output in outputs:
            image = _generate(FakeImageClient(output=output), "Concept", domain)
            assert image.startswith("data:image/") or image.startswith("❌")


def test_guardrail_instructions_list_all_domains() -> None:
    instructions = build_guardrail_instructions()

    for domain in Domain:
        assert f"- {domain.label} (e.g., {domain.examples})" in instructions
    assert REFUSAL_MESSAGE in instructions


def test_is_refusal_is_case_insensitive() -> None:
    assert is_refusal("i don't do that, sorry")
    assert not is_refusal("")
    assert not is_refusal(None)
