"""Tests for the OpenAI adapters."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from eduvis.adapters.openai_explanation_client import OpenAIExplanationClient
from eduvis.adapters.openai_image_client import OpenAIImageClient


class _FakeResponses:
    def __init__(self, response: object) -> None:
        self.response = response
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return self.response


class _FakeOpenAI:
    def __init__(self, response: object) -> None:
        self.responses = _FakeResponses(response)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_explanation_client_parses_structured_output() -> None:
    fake = _FakeOpenAI(
        SimpleNamespace(output_text=json.dumps({"explanation": "Mitosis."}))
    )
    client = OpenAIExplanationClient(client=fake)

    result = asyncio.run(
        client.explain(
            model="gpt-4.1-mini",
            store=False,
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            schema={"type": "object"},
            prompt="Explain this",
        )
    )

    assert result == {"explanation": "Mitosis."}
    payload = fake.responses.last_payload
    content = payload["input"][0]["content"]
    assert content[1] == {
        "type": "input_image",
        "image_url": "data:image/jpeg;base64,ZmFrZQ==",
    }
    assert payload["text"]["format"]["name"] == "visual_explanation"


def test_explanation_client_rejects_empty_output() -> None:
    client = OpenAIExplanationClient(client=_FakeOpenAI(SimpleNamespace(output_text="")))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.explain(
                model="gpt-4.1-mini",
                store=False,
                image_data_url="data:image/png;base64,ZmFrZQ==",
                schema={},
                prompt="Explain",
            )
        )


def test_image_client_collects_text_and_first_image() -> None:
    response = SimpleNamespace(
        output_text="Here you go.",
        output=[
            SimpleNamespace(type="message"),
            SimpleNamespace(type="image_generation_call", result="Zmlyc3Q="),
            SimpleNamespace(type="image_generation_call", result="c2Vjb25k"),
        ],
    )
    fake = _FakeOpenAI(response)
    client = OpenAIImageClient(client=fake)

    output = asyncio.run(
        client.generate(
            model="gpt-4.1-mini",
            instructions="Only education.",
            prompt="Concept: Mitosis",
            size="1024x1024",
            moderation="low",
            store=False,
        )
    )

    assert output.text == "Here you go."
    assert output.image_base64 == "Zmlyc3Q="
    payload = fake.responses.last_payload
    assert payload["instructions"] == "Only education."
    assert payload["tools"] == [
        {"type": "image_generation", "size": "1024x1024", "moderation": "low"}
    ]


def test_image_client_handles_text_only_response() -> None:
    response = SimpleNamespace(
        output_text="I don't do that.", output=[SimpleNamespace(type="message")]
    )
    client = OpenAIImageClient(client=_FakeOpenAI(response))

    output = asyncio.run(
        client.generate(
            model="gpt-4.1-mini",
            instructions="",
            prompt="meme",
            size="1024x1024",
            moderation="auto",
            store=False,
        )
    )

    assert output.image_base64 is None
    assert output.text == "I don't do that."


def test_clients_close_sdk_sessions() -> None:
    fake = _FakeOpenAI(SimpleNamespace(output_text=""))

    asyncio.run(OpenAIImageClient(client=fake).close())

    assert fake.closed
