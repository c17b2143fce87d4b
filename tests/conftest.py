"""Shared test fixtures."""

import asyncio
import base64
from dataclasses import dataclass, field

import pytest

from eduvis.config import Settings
from eduvis.containers import AppContainer
from eduvis.domain.flows import ImageGenerationOutput
from eduvis.services.explanations import ExplanationClient, ExplanationService
from eduvis.services.forms import FormController
from eduvis.services.visuals import ImageGenerationClient, VisualService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("utf-8")
PHOTO_DATA_URI = "data:image/jpeg;base64," + base64.b64encode(
    b"\xff\xd8\xff" + b"fake-jpeg-body"
).decode("utf-8")


@dataclass
class FakeImageClient(ImageGenerationClient):
    """Fake image client returning a fixed output and recording calls."""

    output: ImageGenerationOutput = field(
        default_factory=lambda: ImageGenerationOutput(
            text="Here is your diagram.", image_base64=PNG_BASE64
        )
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {
                "model": model,
                "instructions": instructions,
                "prompt": prompt,
                "size": size,
                "moderation": moderation,
                "store": store,
            }
        )
        if self.error is not None:
            raise self.error
        return self.output


@dataclass
class BlockingImageClient(FakeImageClient):
    """Fake image client that waits until released."""

    started: asyncio.Event = field(default_factory=asyncio.Event)
    release: asyncio.Event = field(default_factory=asyncio.Event)

    async def generate(self, **kwargs) -> ImageGenerationOutput:  # type: ignore[no-untyped-def]
        self.started.set()
        await self.release.wait()
        return await super().generate(**kwargs)


@dataclass
class FakeExplanationClient(ExplanationClient):
    """Fake explanation client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "explanation": "The diagram shows chloroplasts turning light into sugar."
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def explain(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "store": store,
                "image_data_url": image_data_url,
                "schema": schema,
                "prompt": prompt,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def explanation_client() -> FakeExplanationClient:
    return FakeExplanationClient()


@pytest.fixture
def visual_service(image_client: FakeImageClient) -> VisualService:
    return VisualService(client=image_client, model="gpt-4.1-mini")


@pytest.fixture
def explanation_service(
    explanation_client: FakeExplanationClient,
) -> ExplanationService:
    return ExplanationService(client=explanation_client, model="gpt-4.1-mini")


@pytest.fixture
def form_controller(
    visual_service: VisualService, explanation_service: ExplanationService
) -> FormController:
    return FormController(
        visual_service=visual_service, explanation_service=explanation_service
    )


@pytest.fixture
def container(
    settings: Settings,
    visual_service: VisualService,
    explanation_service: ExplanationService,
    form_controller: FormController,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        visual_service=visual_service,
        explanation_service=explanation_service,
        form_controller=form_controller,
        close_resources=close_resources,
    )
