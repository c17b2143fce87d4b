"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from eduvis.adapters.openai_explanation_client import OpenAIExplanationClient
from eduvis.adapters.openai_image_client import OpenAIImageClient
from eduvis.config import Settings
from eduvis.services.explanations import ExplanationService
from eduvis.services.forms import FormController
from eduvis.services.visuals import VisualService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    visual_service: VisualService
    explanation_service: ExplanationService
    form_controller: FormController
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    image_client = OpenAIImageClient.create(resolved_settings.openai_api_key)
    explanation_client = OpenAIExplanationClient.create(
        resolved_settings.openai_api_key
    )
    visual_service = VisualService(
        client=image_client,
        model=resolved_settings.openai_image_model,
        size=resolved_settings.openai_image_size,
        moderation=resolved_settings.openai_image_moderation,
        store=resolved_settings.openai_store,
    )
    explanation_service = ExplanationService(
        client=explanation_client,
        model=resolved_settings.openai_text_model,
        store=resolved_settings.openai_store,
    )
    form_controller = FormController(
        visual_service=visual_service,
        explanation_service=explanation_service,
        history_limit=resolved_settings.history_limit,
        session_ttl_seconds=resolved_settings.session_ttl_seconds,
        max_sessions=resolved_settings.max_sessions,
    )

    async def close_resources() -> None:
        await image_client.close()
        await explanation_client.close()

    return AppContainer(
        settings=resolved_settings,
        visual_service=visual_service,
        explanation_service=explanation_service,
        form_controller=form_controller,
        close_resources=close_resources,
    )
