"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status

from eduvis.api.schemas import DomainsResponse, HistoryResponse, domain_options
from eduvis.api.sessions import get_session_id
from eduvis.api.ui import router as ui_router
from eduvis.app_logging import configure_logging
from eduvis.containers import AppContainer
from eduvis.domain.flows import (
    ExplanationRequest,
    ExplanationResult,
    GenerationResult,
    VisualRequest,
)
from eduvis.domain.forms import FormSnapshot, SubmissionForm, SubmissionOutcome
from eduvis.services.forms import (
    HistoryEntryNotFoundError,
    SubmissionInProgressError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close model clients")

    app = FastAPI(title="EduVis", lifespan=lifespan)
    app.state.container = container

    app.include_router(ui_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/domains")
    async def list_domains() -> DomainsResponse:
        """Return the supported domains in display order."""
        return domain_options()

    @app.post("/api/flows/generate-visual")
    async def generate_visual(
        payload: VisualRequest, request: Request
    ) -> GenerationResult:
        """Run the visual-generation flow directly."""
        state_container: AppContainer = request.app.state.container
        return await state_container.visual_service.generate(payload)

    @app.post("/api/flows/explain-visual")
    async def explain_visual(
        payload: ExplanationRequest, request: Request
    ) -> ExplanationResult:
        """Run the explanation flow directly."""
        state_container: AppContainer = request.app.state.container
        return await state_container.explanation_service.explain(payload)

    @app.post("/api/submit")
    async def submit(
        form: SubmissionForm,
        request: Request,
        session_id: str = Depends(get_session_id),
    ) -> SubmissionOutcome:
        """Submit the form for the caller's session."""
        state_container: AppContainer = request.app.state.container
        try:
            return await state_container.form_controller.submit(session_id, form)
        except SubmissionInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc

    @app.get("/api/state")
    async def form_state(
        request: Request, session_id: str = Depends(get_session_id)
    ) -> FormSnapshot:
        """Return what the form and result panes currently show."""
        state_container: AppContainer = request.app.state.container
        return state_container.form_controller.snapshot(session_id)

    @app.get("/api/history")
    async def history(
        request: Request, session_id: str = Depends(get_session_id)
    ) -> HistoryResponse:
        """Return the session history, most recent first."""
        state_container: AppContainer = request.app.state.container
        return HistoryResponse(
            entries=state_container.form_controller.history(session_id)
        )

    @app.post("/api/history/{position}/select")
    async def select_history(
        position: int,
        request: Request,
        session_id: str = Depends(get_session_id),
    ) -> FormSnapshot:
        """Replay a stored entry into the form without calling a flow."""
        state_container: AppContainer = request.app.state.container
        try:
            return state_container.form_controller.select_history(
                session_id, position
            )
        except HistoryEntryNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except SubmissionInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc

    return app
