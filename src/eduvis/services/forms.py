"""Form state controller that routes submissions to the flows."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Literal

from eduvis.domain.domains import DEFAULT_DOMAIN, Domain
from eduvis.domain.flows import (
    UNEXPECTED_ERROR_MESSAGE,
    ExplanationRequest,
    VisualRequest,
    is_error_result,
)
from eduvis.domain.forms import (
    FormSnapshot,
    FormStatus,
    SubmissionForm,
    SubmissionOutcome,
)
from eduvis.domain.history import (
    ExplanationHistoryEntry,
    HistoryEntry,
    VisualHistoryEntry,
)
from eduvis.services.explanations import ExplanationService
from eduvis.services.history import HISTORY_LIMIT, SessionHistory
from eduvis.services.visuals import VisualService

_logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 3600
MAX_SESSIONS = 1000


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class FormControllerError(Exception):
    """Base error for form controller failures."""


class SubmissionInProgressError(FormControllerError):
    """Raised when a session submits while a request is still in flight."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"A request is already in progress for session {session_id}")
        self.session_id = session_id


class HistoryEntryNotFoundError(FormControllerError):
    """Raised when replaying a history position that does not exist."""

    def __init__(self, position: int) -> None:
        super().__init__(f"No history entry at position {position}")
        self.position = position


@dataclass
class FormSession:
    """Mutable per-session form state."""

    history: SessionHistory
    expires_at: datetime
    status: FormStatus = FormStatus.IDLE
    prompt: str = ""
    domain: Domain = DEFAULT_DOMAIN
    photo_data_uri: str | None = None
    generated_content: str | None = None

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            status=self.status,
            prompt=self.prompt,
            domain=self.domain,
            photo_data_uri=self.photo_data_uri,
            generated_content=self.generated_content,
            is_error=is_error_result(self.generated_content),
            history_size=len(self.history),
        )


@dataclass
class FormController:
    """Tracks form state per session and invokes one flow per submission."""

    visual_service: VisualService
    explanation_service: ExplanationService
    history_limit: int = HISTORY_LIMIT
    session_ttl_seconds: int = SESSION_TTL_SECONDS
    max_sessions: int = MAX_SESSIONS
    clock: Callable[[], datetime] = _utcnow
    _sessions: dict[str, FormSession] = field(
        default_factory=dict, init=False, repr=False
    )

    def session(self, session_id: str) -> FormSession:
        """Return the state for a session, creating it on first use.

        Every access pushes the session's expiry forward.
        """
        self._evict_expired()
        state = self._sessions.get(session_id)
        if state is None:
            self._make_room()
            state = FormSession(
                history=SessionHistory(self.history_limit),
                expires_at=self._next_expiry(),
            )
            self._sessions[session_id] = state
        else:
            state.expires_at = self._next_expiry()
        return state

    def find(self, session_id: str) -> FormSession | None:
        """Return live state for a session without creating any."""
        state = self._sessions.get(session_id)
        if state is None:
            return None
        if self._is_expired(state):
            self._sessions.pop(session_id, None)
            return None
        return state

    def discard(self, session_id: str) -> None:
        """Forget a session and its history."""
        self._sessions.pop(session_id, None)

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def snapshot(self, session_id: str) -> FormSnapshot:
        state = self.find(session_id)
        if state is None:
            return FormSnapshot(
                status=FormStatus.IDLE, prompt="", domain=DEFAULT_DOMAIN
            )
        return state.snapshot()

    def history(self, session_id: str) -> list[HistoryEntry]:
        """Return the session history, most recent first."""
        state = self.find(session_id)
        if state is None:
            return []
        return state.history.entries()

    def _next_expiry(self) -> datetime:
        return self.clock() + timedelta(seconds=self.session_ttl_seconds)

    def _is_expired(self, state: FormSession) -> bool:
        # In-flight sessions never expire.
        return state.status is not FormStatus.LOADING and (
            self.clock() >= state.expires_at
        )

    def _evict_expired(self) -> None:
        expired = [
            session_id
            for session_id, state in self._sessions.items()
            if self._is_expired(state)
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            _logger.info("Evicted expired sessions: count=%s", len(expired))

    def _make_room(self) -> None:
        idle = [
            (state.expires_at, session_id)
            for session_id, state in self._sessions.items()
            if state.status is not FormStatus.LOADING
        ]
        overflow = len(self._sessions) - self.max_sessions + 1
        for _, session_id in sorted(idle)[: max(overflow, 0)]:
            del self._sessions[session_id]

    async def submit(
        self, session_id: str, form: SubmissionForm
    ) -> SubmissionOutcome:
        """Run the flow selected by the form and settle the session."""
        state = self.session(session_id)
        if state.status is FormStatus.LOADING:
            raise SubmissionInProgressError(session_id)

        kind: Literal["visual", "explanation"]
        kind = "explanation" if form.has_photo else "visual"
        state.status = FormStatus.LOADING
        state.generated_content = None
        state.domain = form.domain
        if kind == "explanation":
            state.prompt = ""
            state.photo_data_uri = form.photo_data_uri
        else:
            state.prompt = form.prompt
            state.photo_data_uri = None

        try:
            content = await self._invoke(kind, form)
        except Exception:
            _logger.exception(
                "Flow invocation failed", extra={"kind": kind, "session": session_id}
            )
            content = UNEXPECTED_ERROR_MESSAGE
        finally:
            state.status = FormStatus.SETTLED
            state.expires_at = self._next_expiry()

        state.generated_content = content
        recorded = not is_error_result(content)
        if recorded:
            state.history.add(self._history_entry(kind, form, content))
        return SubmissionOutcome(
            kind=kind,
            content=content,
            is_error=not recorded,
            recorded=recorded,
            state=state.snapshot(),
        )

    def select_history(self, session_id: str, position: int) -> FormSnapshot:
        """Repopulate the form and result from a stored entry."""
        state = self.find(session_id)
        if state is None:
            raise HistoryEntryNotFoundError(position)
        if state.status is FormStatus.LOADING:
            raise SubmissionInProgressError(session_id)
        state.expires_at = self._next_expiry()
        entry = state.history.get(position)
        if entry is None:
            raise HistoryEntryNotFoundError(position)

        state.domain = entry.domain
        if isinstance(entry, VisualHistoryEntry):
            state.prompt = entry.prompt
            state.photo_data_uri = None
            state.generated_content = entry.image
        else:
            state.prompt = ""
            state.photo_data_uri = entry.photo_data_uri
            state.generated_content = entry.explanation
        state.status = FormStatus.SETTLED
        return state.snapshot()

    async def _invoke(
        self, kind: Literal["visual", "explanation"], form: SubmissionForm
    ) -> str:
        if kind == "explanation":
            explained = await self.explanation_service.explain(
                ExplanationRequest(
                    photo_data_uri=form.photo_data_uri, domain=form.domain
                )
            )
            return explained.explanation
        generated = await self.visual_service.generate(
            VisualRequest(prompt=form.prompt, domain=form.domain)
        )
        return generated.image

    @staticmethod
    def _history_entry(
        kind: Literal["visual", "explanation"], form: SubmissionForm, content: str
    ) -> HistoryEntry:
        if kind == "explanation":
            return ExplanationHistoryEntry(
                photo_data_uri=form.photo_data_uri,
                domain=form.domain,
                explanation=content,
            )
        return VisualHistoryEntry(prompt=form.prompt, domain=form.domain, image=content)
