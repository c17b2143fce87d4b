"""Browser session identification via cookie."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from fastapi import Request, Response

if TYPE_CHECKING:
    from eduvis.containers import AppContainer


def new_session_id() -> str:
    return uuid4().hex


def get_session_id(request: Request, response: Response) -> str:
    """Return the caller's session id, issuing a cookie when missing."""
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.session_cookie_name
    session_id = request.cookies.get(cookie_name)
    if not session_id:
        session_id = new_session_id()
        set_session_cookie(response, cookie_name, session_id)
    return session_id


def set_session_cookie(response: Response, cookie_name: str, session_id: str) -> None:
    response.set_cookie(cookie_name, session_id, httponly=True, samesite="lax")
