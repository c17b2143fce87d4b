"""ASGI entrypoint for the EduVis API."""

from eduvis.api.app import create_app
from eduvis.containers import build_container

app = create_app(build_container())
