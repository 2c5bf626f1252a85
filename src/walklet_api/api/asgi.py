"""ASGI entrypoint for the Walklet API."""

from walklet_api.api.app import create_app
from walklet_api.containers import build_container

app = create_app(build_container())
