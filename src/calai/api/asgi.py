"""ASGI entrypoint for the calai API."""

from calai.api.app import create_app
from calai.containers import build_container

app = create_app(build_container())
