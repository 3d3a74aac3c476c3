"""ASGI entrypoint: ``uvicorn nicherank.api.main:app``."""

from __future__ import annotations

from nicherank.api.app import create_app

app = create_app()
