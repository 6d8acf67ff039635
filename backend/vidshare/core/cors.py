"""CORS policy for the API prefix."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def init_app(app: Flask) -> None:
    """Allow ``CORS_ORIGINS`` on ``<API_BASE_PREFIX>/*``.

    A blank value or ``"*"`` allows any origin. Bearer tokens travel in the
    ``Authorization`` header, so credentials (cookies) are never enabled.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": "*" if origins in ([], ["*"]) else origins}},
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        supports_credentials=False,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
