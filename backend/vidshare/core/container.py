"""Explicit wiring of the collaborators shared by every request."""

from __future__ import annotations

import atexit
from dataclasses import dataclass, field

from flask import Flask, current_app

from vidshare.infra.events import LocalEventSink, register_default_handlers
from vidshare.infra.jwt import FlaskJWTTokenCodec
from vidshare.infra.storage import LocalBlobStore
from vidshare.services.accounts.service import AccountService
from vidshare.services.auth.service import AuthService
from vidshare.services.videos.service import VideoService
from vidshare.services._shared.ports.blob_store import BlobStore
from vidshare.services._shared.ports.event_sink import EventSink
from vidshare.services._shared.ports.token_codec import TokenCodec

EXTENSION_KEY = "vidshare"


@dataclass(slots=True)
class ServiceContainer:
    """
    Process-wide collaborators, created once by the application factory.

    Services are cheap and built per call from these members; nothing here
    holds request state.
    """

    token_codec: TokenCodec
    blob_store: BlobStore
    event_sink: EventSink
    password_method: str
    allowed_mimetypes: tuple[str, ...] = ("video/mp4",)
    max_bytes: int = 5 * 1024 * 1024
    _closed: bool = field(default=False, repr=False)

    def auth_service(self) -> AuthService:
        return AuthService(
            token_codec=self.token_codec,
            password_method=self.password_method,
            event_sink=self.event_sink,
        )

    def account_service(self) -> AccountService:
        return AccountService(event_sink=self.event_sink)

    def video_service(self) -> VideoService:
        return VideoService(
            blob_store=self.blob_store,
            event_sink=self.event_sink,
            allowed_mimetypes=self.allowed_mimetypes,
            max_bytes=self.max_bytes,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self.event_sink, "close", None)
        if callable(close):
            close()


def build_container(app: Flask) -> ServiceContainer:
    sink = LocalEventSink(
        asynchronous=bool(app.config.get("EVENTS_ASYNC", False)),
        workers=int(app.config.get("EVENTS_WORKERS", 2)),
    )
    register_default_handlers(sink)
    return ServiceContainer(
        token_codec=FlaskJWTTokenCodec(),
        blob_store=LocalBlobStore(app.config["VIDEO_STORAGE_DIR"]),
        event_sink=sink,
        password_method=app.config["PASSWORD_HASH_METHOD"],
        allowed_mimetypes=tuple(app.config.get("VIDEO_ALLOWED_MIMETYPES", ("video/mp4",))),
        max_bytes=int(app.config.get("VIDEO_MAX_BYTES", 5 * 1024 * 1024)),
    )


def init_app(app: Flask, container: ServiceContainer | None = None) -> ServiceContainer:
    """Attach ``container`` (or a freshly built one) to ``app.extensions``."""
    container = container or build_container(app)
    app.extensions[EXTENSION_KEY] = container
    atexit.register(container.close)
    return container


def get_container() -> ServiceContainer:
    return current_app.extensions[EXTENSION_KEY]
