"""In-process event sink with optional background delivery."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from threading import Lock

from vidshare.services._shared.ports.event_sink import (
    AccountCreated,
    DomainEvent,
    EventSink,
    VideoIngested,
)

log = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class LocalEventSink(EventSink):
    """
    Dispatch committed events to registered handlers.

    With ``asynchronous=True`` handlers run on a small thread pool so the
    HTTP response never waits for them; otherwise they run inline. Handler
    exceptions are logged and never reach the publisher.

    :param asynchronous: Deliver on a worker pool.
    :param workers: Pool size when asynchronous.
    """

    def __init__(self, *, asynchronous: bool = False, workers: int = 2) -> None:
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._lock = Lock()
        self._executor: ThreadPoolExecutor | None = (
            ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="vidshare-events")
            if asynchronous
            else None
        )

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            handlers = list(self._handlers.get(type(event), ()))
            executor = self._executor
        for handler in handlers:
            if executor is not None:
                try:
                    executor.submit(self._deliver, handler, event)
                except RuntimeError:
                    # Pool already shut down (process exit)
                    log.warning("Event dropped after shutdown", extra={"event": event.name})
            else:
                self._deliver(handler, event)

    def close(self) -> None:
        """Wait for in-flight deliveries and stop the pool."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    @staticmethod
    def _deliver(handler: Handler, event: DomainEvent) -> None:
        try:
            handler(event)
        except Exception:
            log.exception("Event handler failed", extra={"event": event.name})


# ------------------------------ Default handlers ------------------------------


def log_video_ingested(event: DomainEvent) -> None:
    assert isinstance(event, VideoIngested)
    log.info(
        "Video ingested id=%s owner=%s",
        event.video_id,
        event.owner_id,
        extra={"event": event.name},
    )


def log_account_created(event: DomainEvent) -> None:
    assert isinstance(event, AccountCreated)
    log.info("Account created id=%s", event.account_id, extra={"event": event.name})


def register_default_handlers(sink: LocalEventSink) -> None:
    sink.subscribe(VideoIngested, log_video_ingested)
    sink.subscribe(AccountCreated, log_account_created)
