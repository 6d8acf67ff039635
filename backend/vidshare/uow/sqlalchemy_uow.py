"""
SQLAlchemy implementation of UnitOfWork.

Each unit of work checks out its *own* session (and therefore its own pooled
connection) instead of sharing the request-scoped ``db.session``. The
lifecycle is always::

    acquire -> begin -> steps -> commit -> release -> publish events
                              \\-> rollback -> release -> re-raise

and the release step runs exactly once per acquisition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import event
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from vidshare.core.extensions import new_session
from vidshare.repositories import (
    AccountRepository,
    RefreshCredentialRepository,
    VideoRepository,
)
from vidshare.services._shared.errors import ResourceUnavailableError
from vidshare.services._shared.ports.event_sink import DomainEvent, EventSink
from vidshare.uow.base import UnitOfWork

log = logging.getLogger(__name__)

T = TypeVar("T")


class _SessionScope:
    """Acquire/release bookkeeping shared by the writer and reader scopes."""

    def __init__(self, *, session_factory: Callable[[], Session] = new_session) -> None:
        self._session_factory = session_factory
        self.session: Session | None = None
        self._released = True

    def _acquire(self) -> Session:
        session = self._session_factory()
        self.session = session
        self._released = False
        try:
            session.begin()
            # Check a connection out now so pool exhaustion surfaces here,
            # before any step runs.
            session.connection()
        except PoolTimeoutError as exc:
            self._release()
            log.error("Connection pool exhausted", extra={"error_type": type(exc).__name__})
            raise ResourceUnavailableError() from exc
        except Exception:
            self._release()
            raise
        self.accounts = AccountRepository(session)
        self.refresh_credentials = RefreshCredentialRepository(session)
        self.videos = VideoRepository(session)
        return session

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        if self.session is not None:
            self.session.close()


class SQLAlchemyUnitOfWork(_SessionScope, UnitOfWork):
    """
    Read-write unit of work.

    :param session_factory: Returns a fresh, unbound-to-request session.
    :param event_sink: Receives :meth:`add_event` payloads after commit.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Session] = new_session,
        event_sink: EventSink | None = None,
    ) -> None:
        super().__init__(session_factory=session_factory)
        self._event_sink = event_sink
        self._pending: list[DomainEvent] = []

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        self._pending = []
        self._acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        committed = False
        try:
            if exc_type is None:
                try:
                    self.commit()
                    committed = True
                except Exception as commit_exc:
                    self._rollback_after(commit_exc)
                    raise
            else:
                self._rollback_after(exc)
        finally:
            self._release()

        if committed:
            self._publish_pending()

    def add_event(self, event: DomainEvent) -> None:
        """Queue ``event``; it is published only if the commit succeeds."""
        self._pending.append(event)

    def commit(self) -> None:
        assert self.session is not None
        self.session.commit()

    def rollback(self) -> None:
        assert self.session is not None
        self.session.rollback()

    def _rollback_after(self, cause: BaseException | None) -> None:
        log.warning(
            "Rolling back unit of work",
            extra={"error_type": type(cause).__name__ if cause is not None else None},
        )
        self._pending = []
        try:
            self.rollback()
        except Exception:
            # The caller sees the triggering error, never the rollback failure.
            log.exception("Rollback failed")

    def _publish_pending(self) -> None:
        events, self._pending = self._pending, []
        if self._event_sink is None:
            return
        for evt in events:
            self._event_sink.publish(evt)


class SQLAlchemyReadOnlyUnitOfWork(_SessionScope, UnitOfWork):
    """
    Read-only unit of work.

    Blocks ORM flushes of new/dirty/deleted objects and always rolls back on
    exit. ``commit()`` is disallowed. Loaded instances are expunged before the
    rollback, so read results stay usable (detached) after the block.
    """

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        session = self._acquire()
        event.listen(session, "before_flush", _block_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if session is not None:
                event.remove(session, "before_flush", _block_flush)
                session.expunge_all()
                session.rollback()
        finally:
            self._release()

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        assert self.session is not None
        self.session.rollback()

    def add_event(self, event: DomainEvent) -> None:
        raise RuntimeError("Read-only UnitOfWork cannot emit events.")


def _block_flush(session, flush_context, instances) -> None:
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")


class TransactionalCommandExecutor:
    """
    Run a closure of steps inside one read-write unit of work.

    ``execute`` returns the closure's value after the commit, or re-raises
    the closure's error unchanged after the rollback.

    :param uow_factory: Builds a fresh :class:`SQLAlchemyUnitOfWork` per call.
    """

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(self, steps: Callable[[SQLAlchemyUnitOfWork], T]) -> T:
        with self._uow_factory() as uow:
            return steps(uow)
