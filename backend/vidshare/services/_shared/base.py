# vidshare/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from sqlalchemy.orm import Session

from vidshare.core.extensions import new_session
from vidshare.repositories.base import Pagination
from vidshare.services._shared.ports.event_sink import EventSink
from vidshare.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
    TransactionalCommandExecutor,
)

T = TypeVar("T")


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only units of work and transactional
      commands.
    * Offer shared validation helpers (pagination).
    * Keep services thin and orchestration-only, with no web leakage.

    Notes
    -----
    - Services never touch the request-scoped ``db.session``; every
      operation checks out its own session through a unit of work.
    - Errors raised inside a command are re-raised unchanged after rollback;
      services do not translate them to HTTP.
    """

    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        *,
        event_sink: EventSink | None = None,
        session_factory: Callable[[], Session] = new_session,
    ) -> None:
        """
        Initialize the base service.

        :param event_sink: Receives events queued by commands, after commit.
        :param session_factory: Source of dedicated sessions.
        """
        self.event_sink = event_sink
        self.session_factory = session_factory

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(
            session_factory=self.session_factory, event_sink=self.event_sink
        )

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(session_factory=self.session_factory)

    def run_command(self, steps: Callable[[SQLAlchemyUnitOfWork], T]) -> T:
        """
        Execute ``steps`` as one transactional command.

        :param steps: Closure receiving the open unit of work.
        :returns: Whatever ``steps`` returns, after the commit.
        """
        return TransactionalCommandExecutor(self.rw_uow).execute(steps)

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """
        Build a Pagination value object with basic clamping.

        :param page: 1-based page number.
        :param limit: Page size, capped at :attr:`MAX_PAGE_SIZE`.
        :param sort: Sort tokens like ``["-created_at", "title"]``.
        """
        page = max(1, int(page))
        limit = min(max(1, int(limit)), self.MAX_PAGE_SIZE)
        return Pagination(page=page, limit=limit, sort=list(sort or []))
