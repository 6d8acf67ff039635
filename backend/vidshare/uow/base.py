"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from vidshare.services._shared.ports.event_sink import DomainEvent


class UnitOfWork(ABC):
    """
    Coordinates a transactional boundary for a use-case.

    Responsibilities:
    - Provide repositories bound to the same session/transaction.
    - Commit on success, rollback on error, release the handle on every path.
    - Hold domain events until the commit has succeeded.
    """

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
    @abstractmethod
    def add_event(self, event: DomainEvent) -> None: ...
