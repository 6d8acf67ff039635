"""Unit of Work abstractions and concrete implementations.

This package re-exports the SQLAlchemy-backed units of work and the command
executor that service layers depend on.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
    TransactionalCommandExecutor,
)

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
    "TransactionalCommandExecutor",
]
