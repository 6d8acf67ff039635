"""Factory Boy helpers wired to the application's SQLAlchemy session."""

from __future__ import annotations

import factory

from vidshare.core.extensions import db

# Cheap hash used for factory-made accounts
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


def _session():
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting through ``db.session``.

    Objects are committed so that units of work, which use their own
    sessions, can see them.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = _session
        sqlalchemy_session_persistence = "commit"
