"""Pytest fixtures: one application and in-memory database per test.

Units of work check out their own sessions, so tests cannot hide writes
inside a SAVEPOINT; instead every test gets a fresh app whose in-memory
SQLite engine (a single shared connection) disappears with it.
"""

from __future__ import annotations

import os

import pytest

from vidshare.core.config import TestingConfig
from vidshare.core.extensions import db as _db
from vidshare.factory import create_app
from vidshare.services._shared.ports.event_sink import RecordingEventSink


@pytest.fixture()
def app(tmp_path):
    """Create a Flask application configured for testing.

    Yields the app with an application context pushed and the schema
    created; the blob store writes under ``tmp_path``.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)

    class _Config(TestingConfig):
        VIDEO_STORAGE_DIR = str(tmp_path / "videos")

    app = create_app(_Config, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    return _db


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    """The service container attached to ``app``; members may be swapped."""
    return app.extensions["vidshare"]


@pytest.fixture()
def events(container) -> RecordingEventSink:
    """Replace the app's event sink with a recorder."""
    sink = RecordingEventSink()
    container.event_sink = sink
    return sink


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
