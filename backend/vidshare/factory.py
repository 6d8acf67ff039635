"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from flask import Flask

from vidshare.core.config import BaseConfig, get_config
from vidshare.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    container=None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, import path, or ``None`` for ``APP_ENV``.
    :param container: Optional pre-built :class:`ServiceContainer`; the
        default wires the JWT codec, local blob store and local event sink.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from vidshare.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from vidshare.core import cors

    cors.init_app(app)

    from vidshare.core import container as service_container

    service_container.init_app(app, container)

    from vidshare.api import init_app as init_api

    init_api(app)

    from vidshare.core import errors

    errors.init_app(app)

    from vidshare import cli as vidshare_cli

    vidshare_cli.init_app(app)

    return app
