"""Flask application factory.

Kept separate from `alephcode/__init__.py` so importing the computation
modules (`alephcode.analysis`, `alephcode.layout`, ...) doesn't require Flask.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask

from .config import Config
from .extensions import api, get_worker, init_worker
from .letters import Mode
from .routes import blp


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("alephcode").setLevel(level)


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    # Fail at startup rather than on the first request.
    Mode.parse(app.config["DEFAULT_MODE"])

    configure_logging(app.config["LOG_LEVEL"])
    app.json.ensure_ascii = False

    init_worker(app)
    api.init_app(app)

    api.register_blueprint(blp)

    @app.get("/")
    def index():
        return {
            "service": "Aleph Code API",
            "swagger_ui": "/swagger-ui",
            "openapi_json": "/openapi.json",
            "endpoints": [
                "/letters",
                "/input",
                "/analyze",
                "/words/values",
                "/layout",
                "/health",
            ],
        }

    @app.get("/health")
    def health():
        """
        Production-safe health endpoint.
        Reports whether analyses run in the background process or inline.
        """
        worker = get_worker()
        return {"ok": True, "worker_process": not worker.in_process, "worker_crashed": worker.crashed}

    return app
