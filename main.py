"""
Todo Core

Main Application Entry Point.
Builds the Flask app via todo_core.app.create_app() and serves it with waitress.
"""

import logging

from waitress import serve

from todo_core.app import create_app

_main_logger = logging.getLogger(__name__)

app = create_app()


if __name__ == "__main__":
    cfg = app.config["TODO_CFG"]
    _main_logger.info("Starting todo-core v%s on %s:%d", cfg.version, cfg.host, cfg.port)
    serve(app, host=cfg.host, port=cfg.port)
