import json
import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from flask import Flask, g, jsonify, request
from flask_compress import Compress
from werkzeug.exceptions import HTTPException

from todo_core import __version__
from todo_core.todos.api import get_store, init_todos_api
from todo_core.todos.store import TodoStore

_LOGGER = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD = 2.0  # seconds


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class TodoConfig:
    version: str = __version__

    # Logging
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Responses smaller than this are sent uncompressed.
    compress_min_size: int = 500

    # Request bodies above this are rejected with 413.
    max_content_length: int = 16 * 1024 * 1024


def _load_options_json(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            opts = json.load(fh) or {}
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        _LOGGER.warning("Ignoring unreadable options file %s", path)
        return {}
    if not isinstance(opts, dict):
        _LOGGER.warning("Ignoring options file %s: not a JSON object", path)
        return {}
    return opts


def _build_config() -> TodoConfig:
    opts = _load_options_json(os.environ.get("TODO_OPTIONS_PATH", "/data/options.json"))

    log_level = os.environ.get("TODO_LOG_LEVEL", "").strip().lower()
    if not log_level:
        log_level = str(opts.get("log_level", "info") or "info").strip().lower()

    version = os.environ.get("TODO_VERSION", "").strip() or str(opts.get("version", __version__))
    host = os.environ.get("TODO_HOST", "").strip() or str(opts.get("host", "0.0.0.0"))

    try:
        port = int(os.environ.get("PORT", opts.get("port", 8080)))
    except (TypeError, ValueError):
        _LOGGER.warning("Invalid port setting, falling back to 8080")
        port = 8080

    try:
        compress_min_size = int(opts.get("compress_min_size", 500))
    except (TypeError, ValueError):
        compress_min_size = 500

    try:
        max_content_length = int(opts.get("max_content_length", 16 * 1024 * 1024))
    except (TypeError, ValueError):
        max_content_length = 16 * 1024 * 1024

    return TodoConfig(
        version=version,
        log_level=log_level,
        host=host,
        port=max(1, min(port, 65535)),
        compress_min_size=max(0, compress_min_size),
        max_content_length=max(1024, max_content_length),
    )


def _setup_logging(level: str) -> None:
    lvl = logging.INFO
    if level in ("trace", "debug"):
        lvl = logging.DEBUG
    elif level == "info":
        lvl = logging.INFO
    elif level in ("warn", "warning"):
        lvl = logging.WARNING
    elif level == "error":
        lvl = logging.ERROR

    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.getLogger("werkzeug").setLevel(lvl)
    logging.getLogger("waitress").setLevel(lvl)


def _register_request_hooks(app: Flask) -> Callable[[], dict[str, int]]:
    """Request ids and timing headers on every response.

    Returns a function giving a consistent copy of the request counters.
    """
    metrics = {"total": 0, "slow": 0, "errors": 0}
    lock = threading.Lock()

    def snapshot() -> dict[str, int]:
        with lock:
            return dict(metrics)

    @app.before_request
    def _before_request():
        g.start_time = time.time()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _after_request(response):
        duration = time.time() - getattr(g, "start_time", time.time())
        req_id = getattr(g, "request_id", "-")
        response.headers["X-Request-ID"] = req_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        with lock:
            metrics["total"] += 1
            if response.status_code >= 500:
                metrics["errors"] += 1
            if duration >= SLOW_REQUEST_THRESHOLD:
                metrics["slow"] += 1
                _LOGGER.warning(
                    "SLOW REQUEST [%s] %s %s -> %d (%.2fs)",
                    req_id, request.method, request.path, response.status_code, duration,
                )

        return response

    return snapshot


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def _not_found(_e):
        return jsonify({"error": "not_found"}), 404

    @app.errorhandler(413)
    def _too_large(_e):
        return jsonify({"error": "request_too_large"}), 413

    @app.errorhandler(405)
    def _method_not_allowed(_e):
        return jsonify({"error": "method_not_allowed"}), 405

    @app.errorhandler(Exception)
    def _internal(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.name.lower().replace(" ", "_")}), e.code
        _LOGGER.exception(
            "Unhandled error [%s] %s %s",
            getattr(g, "request_id", "-"), request.method, request.path,
        )
        return jsonify({"error": "internal"}), 500


def create_app(config: TodoConfig | None = None, store: TodoStore | None = None) -> Flask:
    cfg = config or _build_config()
    _setup_logging(cfg.log_level)

    app = Flask(__name__)

    app.config["TODO_CFG"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = cfg.max_content_length

    app.config["COMPRESS_MIMETYPES"] = ["application/json"]
    app.config["COMPRESS_LEVEL"] = 6
    app.config["COMPRESS_MIN_SIZE"] = cfg.compress_min_size
    Compress(app)

    request_metrics = _register_request_hooks(app)
    _register_error_handlers(app)

    init_todos_api(app, store)

    @app.get("/health")
    def health():
        return jsonify({
            "ok": True,
            "time": _now_iso(),
            "todos": len(get_store()),
            "request_metrics": request_metrics(),
        })

    @app.get("/version")
    def version():
        return jsonify({"name": "todo-core", "version": cfg.version, "time": _now_iso()})

    _LOGGER.debug("App created (version %s)", cfg.version)
    return app
