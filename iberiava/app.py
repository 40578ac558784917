# iberiava/app.py
from __future__ import annotations
import logging
import sys
from flask import Flask, jsonify, render_template
from flask_cors import CORS
from .config import Config, config
from .errors import BookingError
from .routes.api import api, limiter
from .routes.pages import pages
from .store import COLLECTIONS, CollectionStore

log = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # No-op for handlers if the host (gunicorn, pytest) already set some up
    logging.basicConfig(
        stream=sys.stdout,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))
    for name in ("httpx", "httpcore", "werkzeug"):
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(cfg: Config = config) -> Flask:
    configure_logging(cfg.LOG_LEVEL)

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=cfg.SECRET_KEY,
        DEBUG=cfg.DEBUG,
        RATELIMIT_ENABLED=cfg.RATELIMIT_ENABLED,
        RATELIMIT_STORAGE_URI="memory://",
    )
    app.extensions["iberiava.config"] = cfg
    app.extensions["iberiava.store"] = CollectionStore(cfg.DATA_DIR)

    # Rate limiter: the limiter object lives in the api module, bound here
    limiter.init_app(app)

    # CORS (optional)
    if cfg.ENABLE_CORS:
        CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.register_blueprint(api)
    app.register_blueprint(pages)

    @app.errorhandler(BookingError)
    def booking_error(e: BookingError):
        return render_template("message.html", message=e.message), e.status

    # Health
    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.get("/readyz")
    def readyz():
        store: CollectionStore = app.extensions["iberiava.store"]
        counts = {}
        try:
            for name in COLLECTIONS:
                counts[name] = len(store.read(name))
        except BookingError as e:
            log.error("store not ready: %s", e)
            return jsonify({"ok": False, "error": e.code}), 503
        return {"ok": True, "collections": counts}

    log.info("app ready (data dir %s)", cfg.DATA_DIR)
    return app


app = create_app()
