"""
project: Delve
module: __init__.py
License: MIT

Flask application factory.

Wires the level API blueprint into a Flask app. Configuration is sourced from
environment variables (optionally loaded from a local `.env`) with defaults
suitable for development; callers and tests may pass overrides.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

from delve.mapgen import MapGenConfigError

# Load .env if present so MAPGEN_* defaults can be supplied without exporting
# shell variables during development.
load_dotenv()


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    return int(raw) if raw else default


def create_app(overrides: dict | None = None) -> Flask:
    """Build a Flask app with the level API registered."""
    app = Flask(__name__, instance_relative_config=True)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only deployments keep working without instance/ (no file logging)
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        MAPGEN_WIDTH=_env_int("MAPGEN_WIDTH", 151),
        MAPGEN_HEIGHT=_env_int("MAPGEN_HEIGHT", 151),
        MAPGEN_RENDER_WIDTH=_env_int("MAPGEN_RENDER_WIDTH", 45),
        MAPGEN_RENDER_HEIGHT=_env_int("MAPGEN_RENDER_HEIGHT", 15),
        MAPGEN_STEP_DELAY=float(os.getenv("MAPGEN_STEP_DELAY", "0") or 0),
        MAPGEN_DISABLE_CACHE=os.getenv("MAPGEN_DISABLE_CACHE", "0") == "1",
        MAPGEN_CACHE_MAX=_env_int("MAPGEN_CACHE_MAX", 8),
    )
    if overrides:
        app.config.update(overrides)

    from delve.routes.level_api import bp_level

    app.register_blueprint(bp_level)

    @app.errorhandler(MapGenConfigError)
    def bad_settings(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
