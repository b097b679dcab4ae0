"""Flask application package."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv


def create_app(config_class: type | None = None) -> Flask:
    """Application factory.

    Args:
        config_class: Settings object; defaults to the one selected by APP_ENV.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from studio_bingo.cli import register_cli
    from studio_bingo.config import get_config
    from studio_bingo.db import init_db
    from studio_bingo.error_handlers import register_error_handlers
    from studio_bingo.logging_config import configure_logging
    from studio_bingo.routes.cards import cards_bp
    from studio_bingo.routes.health import health_bp
    from studio_bingo.routes.raffle import raffle_bp
    from studio_bingo.routes.scan import scan_bp
    from studio_bingo.routes.stats import stats_bp
    from studio_bingo.routes.submissions import submissions_bp
    from studio_bingo.services.vision_client import init_vision

    app = Flask(__name__)
    app.config.from_object(config_class or get_config())

    configure_logging(app)
    init_db(app)
    init_vision(app)
    register_error_handlers(app)

    origins = str(app.config.get("CORS_ORIGINS") or "*")
    CORS(
        app,
        resources={r"/api/*": {"origins": [o.strip() for o in origins.split(",")] if origins != "*" else "*"}},
        allow_headers=["Content-Type", "X-Device-Id", "X-Studio-Code"],
        methods=["GET", "POST", "PUT", "OPTIONS"],
    )

    app.register_blueprint(health_bp)
    app.register_blueprint(submissions_bp, url_prefix="/api")
    app.register_blueprint(stats_bp, url_prefix="/api")
    app.register_blueprint(cards_bp, url_prefix="/api")
    app.register_blueprint(scan_bp, url_prefix="/api")
    app.register_blueprint(raffle_bp, url_prefix="/api")

    register_cli(app)

    return app
