import logging

from flask import Flask

from cvstudio.extensions import init_app_extensions
from cvstudio.logging_config import configure_logging
from cvstudio.routes import health_bp, render_bp
from cvstudio.utils.exceptions import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(config: dict = None) -> Flask:
    configure_logging()

    app = Flask(__name__)
    if config:
        app.config.update(config)

    init_app_extensions(app)
    register_error_handlers(app)

    # --- Register API blueprints ---
    app.register_blueprint(health_bp)
    app.register_blueprint(render_bp)

    logger.info("app.created", extra={"blueprints": sorted(app.blueprints)})
    return app


# Gunicorn entrypoint
app = create_app()
