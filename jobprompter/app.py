"""Flask application factory for Job Prompter Admin."""

import logging

from flask import Flask
from typing import Optional

from .config import Config
from .api.routes import api_v1, limiter, set_controller
from .api.errors import register_error_handlers
from .utils.logging_config import setup_logging


def create_app(test_config: Optional[dict] = None) -> Flask:
    """Create and configure the dashboard Flask application.

    Args:
        test_config: Optional test configuration dict. A
            ``DASHBOARD_CONTROLLER`` entry replaces the default controller.

    Returns:
        Configured Flask application
    """
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        SECRET_KEY='dev',
        MAX_CONTENT_LENGTH=16 * 1024,  # 16KB max request size
        RATELIMIT_ENABLED=True,
    )

    if test_config:
        app.config.update(test_config)

    app.config.from_pyfile('config.py', silent=True)

    limiter.init_app(app)

    # None means the controller is built from the environment on first use
    set_controller(app.config.get('DASHBOARD_CONTROLLER'))

    app.register_blueprint(api_v1)
    register_error_handlers(app)

    @app.route('/health')
    def root_health():
        return {'status': 'healthy'}, 200

    return app


def main():
    """Run the development server."""
    config = Config.from_env()
    handler = logging.FileHandler(config.logging.file) if config.logging.file else None
    setup_logging(
        level=config.logging.level,
        handler=handler,
        fmt=config.logging.format
    )

    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration: " + "; ".join(errors))

    app = create_app()
    app.run(host=config.api.host, port=config.api.port, debug=config.api.debug)


if __name__ == '__main__':
    main()
