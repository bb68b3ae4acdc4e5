"""
Flask Application Factory

Creates and configures the Flask application.
"""

from flask import Flask
from flask_cors import CORS

from txncategorizer.api.routes import register_routes, set_service
from txncategorizer.config import get_config
from txncategorizer.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(test_config=None, service=None) -> Flask:
    """Create and configure the Flask application.

    Args:
        test_config: Optional test configuration dict.
        service: Optional prebuilt PredictionService. If omitted the service
            is built from configuration on the first request.

    Returns:
        Configured Flask application.
    """
    config = get_config()

    setup_logging()

    app = Flask(__name__)
    app.config["DEBUG"] = config.api.debug

    if test_config:
        app.config.update(test_config)

    CORS(app, origins=config.api.cors_origins)

    if service is not None:
        set_service(service)

    register_routes(app)

    logger.info("Flask app created")
    return app


def run_server(host: str = None, port: int = None, debug: bool = None):
    """Run the Flask development server.

    Args:
        host: Host to bind to.
        port: Port to bind to.
        debug: Enable debug mode.
    """
    config = get_config()

    host = host or config.api.host
    port = port or config.api.port
    debug = debug if debug is not None else config.api.debug

    app = create_app()

    logger.info("Starting server on %s:%d", host, port)
    # Reloader would start a second process with its own update worker
    app.run(host=host, port=port, debug=debug, use_reloader=False)
