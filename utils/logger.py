"""
Logging Setup

Provides centralized logging configuration for the site with structured
output and request tracking. Service modules log through their own
module loggers, which share the same handler.
"""

import logging
import sys
from flask import request, has_request_context


LOG_FORMAT = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
SERVICE_LOGGERS = ('services',)


def setup_logger(app):
    """
    Configure logging for the Flask application.

    Sets up:
    - Structured log format with timestamps
    - Console output to stdout
    - Request logging for all incoming HTTP requests
    - Appropriate log level based on environment

    Args:
        app: Flask application instance
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    level = logging.DEBUG if app.debug else logging.INFO

    app.logger.handlers = [handler]
    app.logger.setLevel(level)
    # Prevent duplicate logs from propagating
    app.logger.propagate = False

    for name in SERVICE_LOGGERS:
        service_logger = logging.getLogger(name)
        # One handler per logger even when several apps are created (tests)
        service_logger.handlers = [handler]
        service_logger.setLevel(level)
        service_logger.propagate = False

    @app.before_request
    def log_request_info():
        """Log incoming request details."""
        if has_request_context() and not app.config.get('STATIC_BUILD'):
            app.logger.info(
                f"Request: {request.method} {request.path} "
                f"from {request.remote_addr}"
            )

    @app.after_request
    def log_response_info(response):
        """Log response status."""
        if has_request_context() and not app.config.get('STATIC_BUILD'):
            app.logger.info(
                f"Response: {response.status_code} for "
                f"{request.method} {request.path}"
            )
        return response

    app.logger.info(f"Logging configured - Level: {logging.getLevelName(app.logger.level)}")

    return app
