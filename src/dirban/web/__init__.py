"""JSON HTTP API for dirban boards."""

import logging

from flask import Flask, request

from dirban.config import Settings, read_config
from dirban.services import Services, build_services
from dirban.web.api import api
from dirban.web.errors import register_error_handlers
from dirban.web.uploads import uploads

logger = logging.getLogger(__name__)

# Room for the multipart framing around an image and its thumbnail
_FORM_OVERHEAD = 64 * 1024


def create_app(settings: Settings | None = None, services: Services | None = None) -> Flask:
    """Build the Flask app over explicitly constructed services."""
    if services is None:
        services = build_services(settings or read_config())
    settings = services.settings

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = 2 * settings.max_upload_bytes + _FORM_OVERHEAD
    app.json.sort_keys = False
    app.extensions["dirban"] = services

    app.register_blueprint(api)
    app.register_blueprint(uploads)
    register_error_handlers(app)

    @app.after_request
    def log_request(response):
        logger.debug("%s %s %s", request.method, request.path, response.status_code)
        return response

    return app


__all__ = ["create_app"]
