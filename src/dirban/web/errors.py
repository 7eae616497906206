"""Turn exceptions into JSON error responses."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from dirban.errors import DirbanError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Internal server error"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DirbanError)
    def handle_dirban_error(e: DirbanError):
        if e.status >= 500:
            logger.error("%s: %s", type(e).__name__, e.message)
            return jsonify({"error": GENERIC_MESSAGE}), e.status
        return jsonify({"error": e.message or type(e).__name__}), e.status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        return jsonify({"error": GENERIC_MESSAGE}), 500
