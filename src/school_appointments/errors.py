from __future__ import annotations

import logging

from flask import Flask, jsonify

from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    DomainError,
    NotFoundError,
    QRCodeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS = (
    (NotFoundError, 404),
    (BackendError, 502),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (QRCodeError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, code in _STATUS:
        if isinstance(error, cls):
            return code
    return 400


def error_payload(error: DomainError) -> dict:
    payload = {"success": False, "title": error.title, "message": str(error)}
    if isinstance(error, QRCodeError) and error.appointment is not None:
        payload["appointment"] = error.appointment.to_dict()
    return payload


def register(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        code = status_for(e)
        if code >= 500:
            logger.error("%s: %s", e.title, e)
        return jsonify(error_payload(e)), code

    @app.errorhandler(ValueError)
    def handle_value_error(e: ValueError):
        return jsonify({"success": False, "title": "Invalid", "message": str(e)}), 400
