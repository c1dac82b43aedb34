"""
API error taxonomy and the top-level translation into JSON responses.

Handlers raise these exceptions instead of building error responses
themselves; ``register_error_handlers`` turns every one of them (plus
marshmallow, SQLAlchemy and werkzeug errors) into the shape

    {"success": false, "message": "...", "errors": [...]}
"""
from flask import jsonify, current_app
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from realty_admin.extensions import db


class ApiError(Exception):
    status_code = 500
    message = 'Server Error'

    def __init__(self, message=None, errors=None, status_code=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code
        self.errors = errors

    def to_dict(self):
        payload = {"success": False, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationFailed(ApiError):
    status_code = 400
    message = 'Validation failed'


class Unauthenticated(ApiError):
    status_code = 401
    message = 'Not authorized'


class AccountDisabled(ApiError):
    status_code = 401
    message = 'Account has been deactivated'


class Forbidden(ApiError):
    status_code = 403
    message = 'Access denied'


class NotFound(ApiError):
    status_code = 404
    message = 'Resource not found'


class Conflict(ApiError):
    status_code = 400
    message = 'Resource already exists'


class ServerError(ApiError):
    status_code = 500
    message = 'Server Error'


def validation_errors_to_list(messages, data=None, prefix=''):
    """Flatten marshmallow's nested ``messages`` dict into [{field, message, value}]."""
    errors = []
    data = data if isinstance(data, dict) else {}
    for field, value in messages.items():
        name = f"{prefix}{field}"
        if isinstance(value, dict):
            errors.extend(validation_errors_to_list(value, data.get(field), prefix=f"{name}."))
            continue
        if not isinstance(value, (list, tuple)):
            value = [value]
        for message in value:
            if isinstance(message, dict):
                errors.extend(validation_errors_to_list(message, data.get(field), prefix=f"{name}."))
                continue
            errors.append({
                "field": name,
                "message": str(message),
                "value": data.get(field) if isinstance(data.get(field), (str, int, float, bool)) else None,
            })
    return errors


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            current_app.logger.error(f"API error: {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err):
        errors = validation_errors_to_list(err.messages, err.data)
        current_app.logger.debug(f"Validation failed: {errors}")
        return jsonify(ValidationFailed(errors=errors).to_dict()), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err):
        db.session.rollback()
        current_app.logger.warning(f"Integrity error: {err.orig}")
        return jsonify(Conflict('Duplicate or conflicting value').to_dict()), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(err):
        return jsonify({"success": False, "message": "File size too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"success": False, "message": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled server error: {err}")
        return jsonify(ServerError().to_dict()), 500
