"""Error taxonomy shared by services and blueprints.

Services raise these; the handlers registered here turn them into JSON
responses so routes never have to catch them.
"""

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from champions import db


class ApiError(Exception):
    status_code = 400

    def __init__(self, message, field=None, details=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self):
        payload = {'error': self.message}
        if self.field:
            payload['field'] = self.field
        if self.details is not None:
            payload['details'] = self.details
        return payload


class ValidationError(ApiError):
    status_code = 400


class AuthenticationRequired(ApiError):
    status_code = 401

    def __init__(self, message='Authentication required', **kwargs):
        super().__init__(message, **kwargs)


class AccessDenied(ApiError):
    status_code = 403

    def __init__(self, message='Access denied', **kwargs):
        super().__init__(message, **kwargs)


class NotFound(ApiError):
    status_code = 404


class BusinessRuleViolation(ApiError):
    status_code = 409


class InsufficientFunds(BusinessRuleViolation):
    def __init__(self, balance, required):
        super().__init__('Not enough stars', details={'balance': balance, 'required': required})
        self.balance = balance
        self.required = required


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        db.session.rollback()
        current_app.logger.exception(f"[storage-error] {error.__class__.__name__}")
        return jsonify({'error': 'Something went wrong, please try again'}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code
