"""
API error taxonomy and the Flask handlers that render it as JSON.

Views and services raise these exceptions; nothing below the view layer
builds HTTP responses itself.
"""
from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500
    kind = 'api_error'
    default_message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message, 'error': self.kind}


class ValidationError(ApiError):
    status_code = 400
    kind = 'validation_error'
    default_message = 'Invalid request'


class AuthError(ApiError):
    status_code = 401
    kind = 'auth_error'
    default_message = 'Invalid credentials'


class NotFoundError(ApiError):
    status_code = 404
    kind = 'not_found'
    default_message = 'Not found'


class MethodNotAllowedError(ApiError):
    status_code = 405
    kind = 'method_not_allowed'
    default_message = 'Method not allowed'


class ConflictError(ApiError):
    status_code = 409
    kind = 'conflict'
    default_message = 'Resource already exists'


class StoreError(ApiError):
    status_code = 500
    kind = 'store_error'
    default_message = 'Internal server error'


def _render(error):
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app, db):
    """Attach JSON error handlers for the API taxonomy, HTTP errors and store failures."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
            current_app.logger.error(f'{error.kind}: {error.message}')
        return _render(error)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        current_app.logger.exception('Unhandled database error')
        return _render(StoreError())

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _render(MethodNotAllowedError())

    @app.errorhandler(429)
    def ratelimit_handler(error):
        return {'message': 'Rate limit exceeded. Please try again later.', 'error': 'rate_limited'}, 429

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return {'message': error.description, 'error': error.name.lower().replace(' ', '_')}, error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return _render(StoreError())
