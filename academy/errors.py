import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AcademyError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code = 500
    default_message = 'An unexpected error occurred.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(AcademyError):
    status_code = 400
    default_message = 'Invalid request.'


class NotFoundError(AcademyError):
    status_code = 404
    default_message = 'Resource not found.'


class AuthenticationError(AcademyError):
    """Login rejected by the identity service.

    A 403 carries a ``reason`` telling the client whether a verification
    code must be entered, has expired, or was wrong.
    """

    VERIFICATION_REQUIRED = 'verification_required'
    VERIFICATION_EXPIRED = 'verification_expired'
    VERIFICATION_INVALID = 'verification_invalid'
    REASONS = (VERIFICATION_REQUIRED, VERIFICATION_EXPIRED, VERIFICATION_INVALID)

    default_message = 'Invalid email or password.'

    def __init__(self, message=None, status_code=401, reason=None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

    @property
    def needs_code(self):
        return self.status_code == 403 and self.reason in self.REASONS

    def to_dict(self):
        data = super().to_dict()
        if self.reason:
            data['reason'] = self.reason
        return data


class TransportError(AcademyError):
    status_code = 502
    default_message = 'Could not reach the server. Please try again.'


class StorageFullError(AcademyError):
    """Client-local storage refused a write that would not fit."""

    status_code = 507
    default_message = 'Saved data is full. Remove some saved items and try again.'


def register_error_handlers(app):
    @app.errorhandler(AcademyError)
    def handle_academy_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({'error': 'Uploaded file is too large.'}), 413

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Not found.'}), 404

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return jsonify({'error': error.description}), error.code
        logger.exception('Unhandled error: %s', error)
        return jsonify({'error': AcademyError.default_message}), 500
