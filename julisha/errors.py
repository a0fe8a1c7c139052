"""Error taxonomy and the JSON error handlers that map it to HTTP responses."""

import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PetitionError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 400
    message = "Request could not be processed."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(PetitionError):
    message = "Please fill in all required fields."


class DuplicateSignatureError(PetitionError):
    message = "This ID or phone number has already been used to sign the petition."


class AlreadySignedError(PetitionError):
    message = "This phone number has already been used to sign the petition."


class InvalidOrExpiredCodeError(PetitionError):
    message = "Invalid or expired verification code."


class RateLimitExceeded(PetitionError):
    status_code = 429
    message = "Too many submissions from this network. Please try again later."


class Unauthorized(PetitionError):
    status_code = 401
    message = "Unauthorized"


class StoreUnavailable(PetitionError):
    status_code = 500
    message = "Server error. Please try again later."


class SchemaMissingError(RuntimeError):
    """Raised at startup when the database schema has not been created."""


def error_response(message: str, status_code: int):
    return jsonify(success=False, message=message), status_code


def register_error_handlers(app) -> None:
    """Install handlers so every failure leaves as {success: false, message}."""
    from julisha import db

    @app.errorhandler(PetitionError)
    def handle_petition_error(exc):
        db.session.rollback()
        return error_response(exc.message, exc.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(exc):
        db.session.rollback()
        app.logger.exception("Store operation failed")
        return error_response(StoreUnavailable.message, StoreUnavailable.status_code)

    @app.errorhandler(TimeoutError)
    def handle_timeout(exc):
        db.session.rollback()
        app.logger.exception("Store operation timed out")
        return error_response(StoreUnavailable.message, StoreUnavailable.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code and exc.code < 400:
            return exc
        response, status_code = error_response(exc.description or exc.name, exc.code or 500)
        # Keep werkzeug's headers, e.g. Allow on 405
        for key, value in exc.get_headers():
            if key.lower() != "content-type":
                response.headers[key] = value
        return response, status_code
