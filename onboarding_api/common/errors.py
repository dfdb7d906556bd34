# onboarding_api/common/errors.py
from flask import Blueprint, current_app
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from onboarding_api.common.http import fail

bp_errors = Blueprint("errors", __name__)


class APIError(Exception):
    """Base API error; rendered through the common failure envelope."""
    status_code = 400
    code = "API_ERROR"

    def __init__(self, message, status_code=None, code=None, field=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.field = field
        self.payload = payload


class ValidationError(APIError):
    """A submitted field (or file) is missing, malformed or out of range."""
    code = "VALIDATION_ERROR"

    def __init__(self, field, reason):
        super().__init__(reason, field=field)
        self.reason = reason


class ConflictError(APIError):
    """Unique identity (email / Aadhaar / PAN) already registered."""
    code = "CONFLICT"

    LABELS = {"emp_email": "Email", "emp_aadhaar": "Aadhaar", "emp_pan": "PAN"}

    def __init__(self, field):
        super().__init__(f"{self.LABELS.get(field, 'Field')} already exists", field=field)


class UploadError(APIError):
    code = "UPLOAD_ERROR"


class NotFoundError(APIError):
    status_code = 404
    code = "NOT_FOUND"


class StorageError(APIError):
    status_code = 500
    code = "STORAGE_ERROR"


class DatabaseError(APIError):
    status_code = 500
    code = "DATABASE_ERROR"


def _detail(payload):
    if payload and current_app.config.get("EXPOSE_ERROR_DETAIL"):
        return payload
    return None


@bp_errors.app_errorhandler(APIError)
def _api_error(e: APIError):
    if e.status_code >= 500:
        current_app.logger.error("%s: %s (%s)", e.code, e.message, e.payload)
    return fail(message=e.message, status=e.status_code, code=e.code,
                detail=_detail(e.payload), field=e.field)

@bp_errors.app_errorhandler(HTTPException)
def _http(e: HTTPException):
    return fail(message=e.description or e.name, status=e.code or 400)

@bp_errors.app_errorhandler(SQLAlchemyError)
def _database(e: SQLAlchemyError):
    current_app.logger.exception("database error")
    return fail(message="Database error", status=500, code="DATABASE_ERROR",
                detail=_detail(str(getattr(e, "orig", None) or e)))

@bp_errors.app_errorhandler(Exception)
def _unhandled(e: Exception):
    current_app.logger.exception(e)
    return fail(message="Internal Server Error", status=500, code="SERVER_ERROR",
                detail=_detail(str(e)))
