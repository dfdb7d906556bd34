from __future__ import annotations

import mimetypes

from flask import Blueprint, current_app, request, send_from_directory
from werkzeug.exceptions import NotFound

from onboarding_api.common.errors import NotFoundError, ValidationError
from onboarding_api.common.http import ok
from onboarding_api.models.employee_record import EmployeeRecord
from onboarding_api.services.documents import list_documents
from onboarding_api.services.sections import clean

bp = Blueprint("documents", __name__)


@bp.post("/get-documents")
def get_documents():
    d = request.get_json(silent=True)
    if not isinstance(d, dict):
        d = request.form
    email = d.get("empEmail")
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("empEmail", "Employee email is required")

    rec = EmployeeRecord.query.filter_by(emp_email=clean(email)).first()
    if not rec:
        current_app.logger.warning("no employee found with email %s", email)
        raise NotFoundError("Employee not found")

    docs = list_documents(rec, request.host_url, current_app.config["UPLOAD_FOLDER"])
    current_app.logger.info("returning %d documents for %s", len(docs), email)
    return ok(docs)


@bp.get("/download/<filename>")
def download(filename: str):
    mimetype = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    try:
        resp = send_from_directory(
            current_app.config["UPLOAD_FOLDER"], filename,
            as_attachment=True, mimetype=mimetype,
        )
    except NotFound:
        raise NotFoundError("File not found")
    current_app.logger.info("download %s", filename)
    return resp


def serve_upload(filename: str):
    """Inline hosting of stored uploads; registered under UPLOAD_URL_PREFIX by the app factory."""
    try:
        resp = send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
    except NotFound:
        raise NotFoundError("File not found")
    resp.headers["Content-Disposition"] = "inline"
    return resp
