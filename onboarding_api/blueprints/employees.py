from __future__ import annotations

from flask import Blueprint, current_app, request

from onboarding_api.common.errors import NotFoundError
from onboarding_api.common.http import ok
from onboarding_api.common.profiles import current_profile
from onboarding_api.extensions import db
from onboarding_api.models.employee_record import EmployeeRecord
from onboarding_api.services.documents import project_record, project_records, record_to_dict
from onboarding_api.services.intake import submit_employee
from onboarding_api.services.uploads import collect_uploads

bp = Blueprint("employees", __name__)


def _base_url() -> str:
    return request.host_url.rstrip("/")


# Create (multipart form + documents)
@bp.post("/save-employee")
def save_employee():
    cfg = current_app.config
    uploads = collect_uploads(request.files, cfg["MAX_UPLOAD_BYTES"])
    current_app.logger.info(
        "save-employee: %d form fields, files=%s", len(request.form), sorted(uploads)
    )
    rec = submit_employee(
        request.form,
        uploads,
        folder=cfg["UPLOAD_FOLDER"],
        url_prefix=cfg["UPLOAD_URL_PREFIX"],
        profile=current_profile(),
    )
    return ok({"employeeId": rec.id}, status=201)


# List (newest first)
@bp.get("/employees")
def list_employees():
    rows = (
        EmployeeRecord.query
        .order_by(EmployeeRecord.created_at.desc(), EmployeeRecord.id.desc())
        .all()
    )
    current_app.logger.info("found %d employees", len(rows))
    return ok(project_records((record_to_dict(r) for r in rows), _base_url()))


# Get
@bp.get("/employees/<int:eid>")
def get_employee(eid: int):
    rec = db.session.get(EmployeeRecord, eid)
    if not rec:
        raise NotFoundError("Employee not found")
    return ok(project_record(record_to_dict(rec), _base_url()))
