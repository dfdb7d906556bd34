from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.datastructures import FileStorage

from onboarding_api.common.errors import (
    APIError, ConflictError, DatabaseError, ValidationError,
)
from onboarding_api.common.profiles import IntakeProfile, STRICT
from onboarding_api.extensions import db
from onboarding_api.models.employee_record import EmployeeRecord
from onboarding_api.services import timeline
from onboarding_api.services.field_rules import (
    OPTIONAL_RULES, REQUIRED_RULES, check_fields, is_blank, parse_date,
)
from onboarding_api.services.sections import (
    EXPERIENCED, assemble_educations, assemble_employments, clean,
)
from onboarding_api.services.uploads import UploadBatch

log = logging.getLogger(__name__)

UNIQUE_FIELDS = ("emp_email", "emp_aadhaar", "emp_pan")

MOBILE_FIELDS = ("emp_mobile", "emp_alt_mobile", "primary_contact_mobile", "secondary_contact_mobile")

TEXT_FIELDS = (
    "emp_name", "emp_email", "emp_gender", "emp_marital_status", "emp_mobile",
    "emp_alt_mobile", "emp_aadhaar", "emp_pan", "emp_address", "emp_city", "emp_state",
    "emp_zipcode", "emp_bank", "emp_account", "emp_ifsc", "emp_bank_branch",
    "emp_job_role", "emp_department", "emp_experience_status",
    "ssc_school", "ssc_grade", "inter_college", "inter_grade", "inter_branch",
    "grad_college", "grad_grade", "grad_degree", "grad_branch",
    "primary_contact_name", "primary_contact_mobile", "primary_contact_relation",
    "primary_contact_email", "secondary_contact_name", "secondary_contact_mobile",
    "secondary_contact_relation", "secondary_contact_email",
)

DOCUMENT_SLOTS = (
    "emp_profile_pic", "emp_ssc_doc", "emp_inter_doc", "emp_grad_doc",
    "resume", "id_proof", "signed_document",
)


def stripped_form(form: Mapping) -> Dict[str, object]:
    """Plain dict of the submitted values with surrounding whitespace removed."""
    return {k: v.strip() if isinstance(v, str) else v for k, v in form.items()}


def _opt(form: Mapping, name: str) -> Optional[str]:
    v = form.get(name)
    return None if is_blank(v) else clean(v)


def check_distinct_mobiles(form: Mapping) -> None:
    seen = {}
    for name in MOBILE_FIELDS:
        v = (form.get(name) or "").strip()
        if not v:
            continue
        if v in seen:
            raise ValidationError(name, f"Duplicate mobile numbers detected ({seen[v]} and {name})")
        seen[v] = name


def check_required_documents(batch: UploadBatch, form: Mapping, profile: IntakeProfile) -> None:
    required = list(profile.required_documents)
    if form.get("emp_experience_status") == EXPERIENCED:
        required += ["emp_offer_letter_1", "emp_relieving_letter_1"]
    missing = [slot for slot in required if not batch.has(slot)]
    if missing:
        raise ValidationError(missing[0], f"Missing required files: {', '.join(missing)}")


def find_existing_identity(form: Mapping) -> Optional[str]:
    """Name of the first unique field already taken by a stored record, if any."""
    for name in UNIQUE_FIELDS:
        probe = clean(form.get(name) or "")
        col = getattr(EmployeeRecord, name)
        if db.session.query(EmployeeRecord.id).filter(col == probe).first():
            return name
    return None


def conflict_field(e: IntegrityError) -> Optional[str]:
    """Map a unique violation (PostgreSQL constraint name or sqlite column list) to the field."""
    msg = str(getattr(e, "orig", None) or e)
    for name in UNIQUE_FIELDS:
        if name in msg:
            return name
    return None


def validate_submission(form: Mapping, batch: UploadBatch, profile: IntakeProfile = STRICT,
                        now: Optional[datetime] = None):
    """
    Fail-fast validation of one submission. Returns (employments, educations)
    with file slots referenced on `batch`; nothing is written.
    """
    form = stripped_form(form)
    check_fields(REQUIRED_RULES, form, optional=profile.optional_fields)
    check_fields(OPTIONAL_RULES, form)

    dob = parse_date(form["emp_dob"])
    timeline.check_dob(dob, now)
    timeline.check_joining_date(parse_date(form["emp_joining_date"]), now)

    ssc_year, inter_year, grad_year = (int(form[k]) for k in ("ssc_year", "inter_year", "grad_year"))
    timeline.check_school_years(dob, ssc_year, inter_year, grad_year, now)

    check_required_documents(batch, form, profile)

    employments = assemble_employments(form, batch, ssc_year, now)
    educations = assemble_educations(form, batch, grad_year, now)

    check_distinct_mobiles(form)
    return employments, educations


def build_record(form: Mapping, batch: UploadBatch, employments, educations) -> EmployeeRecord:
    rec = EmployeeRecord(**{name: _opt(form, name) for name in TEXT_FIELDS})
    for slot in DOCUMENT_SLOTS:
        setattr(rec, slot, batch.reference(slot))
    rec.emp_dob = parse_date(form["emp_dob"])
    rec.emp_joining_date = parse_date(form["emp_joining_date"])
    rec.ssc_year = int(form["ssc_year"])
    rec.inter_year = int(form["inter_year"])
    rec.grad_year = int(form["grad_year"])
    rec.emp_terms_accepted = form.get("emp_terms_accepted") in ("true", "on")
    rec.previous_employments = [e.to_dict() for e in employments] or None
    rec.additional_educations = [e.to_dict() for e in educations] or None
    return rec


def submit_employee(form: Mapping, uploads: Dict[str, FileStorage], folder: str,
                    url_prefix: str = "/uploads", profile: IntakeProfile = STRICT,
                    now: Optional[datetime] = None) -> EmployeeRecord:
    """
    Validate, store files, insert and commit one submission.

    Files are written only after every check has passed; any failure after
    that rolls the session back and removes the files written for this call.
    """
    form = stripped_form(form)
    batch = UploadBatch(uploads, folder, url_prefix)
    try:
        employments, educations = validate_submission(form, batch, profile, now)

        taken = find_existing_identity(form)
        if taken:
            raise ConflictError(taken)

        rec = build_record(form, batch, employments, educations)
        batch.persist()
        db.session.add(rec)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        batch.discard()
        field = conflict_field(e)
        if field:
            raise ConflictError(field) from e
        raise DatabaseError("Database error while saving employee", payload=str(e.orig)) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        batch.discard()
        raise DatabaseError("Database error while saving employee", payload=str(e)) from e
    except APIError:
        db.session.rollback()
        batch.discard()
        raise
    except Exception:
        db.session.rollback()
        batch.discard()
        log.exception("unexpected failure while saving %s", form.get("emp_email"))
        raise

    log.info("employee %s inserted with id %s", rec.emp_email, rec.id)
    return rec
