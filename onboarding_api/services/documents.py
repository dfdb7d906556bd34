from __future__ import annotations

import logging
import os
import posixpath
from typing import Any, Dict, Iterable, List

from onboarding_api.models.employee_record import DOCUMENT_FIELDS, EmployeeRecord
from onboarding_api.services.sections import EducationRecord, EmploymentRecord

log = logging.getLogger(__name__)

DOCUMENT_LABELS = {
    "emp_profile_pic": "Profile Picture",
    "emp_ssc_doc": "SSC Document",
    "emp_inter_doc": "Intermediate Document",
    "emp_grad_doc": "Graduation Document",
    "resume": "Resume",
    "id_proof": "ID Proof",
    "signed_document": "Signed Document",
}

EMPLOYMENT_DOCS = (
    ("offer_letter", "emp_offer_letter_{n}", "Offer Letter {n}"),
    ("relieving_letter", "emp_relieving_letter_{n}", "Relieving Letter {n}"),
    ("experience_certificate", "emp_experience_certificate_{n}", "Experience Certificate {n}"),
)


def _iso(v):
    return v.isoformat() if v is not None else None


def employments_of(rec: EmployeeRecord) -> List[EmploymentRecord]:
    return [EmploymentRecord.from_dict(d) for d in rec.previous_employments or []]


def educations_of(rec: EmployeeRecord) -> List[EducationRecord]:
    return [EducationRecord.from_dict(d) for d in rec.additional_educations or []]


def record_to_dict(rec: EmployeeRecord) -> Dict[str, Any]:
    """Column values as JSON-ready primitives; sub-records go through their typed form."""
    out: Dict[str, Any] = {}
    for col in EmployeeRecord.__table__.columns:
        out[col.name] = getattr(rec, col.name)
    for k in ("emp_dob", "emp_joining_date", "created_at"):
        out[k] = _iso(out[k])
    out["previous_employments"] = [e.to_dict() for e in employments_of(rec)] or None
    out["additional_educations"] = [e.to_dict() for e in educations_of(rec)] or None
    return out


def _url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


def _with_urls(d: Dict[str, Any], names: Iterable[str], base_url: str) -> Dict[str, Any]:
    out = dict(d)
    for name in names:
        if d.get(name):
            out[f"{name}_url"] = _url(base_url, d[name])
    return out


def project_record(data: Dict[str, Any], base_url: str) -> Dict[str, Any]:
    """
    Add absolute `<field>_url` keys next to every stored relative file path,
    including those nested in the employment/education sub-records.
    Returns a new dict; the stored paths themselves are left untouched, so
    projecting an already projected record yields the same result.
    """
    out = _with_urls(data, DOCUMENT_FIELDS, base_url)
    if data.get("previous_employments"):
        out["previous_employments"] = [
            _with_urls(e, EmploymentRecord.FILE_FIELDS, base_url) for e in data["previous_employments"]
        ]
    if data.get("additional_educations"):
        out["additional_educations"] = [
            _with_urls(e, EducationRecord.FILE_FIELDS, base_url) for e in data["additional_educations"]
        ]
    return out


def project_records(rows: Iterable[Dict[str, Any]], base_url: str) -> List[Dict[str, Any]]:
    return [project_record(r, base_url) for r in rows]


def _entry(slot: str, label: str, path: str, base_url: str, folder: str):
    filename = posixpath.basename(path)
    if not os.path.isfile(os.path.join(folder, filename)):
        log.warning("file not found for %s: %s", slot, filename)
        return None
    return {"url": _url(base_url, path), "name": label, "filename": filename}


def list_documents(rec: EmployeeRecord, base_url: str, folder: str) -> Dict[str, Dict[str, str]]:
    """
    Document slot -> {url, name, filename} for every referenced file that is
    still on disk. Sub-record slots are numbered by list position.
    """
    found: Dict[str, Dict[str, str]] = {}

    def add(slot, label, path):
        if not path:
            return
        entry = _entry(slot, label, path, base_url, folder)
        if entry:
            found[slot] = entry

    for field, label in DOCUMENT_LABELS.items():
        add(field, label, getattr(rec, field))

    for n, emp in enumerate(employments_of(rec), start=1):
        for attr, slot, label in EMPLOYMENT_DOCS:
            add(slot.format(n=n), label.format(n=n), getattr(emp, attr))

    for n, edu in enumerate(educations_of(rec), start=1):
        add(f"emp_extra_doc_{n + 3}", f"Additional Education Certificate {n}", edu.certificate)

    return found
