from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from markupsafe import escape

from onboarding_api.common.errors import ValidationError
from onboarding_api.services import timeline
from onboarding_api.services.field_rules import (
    check_fields, education_rules, employment_rules, is_blank, parse_date,
)
from onboarding_api.services.uploads import UploadBatch

EMPLOYMENT_SLOTS = (1, 2, 3)
EDUCATION_SLOTS = (4, 5)
EXPERIENCED = "Experienced"


# characters markupsafe leaves alone but stored text escapes as well
_EXTRA_ESCAPES = str.maketrans({"/": "&#x2F;", "\\": "&#x5C;", "`": "&#96;"})


def clean(value: str) -> str:
    return str(escape(value.strip())).translate(_EXTRA_ESCAPES)


@dataclass
class EmploymentRecord:
    company_name: str
    years_of_experience: float
    start_date: date
    end_date: date
    uan: str
    pf: str
    offer_letter: str
    relieving_letter: str
    experience_certificate: Optional[str] = None

    FILE_FIELDS = ("offer_letter", "relieving_letter", "experience_certificate")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["start_date"] = self.start_date.isoformat()
        d["end_date"] = self.end_date.isoformat()
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EmploymentRecord":
        known = {f.name for f in fields(cls)}
        kw = {k: v for k, v in d.items() if k in known}
        kw["start_date"] = parse_date(kw.get("start_date"))
        kw["end_date"] = parse_date(kw.get("end_date"))
        kw["years_of_experience"] = float(kw["years_of_experience"])
        return cls(**kw)


@dataclass
class EducationRecord:
    college: str
    year: int
    grade: str
    degree: str
    branch: str
    certificate: str

    FILE_FIELDS = ("certificate",)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EducationRecord":
        known = {f.name for f in fields(cls)}
        kw = {k: v for k, v in d.items() if k in known}
        kw["year"] = int(kw["year"])
        return cls(**kw)


def _missing(form: Mapping, names) -> List[str]:
    return [n for n in names if is_blank(form.get(n))]


def _employment(i: int, form: Mapping, batch: UploadBatch, ssc_year: int,
                now: Optional[datetime]) -> EmploymentRecord:
    rules = employment_rules(i)
    missing = _missing(form, [r.field for r in rules])
    if missing:
        raise ValidationError(missing[0], f"Missing experience fields for employment {i}: {', '.join(missing)}")
    check_fields(rules, form)

    start = parse_date(form[f"emp_start_date_{i}"])
    end = parse_date(form[f"emp_end_date_{i}"])
    timeline.check_employment_dates(i, start, end, ssc_year, now)

    if not batch.has(f"emp_offer_letter_{i}"):
        raise ValidationError(f"emp_offer_letter_{i}", f"Missing offer letter for employment {i}")
    if not batch.has(f"emp_relieving_letter_{i}"):
        raise ValidationError(f"emp_relieving_letter_{i}", f"Missing relieving letter for employment {i}")

    return EmploymentRecord(
        company_name=clean(form[f"emp_company_name_{i}"]),
        years_of_experience=float(form[f"emp_years_of_experience_{i}"]),
        start_date=start,
        end_date=end,
        uan=clean(form[f"emp_uan_{i}"]),
        pf=clean(form[f"emp_pf_{i}"]),
        offer_letter=batch.reference(f"emp_offer_letter_{i}"),
        relieving_letter=batch.reference(f"emp_relieving_letter_{i}"),
        experience_certificate=batch.reference(f"emp_experience_certificate_{i}"),
    )


def assemble_employments(form: Mapping, batch: UploadBatch, ssc_year: int,
                         now: Optional[datetime] = None) -> List[EmploymentRecord]:
    """
    Slot 1 is mandatory for experienced applicants; slots 2-3 are taken only
    when their company name is filled in. Fresher submissions yield [].
    """
    if form.get("emp_experience_status") != EXPERIENCED:
        return []
    if is_blank(form.get("emp_company_name_1")):
        raise ValidationError("emp_company_name_1",
                              "At least one previous employment is required for Experienced status")

    out: List[EmploymentRecord] = []
    for i in EMPLOYMENT_SLOTS:
        if i == 1 or not is_blank(form.get(f"emp_company_name_{i}")):
            out.append(_employment(i, form, batch, ssc_year, now))
    return out


def _education(i: int, form: Mapping, batch: UploadBatch, grad_year: int,
               now: Optional[datetime]) -> EducationRecord:
    rules = education_rules(i)
    missing = _missing(form, [r.field for r in rules])
    if missing or not batch.has(f"emp_extra_doc_{i}"):
        raise ValidationError(
            missing[0] if missing else f"emp_extra_doc_{i}",
            f"Missing education fields or certificate for education {i - 2}: {', '.join(missing)}".rstrip(": "),
        )
    check_fields(rules, form)
    year = int(form[f"extra_year_{i}"])
    timeline.check_extra_education_year(i, year, grad_year, now)

    return EducationRecord(
        college=clean(form[f"extra_college_{i}"]),
        year=year,
        grade=clean(form[f"extra_grade_{i}"]),
        degree=clean(form[f"extra_degree_{i}"]),
        branch=clean(form[f"extra_branch_{i}"]),
        certificate=batch.reference(f"emp_extra_doc_{i}"),
    )


def assemble_educations(form: Mapping, batch: UploadBatch, grad_year: int,
                        now: Optional[datetime] = None) -> List[EducationRecord]:
    """Each extra-education slot is independent and triggered by its college name."""
    return [
        _education(i, form, batch, grad_year, now)
        for i in EDUCATION_SLOTS
        if not is_blank(form.get(f"extra_college_{i}"))
    ]
