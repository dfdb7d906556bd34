"""
Plausible-biography checks across the applicant's timeline.

All comparisons are made against "now" in the service's reference timezone
(UTC+05:30) and every bound is inclusive.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from onboarding_api.common.errors import ValidationError

IST = timezone(timedelta(hours=5, minutes=30), name="IST")

MIN_AGE_YEARS = 20
MAX_AGE_YEARS = 60
JOINING_WINDOW = relativedelta(months=6)
SSC_AFTER_BIRTH_YEARS = 12
INTER_AFTER_SSC_YEARS = 2
GRAD_AFTER_INTER_YEARS = 3
GRAD_FUTURE_YEARS = 2
MIN_TENURE = relativedelta(months=1)


def reference_now() -> datetime:
    return datetime.now(timezone.utc).astimezone(IST)


def _today(now: Optional[datetime]) -> date:
    return (now or reference_now()).date()


def _in_range(field: str, value: date, lo: date, hi: date, message: str) -> None:
    if value < lo:
        raise ValidationError(field, f"{message} for {field}: too early (min {lo.isoformat()})")
    if value > hi:
        raise ValidationError(field, f"{message} for {field}: too late (max {hi.isoformat()})")


def check_dob(dob: date, now: Optional[datetime] = None) -> None:
    today = _today(now)
    _in_range("emp_dob", dob,
              today - relativedelta(years=MAX_AGE_YEARS),
              today - relativedelta(years=MIN_AGE_YEARS),
              f"Employee must be {MIN_AGE_YEARS}-{MAX_AGE_YEARS} years old")


def check_joining_date(joining: date, now: Optional[datetime] = None) -> None:
    today = _today(now)
    _in_range("emp_joining_date", joining, today, today + JOINING_WINDOW,
              "Joining date must be within 6 months")


def check_school_years(dob: date, ssc_year: int, inter_year: int, grad_year: int,
                       now: Optional[datetime] = None) -> None:
    year = _today(now).year

    lo, hi = dob.year + SSC_AFTER_BIRTH_YEARS, year
    if not lo <= ssc_year <= hi:
        raise ValidationError("ssc_year", f"SSC year must be between {lo} and {hi}")

    lo, hi = ssc_year + INTER_AFTER_SSC_YEARS, year
    if not lo <= inter_year <= hi:
        raise ValidationError("inter_year", f"Intermediate year must be at least 2 years after SSC ({lo}-{hi})")

    lo, hi = inter_year + GRAD_AFTER_INTER_YEARS, year + GRAD_FUTURE_YEARS
    if not lo <= grad_year <= hi:
        raise ValidationError("grad_year", f"Graduation year must be at least 3 years after Intermediate ({lo}-{hi})")


def check_employment_dates(i: int, start: date, end: date, ssc_year: int,
                           now: Optional[datetime] = None) -> None:
    today = _today(now)
    _in_range(f"emp_start_date_{i}", start, date(ssc_year + 1, 1, 1), today,
              "Start date must be after SSC completion")
    _in_range(f"emp_end_date_{i}", end, start + MIN_TENURE, today,
              "End date must be at least 1 month after start date")


def check_extra_education_year(i: int, year: int, grad_year: int, now: Optional[datetime] = None) -> None:
    hi = _today(now).year + GRAD_FUTURE_YEARS
    if not grad_year <= year <= hi:
        raise ValidationError(f"extra_year_{i}", f"Invalid year for education {i} ({grad_year}-{hi})")
