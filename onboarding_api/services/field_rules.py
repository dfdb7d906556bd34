from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional, Pattern

from onboarding_api.common.errors import ValidationError

# ---------- patterns ----------
WORDS_RE    = re.compile(r"^[A-Za-z]+(?: [A-Za-z]+)*$")
COMPANY_RE  = re.compile(r"^[A-Za-z]+(?:[ -][A-Za-z]+)*$")
EMAIL_RE    = re.compile(r"^[a-zA-Z0-9]+([._-][a-zA-Z0-9]+)*@(gmail|outlook)\.(com|in|org|co)$")
MOBILE_RE   = re.compile(r"^[6789]\d{9}$")
AADHAAR_RE  = re.compile(r"^\d{12}$")
PAN_RE      = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
ADDRESS_RE  = re.compile(r"^[A-Za-z0-9][A-Za-z0-9\s,.\-/#]+[A-Za-z0-9]$")
ZIPCODE_RE  = re.compile(r"^[1-9][0-9]{5}$")
ACCOUNT_RE  = re.compile(r"^(?!0+$)[0-9]{9,18}$")
IFSC_RE     = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")
YEAR_RE     = re.compile(r"^(19|20)\d{2}$")
GRADE_RE    = re.compile(r"^\d{1,3}(\.\d{1,2})?%?$")
UAN_RE      = re.compile(r"^\d{12}$")
PF_RE       = re.compile(r"^[A-Z0-9]{17}$")
GENDER_RE   = re.compile(r"^(Male|Female|Others)$")
MARITAL_RE  = re.compile(r"^(Single|Married|Divorced|Widowed)$")
RELATION_RE = re.compile(r"^(Parent|Spouse|Sibling|Friend|Other)$")
STATUS_RE   = re.compile(r"^(Fresher|Experienced)$")
TERMS_RE    = re.compile(r"^(true|on)$")

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d")


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_date(val) -> Optional[date]:
    if not val: return None
    if isinstance(val, date): return val
    for fmt in DATE_FORMATS:
        try: return datetime.strptime(val.strip(), fmt).date()
        except ValueError: pass
    return None


def grade_in_range(value: str) -> bool:
    """Percentage 4-100 (optionally with '%'), or a 4.0-10.0 GPA (which falls inside the same band)."""
    try:
        n = float(value.rstrip("%"))
    except ValueError:
        return False
    return 4 <= n <= 100


def _is_date(value: str) -> bool:
    return parse_date(value) is not None


@dataclass(frozen=True)
class FieldRule:
    field: str
    pattern: Optional[Pattern] = None
    message: str = "Invalid value"
    required: bool = True
    min_len: Optional[int] = None
    max_len: Optional[int] = None
    check: Optional[Callable[[str], bool]] = None

    def optional(self) -> "FieldRule":
        return FieldRule(self.field, self.pattern, self.message, False,
                         self.min_len, self.max_len, self.check)


def check_field(rule: FieldRule, value) -> None:
    """Raise ValidationError when `value` breaks `rule`. Blank optional values pass."""
    if is_blank(value):
        if rule.required:
            raise ValidationError(rule.field, f"Missing or empty required field: {rule.field}")
        return
    text = value.strip() if isinstance(value, str) else str(value)
    too_short = rule.min_len is not None and len(text) < rule.min_len
    too_long = rule.max_len is not None and len(text) > rule.max_len
    if too_short or too_long:
        raise ValidationError(rule.field, f"{rule.message} for {rule.field}")
    if rule.pattern is not None and not rule.pattern.match(text):
        raise ValidationError(rule.field, f"{rule.message} for {rule.field}")
    if rule.check is not None and not rule.check(text):
        raise ValidationError(rule.field, f"{rule.message} for {rule.field}")


def check_fields(rules: Iterable[FieldRule], form: Mapping, optional: Iterable[str] = ()) -> None:
    """Run rules in order and stop at the first failure. Fields listed in `optional` may be blank."""
    relaxed = set(optional)
    for rule in rules:
        if rule.field in relaxed:
            rule = rule.optional()
        check_field(rule, form.get(rule.field))


def _words(field, message, **kw):
    return FieldRule(field, WORDS_RE, message, **kw)


def _grade(field, message):
    return FieldRule(field, GRADE_RE, message, check=grade_in_range)


def _year(field, message):
    return FieldRule(field, YEAR_RE, message)


# ---------- top-level submission ----------
REQUIRED_RULES = (
    _words("emp_name", "Name must be 3-60 alphabetic characters with single spaces", min_len=3, max_len=60),
    FieldRule("emp_email", EMAIL_RE, "Invalid email format"),
    FieldRule("emp_gender", GENDER_RE, "Invalid gender"),
    FieldRule("emp_marital_status", MARITAL_RE, "Invalid marital status"),
    FieldRule("emp_dob", message="Invalid date of birth", check=_is_date),
    FieldRule("emp_mobile", MOBILE_RE, "Invalid 10-digit mobile number"),
    FieldRule("emp_aadhaar", AADHAAR_RE, "Aadhaar must be 12 digits"),
    FieldRule("emp_pan", PAN_RE, "PAN must be 10 alphanumeric characters"),
    FieldRule("emp_address", ADDRESS_RE, "Address must be 5-80 characters", min_len=5, max_len=80),
    _words("emp_city", "Invalid city name"),
    _words("emp_state", "Invalid state"),
    FieldRule("emp_zipcode", ZIPCODE_RE, "Invalid 6-digit zip code"),
    _words("emp_bank", "Invalid bank name"),
    FieldRule("emp_account", ACCOUNT_RE, "Account number must be 9-18 digits"),
    FieldRule("emp_ifsc", IFSC_RE, "Invalid IFSC code"),
    _words("emp_bank_branch", "Invalid branch location"),
    _words("emp_job_role", "Invalid job role"),
    _words("emp_department", "Invalid department"),
    FieldRule("emp_experience_status", STATUS_RE, "Invalid experience status"),
    FieldRule("emp_joining_date", message="Invalid joining date", check=_is_date),
    _words("ssc_school", "Invalid school name"),
    _year("ssc_year", "Invalid SSC year"),
    _grade("ssc_grade", "Invalid SSC grade (4-100% or 4.0-10.0)"),
    _words("inter_college", "Invalid college name"),
    _year("inter_year", "Invalid intermediate year"),
    _grade("inter_grade", "Invalid intermediate grade (4-100% or 4.0-10.0)"),
    _words("inter_branch", "Invalid branch"),
    _words("grad_college", "Invalid college name"),
    _year("grad_year", "Invalid graduation year"),
    _grade("grad_grade", "Invalid graduation grade (4-100% or 4.0-10.0)"),
    _words("grad_degree", "Invalid degree"),
    _words("grad_branch", "Invalid branch"),
    _words("primary_contact_name", "Invalid contact name"),
    FieldRule("primary_contact_mobile", MOBILE_RE, "Invalid 10-digit mobile number"),
    FieldRule("primary_contact_relation", RELATION_RE, "Invalid relation"),
    FieldRule("emp_terms_accepted", TERMS_RE, "Terms must be accepted"),
)

OPTIONAL_RULES = (
    FieldRule("emp_alt_mobile", MOBILE_RE, "Invalid 10-digit mobile number", required=False),
    FieldRule("primary_contact_email", EMAIL_RE, "Invalid email format", required=False),
    _words("secondary_contact_name", "Invalid contact name", required=False),
    FieldRule("secondary_contact_mobile", MOBILE_RE, "Invalid 10-digit mobile number", required=False),
    FieldRule("secondary_contact_email", EMAIL_RE, "Invalid email format", required=False),
    FieldRule("secondary_contact_relation", RELATION_RE, "Invalid relation", required=False),
)


# ---------- conditional sections ----------
def _years_of_experience(value: str) -> bool:
    try:
        n = float(value)
    except ValueError:
        return False
    return 0.1 <= n <= 40


def employment_rules(i: int):
    return (
        FieldRule(f"emp_company_name_{i}", COMPANY_RE, "Company name must be 3-60 characters", min_len=3, max_len=60),
        FieldRule(f"emp_years_of_experience_{i}", message=f"Invalid years of experience for employment {i} (0.1-40)",
                  check=_years_of_experience),
        FieldRule(f"emp_start_date_{i}", message="Invalid date format", check=_is_date),
        FieldRule(f"emp_end_date_{i}", message="Invalid date format", check=_is_date),
        FieldRule(f"emp_uan_{i}", UAN_RE, "UAN must be 12 digits"),
        FieldRule(f"emp_pf_{i}", PF_RE, "PF number must be 17 alphanumeric characters"),
    )


def education_rules(i: int):
    return (
        _words(f"extra_college_{i}", "College name must be 3-60 characters", min_len=3, max_len=60),
        _year(f"extra_year_{i}", f"Invalid year for education {i}"),
        _grade(f"extra_grade_{i}", "Grade must be 4-100% or 4.0-10.0"),
        _words(f"extra_degree_{i}", "Degree must be 3-30 characters", min_len=3, max_len=30),
        _words(f"extra_branch_{i}", "Branch must be 3-30 characters", min_len=3, max_len=30),
    )
