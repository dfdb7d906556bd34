from datetime import datetime
from sqlalchemy.dialects.postgresql import JSONB
from onboarding_api.extensions import db

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests)
JsonList = db.JSON().with_variant(JSONB(), "postgresql")

DOCUMENT_FIELDS = (
    "emp_profile_pic", "emp_ssc_doc", "emp_inter_doc", "emp_grad_doc",
    "resume", "id_proof", "signed_document",
)


class EmployeeRecord(db.Model):
    """One onboarded employee. Rows are written once and never updated."""
    __tablename__ = "employee_records"

    id = db.Column(db.Integer, primary_key=True)

    # personal
    emp_name           = db.Column(db.String(255), nullable=False)
    emp_email          = db.Column(db.String(255), nullable=False)
    emp_gender         = db.Column(db.String(20), nullable=False)
    emp_marital_status = db.Column(db.String(20), nullable=False)
    emp_dob            = db.Column(db.Date, nullable=False)
    emp_mobile         = db.Column(db.String(20), nullable=False)
    emp_alt_mobile     = db.Column(db.String(20), nullable=True)
    emp_aadhaar        = db.Column(db.String(20), nullable=False)
    emp_pan            = db.Column(db.String(20), nullable=False)
    emp_address        = db.Column(db.Text, nullable=False)
    emp_city           = db.Column(db.String(100), nullable=False)
    emp_state          = db.Column(db.String(100), nullable=False)
    emp_zipcode        = db.Column(db.String(20), nullable=False)

    # banking
    emp_bank        = db.Column(db.String(255), nullable=False)
    emp_account     = db.Column(db.String(50), nullable=False)
    emp_ifsc        = db.Column(db.String(20), nullable=False)
    emp_bank_branch = db.Column(db.String(100), nullable=True)   # optional in relaxed profile

    # job
    emp_job_role          = db.Column(db.String(255), nullable=False)
    emp_department        = db.Column(db.String(255), nullable=False)
    emp_experience_status = db.Column(db.String(20), nullable=False)   # Fresher / Experienced
    emp_joining_date      = db.Column(db.Date, nullable=False)
    emp_profile_pic       = db.Column(db.String(255), nullable=True)

    # education
    emp_ssc_doc   = db.Column(db.String(255), nullable=True)
    ssc_school    = db.Column(db.String(255), nullable=False)
    ssc_year      = db.Column(db.Integer, nullable=False)
    ssc_grade     = db.Column(db.String(20), nullable=False)
    emp_inter_doc = db.Column(db.String(255), nullable=True)
    inter_college = db.Column(db.String(255), nullable=False)
    inter_year    = db.Column(db.Integer, nullable=False)
    inter_grade   = db.Column(db.String(20), nullable=False)
    inter_branch  = db.Column(db.String(100), nullable=True)
    emp_grad_doc  = db.Column(db.String(255), nullable=True)
    grad_college  = db.Column(db.String(255), nullable=False)
    grad_year     = db.Column(db.Integer, nullable=False)
    grad_grade    = db.Column(db.String(20), nullable=False)
    grad_degree   = db.Column(db.String(100), nullable=False)
    grad_branch   = db.Column(db.String(100), nullable=True)

    # documents
    resume          = db.Column(db.String(255), nullable=True)
    id_proof        = db.Column(db.String(255), nullable=True)
    signed_document = db.Column(db.String(255), nullable=True)

    emp_terms_accepted = db.Column(db.Boolean, nullable=False)

    # emergency contacts
    primary_contact_name       = db.Column(db.String(255), nullable=False)
    primary_contact_mobile     = db.Column(db.String(20), nullable=False)
    primary_contact_relation   = db.Column(db.String(50), nullable=False)
    primary_contact_email      = db.Column(db.String(255), nullable=True)
    secondary_contact_name     = db.Column(db.String(255), nullable=True)
    secondary_contact_mobile   = db.Column(db.String(20), nullable=True)
    secondary_contact_relation = db.Column(db.String(50), nullable=True)
    secondary_contact_email    = db.Column(db.String(255), nullable=True)

    # embedded sub-records (lists of dicts, see services/sections.py)
    previous_employments  = db.Column(JsonList, nullable=True)
    additional_educations = db.Column(JsonList, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("emp_email", name="uq_employee_records_emp_email"),
        db.UniqueConstraint("emp_aadhaar", name="uq_employee_records_emp_aadhaar"),
        db.UniqueConstraint("emp_pan", name="uq_employee_records_emp_pan"),
        db.Index("ix_employee_records_created_at", "created_at"),
    )
