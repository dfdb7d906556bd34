import io
import os

import pytest
from dateutil.relativedelta import relativedelta

from onboarding_api import create_app
from onboarding_api.extensions import db
from onboarding_api.services.timeline import reference_now

STRICT_DOCS = ("emp_ssc_doc", "emp_inter_doc", "emp_grad_doc", "resume", "id_proof", "signed_document")


@pytest.fixture(scope="function")
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("UPLOAD_FOLDER", str(tmp_path / "uploads"))
    monkeypatch.delenv("INTAKE_PROFILE", raising=False)
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture
def upload_dir(app):
    return app.config["UPLOAD_FOLDER"]


def stored_files(folder):
    return sorted(os.listdir(folder)) if os.path.isdir(folder) else []


def pdf(name="doc.pdf", size=64, mimetype="application/pdf"):
    return (io.BytesIO(b"%PDF-1.4\n" + b"0" * size), name, mimetype)


def make_form(**overrides):
    """A submission that passes every rule today (Fresher, no extra education)."""
    today = reference_now().date()
    dob = today - relativedelta(years=30)
    ssc = dob.year + 16
    form = {
        "emp_name": "Ravi Kumar",
        "emp_email": "ravi.kumar@gmail.com",
        "emp_gender": "Male",
        "emp_marital_status": "Single",
        "emp_dob": dob.isoformat(),
        "emp_mobile": "9876543210",
        "emp_aadhaar": "123412341234",
        "emp_pan": "ABCDE1234F",
        "emp_address": "12 MG Road, Block B",
        "emp_city": "Hyderabad",
        "emp_state": "Telangana",
        "emp_zipcode": "500001",
        "emp_bank": "State Bank",
        "emp_account": "123456789012",
        "emp_ifsc": "SBIN0001234",
        "emp_bank_branch": "Madhapur",
        "emp_job_role": "Software Engineer",
        "emp_department": "Engineering",
        "emp_experience_status": "Fresher",
        "emp_joining_date": (today + relativedelta(months=1)).isoformat(),
        "ssc_school": "Little Flower School",
        "ssc_year": str(ssc),
        "ssc_grade": "88%",
        "inter_college": "Narayana College",
        "inter_year": str(ssc + 2),
        "inter_grade": "9.1",
        "inter_branch": "MPC",
        "grad_college": "Osmania University",
        "grad_year": str(ssc + 6),
        "grad_grade": "76.5",
        "grad_degree": "BTech",
        "grad_branch": "Computer Science",
        "primary_contact_name": "Sita Kumar",
        "primary_contact_mobile": "9123456780",
        "primary_contact_relation": "Parent",
        "emp_terms_accepted": "true",
    }
    form.update(overrides)
    return form


def employment_slot(i=1, **overrides):
    slot = {
        f"emp_company_name_{i}": "Acme",
        f"emp_years_of_experience_{i}": "2.5",
        f"emp_start_date_{i}": "2021-01-01",
        f"emp_end_date_{i}": "2022-06-01",
        f"emp_uan_{i}": "100200300400",
        f"emp_pf_{i}": "MHBAN004567800012",
    }
    slot.update(overrides)
    return slot


def base_files(*slots):
    return {slot: pdf(f"{slot}.pdf") for slot in (slots or STRICT_DOCS)}


def post_submission(client, form, files=None):
    data = dict(form)
    data.update(base_files() if files is None else files)
    return client.post("/save-employee", data=data, content_type="multipart/form-data")
