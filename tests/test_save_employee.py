from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from onboarding_api.extensions import db
from onboarding_api.models.employee_record import EmployeeRecord

from conftest import base_files, employment_slot, make_form, pdf, post_submission, stored_files


def _count():
    return db.session.query(EmployeeRecord).count()


def test_fresher_submission_is_stored(client, upload_dir):
    form = make_form()
    r = post_submission(client, form)
    assert r.status_code == 201, r.get_json()
    body = r.get_json()
    assert body["success"] is True
    eid = body["data"]["employeeId"]

    rec = db.session.get(EmployeeRecord, eid)
    assert rec.emp_name == "Ravi Kumar"
    assert rec.emp_address == "12 MG Road, Block B"
    assert rec.emp_dob.isoformat() == form["emp_dob"]
    assert rec.ssc_year == int(form["ssc_year"])
    assert rec.emp_terms_accepted is True
    assert rec.emp_alt_mobile is None
    assert rec.previous_employments is None
    assert rec.additional_educations is None
    assert rec.resume.startswith("/uploads/")
    assert rec.emp_profile_pic is None
    assert len(stored_files(upload_dir)) == 6


def test_experienced_with_one_slot(client, upload_dir):
    form = make_form(emp_experience_status="Experienced", **employment_slot(1))
    files = base_files()
    files["emp_offer_letter_1"] = pdf("offer.pdf")
    files["emp_relieving_letter_1"] = pdf("relieving.pdf")
    r = post_submission(client, form, files)
    assert r.status_code == 201, r.get_json()

    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert len(rec.previous_employments) == 1
    job = rec.previous_employments[0]
    assert job["company_name"] == "Acme"
    assert job["years_of_experience"] == 2.5
    assert job["start_date"] == "2021-01-01"
    assert job["end_date"] == "2022-06-01"
    assert job["uan"] == "100200300400"
    assert job["pf"] == "MHBAN004567800012"
    assert job["offer_letter"].startswith("/uploads/")
    assert job["relieving_letter"].startswith("/uploads/")
    assert job["experience_certificate"] is None
    assert len(stored_files(upload_dir)) == 8


def test_experienced_without_employment_is_rejected(client, upload_dir):
    form = make_form(emp_experience_status="Experienced")
    files = base_files()
    files["emp_offer_letter_1"] = pdf("offer.pdf")
    files["emp_relieving_letter_1"] = pdf("relieving.pdf")
    r = post_submission(client, form, files)
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert err["field"] == "emp_company_name_1"
    assert _count() == 0
    assert stored_files(upload_dir) == []


def test_experienced_missing_offer_letter_names_required_file(client):
    form = make_form(emp_experience_status="Experienced", **employment_slot(1))
    files = base_files()
    files["emp_relieving_letter_1"] = pdf("relieving.pdf")
    r = post_submission(client, form, files)
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "emp_offer_letter_1"


def test_fresher_ignores_employment_files(client, upload_dir):
    files = base_files()
    files["emp_offer_letter_1"] = pdf("offer.pdf")
    r = post_submission(client, make_form(), files)
    assert r.status_code == 201
    assert len(stored_files(upload_dir)) == 6


def test_extra_education_slot(client):
    form = make_form()
    grad = int(form["grad_year"])
    form.update({
        "extra_college_4": "Indian Institute",
        "extra_year_4": str(grad + 2),
        "extra_grade_4": "8.2",
        "extra_degree_4": "MTech",
        "extra_branch_4": "Data Science",
    })
    files = base_files()
    files["emp_extra_doc_4"] = pdf("mtech.pdf")
    r = post_submission(client, form, files)
    assert r.status_code == 201, r.get_json()
    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert rec.additional_educations == [{
        "college": "Indian Institute",
        "year": grad + 2,
        "grade": "8.2",
        "degree": "MTech",
        "branch": "Data Science",
        "certificate": rec.additional_educations[0]["certificate"],
    }]


def test_extra_education_without_certificate(client):
    form = make_form(extra_college_5="Indian Institute")
    r = post_submission(client, form)
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "extra_year_5"


def test_missing_required_document(client, upload_dir):
    files = base_files("emp_ssc_doc", "emp_inter_doc", "emp_grad_doc", "id_proof", "signed_document")
    r = post_submission(client, make_form(), files)
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["field"] == "resume"
    assert "Missing required files" in err["message"]
    assert stored_files(upload_dir) == []


def test_duplicate_mobile_numbers(client):
    r = post_submission(client, make_form(emp_alt_mobile="9876543210"))
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["field"] == "emp_alt_mobile"
    assert "Duplicate mobile" in err["message"]


def test_first_invalid_field_wins(client):
    r = post_submission(client, make_form(emp_email="ravi@yahoo.com", emp_pan="bad"))
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "emp_email"


def _second_applicant(**overrides):
    base = dict(
        emp_email="anita.rao@outlook.com",
        emp_aadhaar="999988887777",
        emp_pan="ZYXWV9876K",
        emp_mobile="8000000001",
        primary_contact_mobile="8000000002",
    )
    base.update(overrides)
    return make_form(**base)


def test_duplicate_identity_fields_name_the_field(client, upload_dir):
    assert post_submission(client, make_form()).status_code == 201
    before = stored_files(upload_dir)

    for field, value, label in (
        ("emp_email", "ravi.kumar@gmail.com", "Email"),
        ("emp_aadhaar", "123412341234", "Aadhaar"),
        ("emp_pan", "ABCDE1234F", "PAN"),
    ):
        r = post_submission(client, _second_applicant(**{field: value}))
        assert r.status_code == 400
        err = r.get_json()["error"]
        assert err["code"] == "CONFLICT"
        assert err["field"] == field
        assert err["message"] == f"{label} already exists"
        assert _count() == 1
        assert stored_files(upload_dir) == before


def test_constraint_race_removes_written_files(client, upload_dir, monkeypatch):
    # skip the pre-check so the database constraint is what rejects the row
    monkeypatch.setattr("onboarding_api.services.intake.find_existing_identity", lambda form: None)
    assert post_submission(client, make_form()).status_code == 201
    before = stored_files(upload_dir)

    r = post_submission(client, _second_applicant(emp_pan="ABCDE1234F"))
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "emp_pan"
    assert _count() == 1
    assert stored_files(upload_dir) == before


def test_commit_failure_removes_written_files(client, upload_dir):
    def boom(session):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    event.listen(Session, "before_commit", boom)
    try:
        r = post_submission(client, make_form())
    finally:
        event.remove(Session, "before_commit", boom)
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "DATABASE_ERROR"
    assert "detail" not in r.get_json()["error"]
    assert _count() == 0
    assert stored_files(upload_dir) == []


def test_wrong_mime_type_is_rejected_before_anything_is_written(client, upload_dir):
    files = base_files()
    files["resume"] = pdf("resume.png", mimetype="image/png")
    r = post_submission(client, make_form(), files)
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["code"] == "UPLOAD_ERROR"
    assert err["field"] == "resume"
    assert _count() == 0
    assert stored_files(upload_dir) == []


def test_oversized_file_is_rejected(client, upload_dir):
    files = base_files()
    files["signed_document"] = pdf("signed.pdf", size=2 * 1024 * 1024)
    r = post_submission(client, make_form(), files)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "UPLOAD_ERROR"
    assert stored_files(upload_dir) == []


def test_profile_picture_accepts_images(client):
    files = base_files()
    files["emp_profile_pic"] = pdf("me.jpg", mimetype="image/jpeg")
    r = post_submission(client, make_form(), files)
    assert r.status_code == 201
    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert rec.emp_profile_pic.endswith(".jpg")


def test_unexpected_file_field(client):
    files = base_files()
    files["avatar"] = pdf("x.pdf")
    r = post_submission(client, make_form(), files)
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "avatar"


def test_padded_experienced_status_still_requires_employment(client, upload_dir):
    r = post_submission(client, make_form(emp_experience_status="Experienced "))
    assert r.status_code == 400
    assert r.get_json()["error"]["field"] == "emp_offer_letter_1"
    assert _count() == 0
    assert stored_files(upload_dir) == []


def test_padded_experienced_status_assembles_employment(client):
    form = make_form(emp_experience_status=" Experienced", **employment_slot(1))
    files = base_files()
    files["emp_offer_letter_1"] = pdf("offer.pdf")
    files["emp_relieving_letter_1"] = pdf("relieving.pdf")
    r = post_submission(client, form, files)
    assert r.status_code == 201, r.get_json()
    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert rec.emp_experience_status == "Experienced"
    assert len(rec.previous_employments) == 1


def test_padded_terms_flag_is_stored_as_accepted(client):
    r = post_submission(client, make_form(emp_terms_accepted=" true"))
    assert r.status_code == 201, r.get_json()
    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert rec.emp_terms_accepted is True


def test_stored_address_escapes_slashes(client):
    r = post_submission(client, make_form(emp_address="12/4 MG Road"))
    assert r.status_code == 201, r.get_json()
    rec = db.session.get(EmployeeRecord, r.get_json()["data"]["employeeId"])
    assert rec.emp_address == "12&#x2F;4 MG Road"
