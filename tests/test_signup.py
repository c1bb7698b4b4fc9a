import pytest

from conftest import ASSISTANT_EMAIL, admin_request, make_ctx, student_payload
from placement_admin.core.errors import FormValidationError, IdentityError, StoreError
from placement_admin.schemas.schemas import StudentSignupRequest
from placement_admin.services.signup_service import SignupService, map_identity_error

RECRUITER = {
    "companyName": "Acme Analytics",
    "email": "hr@acme.example.com",
    "companyInfo": "Acme builds data platforms for logistics and retail teams.",
    "password": "Passw0rd!",
    "confirmPassword": "Passw0rd!",
}


def test_student_signup_end_to_end(client, lead_headers, store, identity) -> None:
    response = client.post("/api/signup/students", headers=lead_headers, json=student_payload())
    assert response.status_code == 201
    student_id = response.json()["id"]

    assert identity.authenticate("asha.patil@example.com", "Passw0rd!")["user_id"] == student_id
    record = store.get("students", student_id)
    assert record["branchCode"] == "CS"
    assert record["status"] == "active"
    assert record["role"] == "student"
    assert record["cgpa"] == 8.7
    assert "password" not in record and "confirmPassword" not in record


def test_password_mismatch_is_a_field_error(client, lead_headers, store) -> None:
    response = client.post(
        "/api/signup/students",
        headers=lead_headers,
        json=student_payload(confirmPassword="Different1!"),
    )
    assert response.status_code == 422
    assert response.json()["errors"] == {"confirmPassword": "Passwords don't match"}
    assert store.collections.get("students", {}) == {}


def test_email_in_use(client, lead_headers) -> None:
    first = client.post("/api/signup/students", headers=lead_headers, json=student_payload())
    assert first.status_code == 201
    second = client.post(
        "/api/signup/students",
        headers=lead_headers,
        json=student_payload(registrationNo="21CS0002"),
    )
    assert second.status_code == 409
    assert second.json() == {"detail": "Email is already in use", "code": "EMAIL_IN_USE"}


def test_schema_errors_are_422(client, lead_headers) -> None:
    response = client.post("/api/signup/students", headers=lead_headers, json=student_payload(cgpa="12"))
    assert response.status_code == 422


def test_signup_requires_session(client) -> None:
    response = client.post("/api/signup/students", json=student_payload())
    assert response.status_code == 401


def test_recruiter_signup(client, lead_headers, store) -> None:
    response = client.post("/api/signup/recruiters", headers=lead_headers, json=RECRUITER)
    assert response.status_code == 201
    record = store.get("recruiters", response.json()["id"])
    assert record["companyName"] == "Acme Analytics"
    assert record["role"] == "recruiter"


def test_admin_signup_returns_admin_list(client, lead_headers) -> None:
    payload = {
        "firstName": "Sneha",
        "lastName": "Joshi",
        "email": "sneha@example.com",
        "phone": "9000000001",
        "username": "sneha",
        "type": "A2",
        "department": "Civil Engineering",
        "password": "abc123",
        "confirmPassword": "abc123",
    }
    response = client.post("/api/signup/admins", headers=lead_headers, json=payload)
    assert response.status_code == 201
    body = response.json()
    emails = {admin["email"] for admin in body["admins"]}
    assert emails == {"lead@example.com", "sneha@example.com"}
    created = next(admin for admin in body["admins"] if admin["id"] == body["id"])
    assert created["deptCode"] == "CE"
    assert created["type"] == "A2"


def test_admin_weak_password_message(client, lead_headers) -> None:
    payload = {
        "firstName": "Sneha",
        "lastName": "Joshi",
        "email": "sneha@example.com",
        "phone": "9000000001",
        "username": "sneha",
        "type": "A2",
        "department": "Civil Engineering",
        "password": "abc",
        "confirmPassword": "abc",
    }
    response = client.post("/api/signup/admins", headers=lead_headers, json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Password should be at least 6 characters"


def test_assistant_cannot_create_admins(client, assistant_headers) -> None:
    payload = admin_request(email="new@example.com", username="newbie", type="A2").model_dump(
        mode="json", by_alias=True
    )
    response = client.post("/api/signup/admins", headers=assistant_headers, json=payload)
    assert response.status_code == 403


def test_assistant_cannot_create_recruiters(client, assistant_headers, store, identity) -> None:
    response = client.post("/api/signup/recruiters", headers=assistant_headers, json=RECRUITER)
    assert response.status_code == 403
    assert store.collections.get("recruiters", {}) == {}
    assert not identity.check_email_registered(RECRUITER["email"])


def test_assistant_can_register_students(client, assistant_headers) -> None:
    response = client.post(
        "/api/signup/students",
        headers=assistant_headers,
        json=student_payload(branch="Information Technology"),
    )
    assert response.status_code == 201


@pytest.mark.parametrize("code,message", [
    (IdentityError.EMAIL_IN_USE, "Email is already in use"),
    (IdentityError.INVALID_EMAIL, "Invalid email address"),
    (IdentityError.WEAK_PASSWORD, "Password should be at least 6 characters"),
    (IdentityError.UNKNOWN, "Failed to create recruiter account"),
    ("SOMETHING_NEW", "Failed to create recruiter account"),
])
def test_identity_error_mapping(code: str, message: str) -> None:
    mapped = map_identity_error(IdentityError(code, "Password should be at least 6 characters"), "recruiter")
    assert mapped.message == message


def test_profile_write_failure_is_reported(store, identity) -> None:
    service = SignupService(store, identity)
    store.fail_insert_after = 0
    with pytest.raises(StoreError, match="Failed to create student account"):
        service.signup_student(make_ctx(identity), StudentSignupRequest(**student_payload()))
    # the credential was already issued
    assert identity.check_email_registered("asha.patil@example.com")


def test_bootstrap_refuses_second_lead(store, identity, lead_admin) -> None:
    service = SignupService(store, identity)
    with pytest.raises(FormValidationError, match="A lead admin already exists"):
        service.bootstrap_admin(admin_request(email="other@example.com", username="other"))


def test_bootstrap_requires_lead_type(store, identity) -> None:
    service = SignupService(store, identity)
    with pytest.raises(FormValidationError):
        service.bootstrap_admin(admin_request(email=ASSISTANT_EMAIL, type="A2"))
