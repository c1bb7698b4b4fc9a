from __future__ import annotations

import copy
import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from placement_admin.core.auth import CurrentUser, SessionContext
from placement_admin.core.errors import StoreError
from placement_admin.main import app
from placement_admin.schemas.schemas import AdminSignupRequest
from placement_admin.services.identity_service import IdentityService, get_identity_service
from placement_admin.services.record_store import get_record_store
from placement_admin.services.signup_service import SignupService

LEAD_EMAIL = "lead@example.com"
LEAD_PASSWORD = "LeadPass1"
ASSISTANT_EMAIL = "assistant@example.com"
ASSISTANT_PASSWORD = "HelpPass1"


class FakeRecordStore:
    """In-memory stand-in for the MongoDB record store."""

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, dict]] = {}
        self.fail_insert_after: Optional[int] = None
        self.inserts = 0

    def _coll(self, name: str) -> Dict[str, dict]:
        return self.collections.setdefault(name, {})

    @staticmethod
    def _out(record_id: str, doc: dict) -> dict:
        record = copy.deepcopy(doc)
        record["id"] = record_id
        return record

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        self.insert_with_id(collection, record_id, fields)
        return record_id

    def insert_with_id(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        if self.fail_insert_after is not None and self.inserts >= self.fail_insert_after:
            raise StoreError(f"Failed to save record in {collection}")
        coll = self._coll(collection)
        if record_id in coll:
            raise StoreError(f"Record {record_id} already exists in {collection}")
        coll[record_id] = {k: copy.deepcopy(v) for k, v in fields.items() if k not in ("_id", "id")}
        self.inserts += 1

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        doc = self._coll(collection).get(record_id)
        return None if doc is None else self._out(record_id, doc)

    def list_all(self, collection: str) -> List[dict]:
        return [self._out(rid, doc) for rid, doc in self._coll(collection).items()]

    def list_where(self, collection: str, field: str, value: Any) -> List[dict]:
        return [self._out(rid, doc) for rid, doc in self._coll(collection).items() if doc.get(field) == value]

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> bool:
        doc = self._coll(collection).get(record_id)
        if doc is None:
            return False
        doc.update({k: copy.deepcopy(v) for k, v in fields.items() if k not in ("_id", "id")})
        return True

    def delete(self, collection: str, record_id: str) -> bool:
        return self._coll(collection).pop(record_id, None) is not None


def make_ctx(identity: IdentityService, admin_type: str = "A1", department_code: str = "CS",
             user_id: str = "admin-1") -> SessionContext:
    user = CurrentUser(
        id=user_id,
        email=f"{user_id}@example.com",
        role="admin",
        admin_type=admin_type,
        department_code=department_code,
    )
    return SessionContext(user, {"jti": uuid.uuid4().hex, "exp": 4102444800}, identity)


def admin_request(**overrides) -> AdminSignupRequest:
    data = {
        "first_name": "Priya",
        "last_name": "Kulkarni",
        "email": LEAD_EMAIL,
        "phone": "9876543210",
        "username": "priya",
        "type": "A1",
        "department": "Computer Science & Engineering",
        "password": LEAD_PASSWORD,
        "confirm_password": LEAD_PASSWORD,
    }
    data.update(overrides)
    return AdminSignupRequest(**data)


def student_payload(**overrides) -> dict:
    data = {
        "firstName": "Asha",
        "middleName": "",
        "lastName": "Patil",
        "gender": "Female",
        "registrationNo": "21CS0001",
        "phone": "9123456780",
        "email": "asha.patil@example.com",
        "dob": "2002-10-15",
        "tenthPercentage": "91.2",
        "twelfthPercentage": "84",
        "cgpa": "8.7",
        "branch": "Computer Science & Engineering",
        "semester": "6",
        "backlogs": "No Backlog",
        "password": "Passw0rd!",
        "confirmPassword": "Passw0rd!",
    }
    data.update(overrides)
    return data


def seed_record(store: FakeRecordStore, collection: str, record_id: str, **fields) -> str:
    doc = {"status": "active"}
    doc.update(fields)
    store.insert_with_id(collection, record_id, doc)
    return record_id


def login(client: TestClient, email: str, password: str) -> Dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def identity() -> IdentityService:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    service = IdentityService(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    service.init_schema()
    yield service
    engine.dispose()


@pytest.fixture()
def client(store: FakeRecordStore, identity: IdentityService) -> TestClient:
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_identity_service] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def lead_admin(store: FakeRecordStore, identity: IdentityService) -> str:
    return SignupService(store, identity).bootstrap_admin(admin_request())


@pytest.fixture()
def assistant_admin(store: FakeRecordStore, identity: IdentityService, lead_admin: str) -> str:
    lead_ctx = make_ctx(identity, user_id=lead_admin)
    request = admin_request(
        first_name="Rahul",
        last_name="Deshmukh",
        email=ASSISTANT_EMAIL,
        username="rahul",
        type="A2",
        department="Information Technology",
        password=ASSISTANT_PASSWORD,
        confirm_password=ASSISTANT_PASSWORD,
    )
    return SignupService(store, identity).signup_admin(lead_ctx, request)


@pytest.fixture()
def lead_headers(client: TestClient, lead_admin: str) -> Dict[str, str]:
    return login(client, LEAD_EMAIL, LEAD_PASSWORD)


@pytest.fixture()
def assistant_headers(client: TestClient, assistant_admin: str) -> Dict[str, str]:
    return login(client, ASSISTANT_EMAIL, ASSISTANT_PASSWORD)
