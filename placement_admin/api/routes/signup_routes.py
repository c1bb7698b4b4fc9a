"""
Signup Routes

POST /signup/students - Register one student
POST /signup/students/bulk - Import students from a CSV/XLSX/XLS file
GET /signup/students/bulk/formats - Get supported upload formats
POST /signup/recruiters - Register one recruiter
POST /signup/admins - Create an admin (A1 only)
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.schemas.schemas import (
    AdminSignupRequest, AdminSignupResponse, BulkImportResponse, RecruiterSignupRequest,
    SignupResponse, StudentSignupRequest
)
from placement_admin.services.bulk_import import BulkImportProcessor
from placement_admin.services.identity_service import IdentityService, get_identity_service
from placement_admin.services.management_service import ADMINS, RecordManager
from placement_admin.services.record_store import RecordStore, get_record_store
from placement_admin.services.signup_service import SignupService
from placement_admin.utils.file_upload import get_supported_formats, read_spreadsheet_upload

router = APIRouter(prefix="/signup", tags=["Signup"])


def get_signup_service(
    store: RecordStore = Depends(get_record_store),
    identity: IdentityService = Depends(get_identity_service),
) -> SignupService:
    return SignupService(store, identity)


@router.post("/students", response_model=SignupResponse, status_code=201)
async def signup_student(
    data: StudentSignupRequest,
    ctx: SessionContext = Depends(get_session_context),
    service: SignupService = Depends(get_signup_service),
):
    """Create a student identity and profile."""
    student_id = service.signup_student(ctx, data)
    return SignupResponse(id=student_id, message="Student registered successfully")


@router.post("/students/bulk", response_model=BulkImportResponse, status_code=201)
async def bulk_import_students(
    file: UploadFile = File(...),
    ctx: SessionContext = Depends(get_session_context),
    store: RecordStore = Depends(get_record_store),
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Upload a spreadsheet of students.

    Every row is validated before any account is created. The first bad row
    rejects the whole file with its row number (header = row 1).
    """
    content, filename = await read_spreadsheet_upload(file)
    # parsing and one credential hash per row are blocking work
    created = await run_in_threadpool(BulkImportProcessor(store, identity).run, ctx, content, filename)
    return BulkImportResponse(message=f"{created} students added successfully", created=created)


@router.get("/students/bulk/formats")
async def bulk_import_formats():
    """Get supported upload formats."""
    return get_supported_formats()


@router.post("/recruiters", response_model=SignupResponse, status_code=201)
async def signup_recruiter(
    data: RecruiterSignupRequest,
    ctx: SessionContext = Depends(get_session_context),
    service: SignupService = Depends(get_signup_service),
):
    recruiter_id = service.signup_recruiter(ctx, data)
    return SignupResponse(id=recruiter_id, message="Recruiter registered successfully")


@router.post("/admins", response_model=AdminSignupResponse, status_code=201)
async def signup_admin(
    data: AdminSignupRequest,
    ctx: SessionContext = Depends(get_session_context),
    service: SignupService = Depends(get_signup_service),
    store: RecordStore = Depends(get_record_store),
):
    """Create an admin account. Returns the refreshed admin list."""
    admin_id = service.signup_admin(ctx, data)
    admins = RecordManager(store, ADMINS).list(ctx)
    return AdminSignupResponse(id=admin_id, message="Admin created successfully", admins=admins)
