"""
Student Routes

GET /students - List students (search, status, department filters)
GET /students/export - Download the listed students as students.csv
GET /students/{id} - Get one student
PUT /students/{id} - Edit a student
PATCH /students/{id}/status - Block or unblock a student
DELETE /students/{id} - Delete a student record

Assistant (A2) admins only ever see their own department.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.schemas.schemas import (
    MutationResponse, RecordListResponse, RecordResponse, StudentUpdateRequest
)
from placement_admin.services.management_service import (
    STUDENT_EXPORT_FILENAME, STUDENTS, RecordManager, students_to_csv
)
from placement_admin.services.record_store import RecordStore, get_record_store

router = APIRouter(prefix="/students", tags=["Students"])


def get_student_manager(store: RecordStore = Depends(get_record_store)) -> RecordManager:
    return RecordManager(store, STUDENTS)


@router.get("", response_model=RecordListResponse)
async def list_students(
    search: str = "",
    status: str = "all",
    department: Optional[str] = Query(None, description="Branch code, e.g. CS"),
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    records = manager.list(ctx, search=search, status=status, scope=department)
    return RecordListResponse(records=records, total=len(records))


@router.get("/export")
async def export_students(
    search: str = "",
    status: str = "all",
    department: Optional[str] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    """Export the currently listed students as CSV."""
    records = manager.list(ctx, search=search, status=status, scope=department)
    if not records:
        raise HTTPException(status_code=400, detail="No data to export")

    return StreamingResponse(
        iter([students_to_csv(records)]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{STUDENT_EXPORT_FILENAME}"'},
    )


@router.get("/{student_id}", response_model=RecordResponse)
async def get_student(
    student_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    return RecordResponse(record=manager.get(ctx, student_id))


@router.put("/{student_id}", response_model=MutationResponse)
async def edit_student(
    student_id: str,
    data: StudentUpdateRequest,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    """Replace a student's editable fields. branchCode follows the branch."""
    manager.edit(ctx, student_id, data.to_profile())
    records = manager.list(ctx)
    return MutationResponse(message="Student updated successfully", records=records, total=len(records))


@router.patch("/{student_id}/status", response_model=MutationResponse)
async def toggle_student_status(
    student_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    new_status = manager.toggle_status(ctx, student_id)
    records = manager.list(ctx)
    return MutationResponse(message=f"Student {new_status}", records=records, total=len(records))


@router.delete("/{student_id}", response_model=MutationResponse)
async def delete_student(
    student_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_student_manager),
):
    manager.delete(ctx, student_id)
    records = manager.list(ctx)
    return MutationResponse(message="Student deleted successfully", records=records, total=len(records))
