"""
Recruiter Routes

GET /recruiters - List recruiters (search, status filters)
GET /recruiters/{id} - Get one recruiter
PUT /recruiters/{id} - Edit a recruiter (A1 only)
PATCH /recruiters/{id}/status - Block or unblock a recruiter (A1 only)
DELETE /recruiters/{id} - Delete a recruiter record (A1 only)
"""

from fastapi import APIRouter, Depends

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.schemas.schemas import (
    MutationResponse, RecordListResponse, RecordResponse, RecruiterUpdateRequest
)
from placement_admin.services.management_service import RECRUITERS, RecordManager
from placement_admin.services.record_store import RecordStore, get_record_store

router = APIRouter(prefix="/recruiters", tags=["Recruiters"])


def get_recruiter_manager(store: RecordStore = Depends(get_record_store)) -> RecordManager:
    return RecordManager(store, RECRUITERS)


@router.get("", response_model=RecordListResponse)
async def list_recruiters(
    search: str = "",
    status: str = "all",
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_recruiter_manager),
):
    records = manager.list(ctx, search=search, status=status)
    return RecordListResponse(records=records, total=len(records))


@router.get("/{recruiter_id}", response_model=RecordResponse)
async def get_recruiter(
    recruiter_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_recruiter_manager),
):
    return RecordResponse(record=manager.get(ctx, recruiter_id))


@router.put("/{recruiter_id}", response_model=MutationResponse)
async def edit_recruiter(
    recruiter_id: str,
    data: RecruiterUpdateRequest,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_recruiter_manager),
):
    manager.edit(ctx, recruiter_id, data.to_profile())
    records = manager.list(ctx)
    return MutationResponse(message="Recruiter updated successfully", records=records, total=len(records))


@router.patch("/{recruiter_id}/status", response_model=MutationResponse)
async def toggle_recruiter_status(
    recruiter_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_recruiter_manager),
):
    new_status = manager.toggle_status(ctx, recruiter_id)
    records = manager.list(ctx)
    return MutationResponse(message=f"Recruiter {new_status}", records=records, total=len(records))


@router.delete("/{recruiter_id}", response_model=MutationResponse)
async def delete_recruiter(
    recruiter_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_recruiter_manager),
):
    manager.delete(ctx, recruiter_id)
    records = manager.list(ctx)
    return MutationResponse(message="Recruiter deleted successfully", records=records, total=len(records))
