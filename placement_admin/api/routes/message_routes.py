"""
Message Routes - contact-form submissions seen by admins

GET /messages - List messages (search, status, department filters)
GET /messages/{id} - Open a message (new -> viewed)
PATCH /messages/{id}/status - Mark a message viewed (viewed never goes back to new)
DELETE /messages/{id} - Delete a message
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.schemas.schemas import (
    MessageStatusUpdate, MutationResponse, RecordListResponse, RecordResponse
)
from placement_admin.services.management_service import MessageManager
from placement_admin.services.record_store import RecordStore, get_record_store

router = APIRouter(prefix="/messages", tags=["Messages"])


def get_message_manager(store: RecordStore = Depends(get_record_store)) -> MessageManager:
    return MessageManager(store)


@router.get("", response_model=RecordListResponse)
async def list_messages(
    search: str = "",
    status: str = "all",
    department: Optional[str] = Query(None, description="Department code, e.g. IT"),
    ctx: SessionContext = Depends(get_session_context),
    manager: MessageManager = Depends(get_message_manager),
):
    records = manager.list(ctx, search=search, status=status, scope=department)
    return RecordListResponse(records=records, total=len(records))


@router.get("/{message_id}", response_model=RecordResponse)
async def open_message(
    message_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: MessageManager = Depends(get_message_manager),
):
    return RecordResponse(record=manager.expand(ctx, message_id))


@router.patch("/{message_id}/status", response_model=MutationResponse)
async def set_message_status(
    message_id: str,
    data: MessageStatusUpdate,
    ctx: SessionContext = Depends(get_session_context),
    manager: MessageManager = Depends(get_message_manager),
):
    status = manager.set_status(ctx, message_id, data.status.value)
    records = manager.list(ctx)
    return MutationResponse(message=f"Message marked {status}", records=records, total=len(records))


@router.delete("/{message_id}", response_model=MutationResponse)
async def delete_message(
    message_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: MessageManager = Depends(get_message_manager),
):
    manager.delete(ctx, message_id)
    records = manager.list(ctx)
    return MutationResponse(message="Message deleted successfully", records=records, total=len(records))
