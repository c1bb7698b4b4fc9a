"""
Contact Routes (public)

POST /contact - Leave a message for the placement cell
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from placement_admin.core.errors import StoreError
from placement_admin.schemas.schemas import ContactSubmissionRequest, SignupResponse
from placement_admin.services.management_service import MESSAGES, NEW
from placement_admin.services.record_store import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=SignupResponse, status_code=201)
async def submit_contact(data: ContactSubmissionRequest, store: RecordStore = Depends(get_record_store)):
    """Store a contact-form message with status `new`. No login required."""
    fields = data.model_dump(by_alias=True)
    fields.update({"status": NEW, "createdAt": datetime.utcnow()})
    try:
        message_id = store.insert(MESSAGES.collection, fields)
    except StoreError as exc:
        raise StoreError("Failed to send message") from exc

    logger.info("Contact message %s received for %s", message_id, data.department_code or "all departments")
    return SignupResponse(id=message_id, message="Message sent successfully")
