"""
Record Management Service - list/search/filter/edit/block/delete.

Each listing fetches the whole collection (or one department of it) from the
store and filters in memory:
- search: case-insensitive substring, OR across the view's search fields
- status: exact match, AND with the search ("all" disables it)

Every mutation re-reads the collection afterwards; nothing is patched in a
local cache. Concurrent editors race with last-write-wins at the store.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from placement_admin.core.auth import SessionContext
from placement_admin.core.errors import FormValidationError, RecordNotFoundError, StoreError
from placement_admin.services.access import Capability, department_scope, require, require_in_scope
from placement_admin.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ACTIVE = "active"
BLOCKED = "blocked"
NEW = "new"
VIEWED = "viewed"

STUDENT_EXPORT_COLUMNS = [
    "registrationNo", "firstName", "middleName", "lastName", "email", "phone",
    "gender", "dob", "tenthPercentage", "twelfthPercentage", "cgpa", "backlogs",
    "branch", "branchCode",
]
STUDENT_EXPORT_FILENAME = "students.csv"


@dataclass(frozen=True)
class CollectionView:
    collection: str
    label: str
    search_fields: Tuple[str, ...]
    statuses: Tuple[str, ...]
    default_status: str
    view_capability: Capability
    manage_capability: Capability
    scope_field: Optional[str] = None


STUDENTS = CollectionView(
    collection="students",
    label="student",
    search_fields=("firstName", "lastName", "email"),
    statuses=(ACTIVE, BLOCKED),
    default_status=ACTIVE,
    view_capability=Capability.VIEW_STUDENTS,
    manage_capability=Capability.MANAGE_STUDENTS,
    scope_field="branchCode",
)

RECRUITERS = CollectionView(
    collection="recruiters",
    label="recruiter",
    search_fields=("companyName", "email"),
    statuses=(ACTIVE, BLOCKED),
    default_status=ACTIVE,
    view_capability=Capability.VIEW_RECRUITERS,
    manage_capability=Capability.MANAGE_RECRUITERS,
)

ADMINS = CollectionView(
    collection="admins",
    label="admin",
    search_fields=("email", "username"),
    statuses=(ACTIVE, BLOCKED),
    default_status=ACTIVE,
    view_capability=Capability.VIEW_ADMINS,
    manage_capability=Capability.MANAGE_ADMINS,
)

MESSAGES = CollectionView(
    collection="contactSubmissions",
    label="message",
    search_fields=("name", "email", "message"),
    statuses=(NEW, VIEWED),
    default_status=NEW,
    view_capability=Capability.VIEW_MESSAGES,
    manage_capability=Capability.MANAGE_MESSAGES,
    scope_field="departmentCode",
)


def filter_records(
    records: Iterable[dict],
    search_fields: Iterable[str],
    search: str = "",
    status: Optional[str] = None,
    default_status: str = ACTIVE,
) -> List[dict]:
    """Client-side style filtering: substring OR over fields, AND exact status."""
    term = (search or "").strip().lower()
    wanted = None if not status or status == "all" else status
    fields = tuple(search_fields)

    result = []
    for record in records:
        if term and not any(term in str(record.get(field) or "").lower() for field in fields):
            continue
        if wanted is not None and record.get("status", default_status) != wanted:
            continue
        result.append(record)
    return result


def _created_at(record: dict) -> datetime:
    value = record.get("createdAt")
    return value if isinstance(value, datetime) else datetime.min


class RecordManager:
    """Management operations for one collection, checked against the session."""

    def __init__(self, store: RecordStore, view: CollectionView):
        self.store = store
        self.view = view

    # ---------------------------------------------------------------- reads

    def fetch(self, ctx: SessionContext, scope: Optional[str] = None) -> List[dict]:
        require(ctx, self.view.view_capability)
        scope_value = None
        if self.view.scope_field:
            scope_value = department_scope(ctx, scope)

        try:
            if scope_value:
                records = self.store.list_where(self.view.collection, self.view.scope_field, scope_value)
            else:
                records = self.store.list_all(self.view.collection)
        except StoreError as exc:
            raise StoreError(f"Failed to fetch {self.view.label}s") from exc

        for record in records:
            record.setdefault("status", self.view.default_status)
        return sorted(records, key=_created_at, reverse=True)

    def list(
        self,
        ctx: SessionContext,
        search: str = "",
        status: Optional[str] = "all",
        scope: Optional[str] = None,
    ) -> List[dict]:
        records = self.fetch(ctx, scope)
        return filter_records(records, self.view.search_fields, search, status, self.view.default_status)

    def get(self, ctx: SessionContext, record_id: str) -> dict:
        require(ctx, self.view.view_capability)
        return self._load(ctx, record_id)

    # ------------------------------------------------------------ mutations

    def toggle_status(self, ctx: SessionContext, record_id: str) -> str:
        """Flip active <-> blocked. Returns the new status."""
        require(ctx, self.view.manage_capability)
        record = self._load(ctx, record_id)
        current = record.get("status", self.view.default_status)
        new_status = BLOCKED if current == ACTIVE else ACTIVE
        self._update(record_id, {"status": new_status}, f"update {self.view.label} status")
        logger.info("%s %s: %s -> %s", self.view.label, record_id, current, new_status)
        return new_status

    def set_status(self, ctx: SessionContext, record_id: str, status: str) -> str:
        require(ctx, self.view.manage_capability)
        if status not in self.view.statuses:
            raise FormValidationError("status", f"Unknown {self.view.label} status '{status}'")
        self._load(ctx, record_id)
        self._update(record_id, {"status": status}, f"update {self.view.label} status")
        logger.info("%s %s marked %s", self.view.label, record_id, status)
        return status

    def edit(self, ctx: SessionContext, record_id: str, fields: Dict[str, Any]) -> None:
        """Replace the record's editable fields."""
        require(ctx, self.view.manage_capability)
        self._load(ctx, record_id)
        if self.view.scope_field:
            require_in_scope(ctx, fields.get(self.view.scope_field))
        self._update(record_id, fields, f"update {self.view.label}")
        logger.info("%s %s edited", self.view.label, record_id)

    def delete(self, ctx: SessionContext, record_id: str) -> None:
        require(ctx, self.view.manage_capability)
        self._load(ctx, record_id)
        try:
            deleted = self.store.delete(self.view.collection, record_id)
        except StoreError as exc:
            raise StoreError(f"Failed to delete {self.view.label}") from exc
        if not deleted:
            raise RecordNotFoundError(f"{self.view.label.capitalize()} not found")
        logger.info("%s %s deleted", self.view.label, record_id)

    # -------------------------------------------------------------- helpers

    def _load(self, ctx: SessionContext, record_id: str) -> dict:
        try:
            record = self.store.get(self.view.collection, record_id)
        except StoreError as exc:
            raise StoreError(f"Failed to fetch {self.view.label}") from exc
        if not record:
            raise RecordNotFoundError(f"{self.view.label.capitalize()} not found")
        if self.view.scope_field:
            require_in_scope(ctx, record.get(self.view.scope_field))
        return record

    def _update(self, record_id: str, fields: Dict[str, Any], action: str) -> None:
        try:
            matched = self.store.update(self.view.collection, record_id, fields)
        except StoreError as exc:
            raise StoreError(f"Failed to {action}") from exc
        if not matched:
            raise RecordNotFoundError(f"{self.view.label.capitalize()} not found")


class MessageManager(RecordManager):
    """Contact submissions: opening a new message marks it viewed."""

    def __init__(self, store: RecordStore):
        super().__init__(store, MESSAGES)

    def expand(self, ctx: SessionContext, record_id: str) -> dict:
        """Open a message. A `new` message moves to `viewed` exactly once."""
        require(ctx, self.view.view_capability)
        record = self._load(ctx, record_id)
        if record.get("status", NEW) == NEW:
            self._update(record_id, {"status": VIEWED}, "update message status")
            logger.info("message %s viewed", record_id)
            record = self._load(ctx, record_id)
        return record

    def set_status(self, ctx: SessionContext, record_id: str, status: str) -> str:
        """Messages only move forward: new -> viewed."""
        require(ctx, self.view.manage_capability)
        record = self._load(ctx, record_id)
        if status == NEW and record.get("status", NEW) == VIEWED:
            raise FormValidationError("status", "A viewed message cannot be marked new")
        return super().set_status(ctx, record_id, status)


def students_to_csv(records: Iterable[dict]) -> str:
    """Flat CSV of student records in the fixed export column order."""
    rows = [{column: record.get(column, "") for column in STUDENT_EXPORT_COLUMNS} for record in records]
    frame = pd.DataFrame(rows, columns=STUDENT_EXPORT_COLUMNS)
    return frame.fillna("").to_csv(index=False)
