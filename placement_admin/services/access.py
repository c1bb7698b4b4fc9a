"""
Access Policy - capability checks for the console.

A1 (Lead) admins may do everything. A2 (Assistant) admins work inside their
own department: student and message listings are scoped to it, records from
other departments are refused, and recruiter signup, recruiter changes and
the admin screens are off limits. Checks run in the service layer, so hiding
a tab in the UI is presentation only.
"""

from enum import Enum
from typing import List, Optional

from placement_admin.core.auth import SessionContext
from placement_admin.core.departments import DEPARTMENT_CODES
from placement_admin.core.errors import AccessDeniedError, AuthenticationError


class Capability(str, Enum):
    CREATE_STUDENT = "create_student"
    IMPORT_STUDENTS = "import_students"
    CREATE_RECRUITER = "create_recruiter"
    VIEW_STUDENTS = "view_students"
    MANAGE_STUDENTS = "manage_students"
    VIEW_RECRUITERS = "view_recruiters"
    MANAGE_RECRUITERS = "manage_recruiters"
    CREATE_ADMIN = "create_admin"
    VIEW_ADMINS = "view_admins"
    MANAGE_ADMINS = "manage_admins"
    VIEW_MESSAGES = "view_messages"
    MANAGE_MESSAGES = "manage_messages"


LEAD_ONLY = frozenset({
    Capability.CREATE_RECRUITER,
    Capability.MANAGE_RECRUITERS,
    Capability.CREATE_ADMIN,
    Capability.VIEW_ADMINS,
    Capability.MANAGE_ADMINS,
})

# Dashboard tab -> capability needed to see it
TABS = [
    ("students", Capability.VIEW_STUDENTS),
    ("recruiters", Capability.VIEW_RECRUITERS),
    ("createAdmin", Capability.CREATE_ADMIN),
    ("studentSignup", Capability.CREATE_STUDENT),
    ("recruiterSignup", Capability.CREATE_RECRUITER),
    ("totalAdmin", Capability.VIEW_ADMINS),
    ("messages", Capability.VIEW_MESSAGES),
]


def _user(ctx: SessionContext):
    if ctx is None or ctx.current_user is None:
        raise AuthenticationError("Not authenticated")
    return ctx.current_user


def allows(ctx: SessionContext, capability: Capability) -> bool:
    user = _user(ctx)
    return user.is_lead or capability not in LEAD_ONLY


def require(ctx: SessionContext, capability: Capability) -> None:
    if not allows(ctx, capability):
        raise AccessDeniedError("You do not have access to this action")


def department_scope(ctx: SessionContext, requested: Optional[str]) -> Optional[str]:
    """
    Department code a listing is restricted to.

    Leads get what they asked for (None means every department); assistants
    always get their own department and may not ask for another one.
    """
    user = _user(ctx)
    requested = (requested or "").strip() or None
    if requested is not None and requested not in DEPARTMENT_CODES:
        raise AccessDeniedError(f"Unknown department code '{requested}'")
    if user.is_lead:
        return requested
    if requested is not None and requested != user.department_code:
        raise AccessDeniedError("You can only view your own department")
    return user.department_code


def require_in_scope(ctx: SessionContext, record_department: Optional[str]) -> None:
    user = _user(ctx)
    if user.is_lead:
        return
    if not record_department or record_department != user.department_code:
        raise AccessDeniedError("This record belongs to another department")


def visible_tabs(ctx: SessionContext) -> List[str]:
    return [tab for tab, capability in TABS if allows(ctx, capability)]
