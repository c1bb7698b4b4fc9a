"""
Signup Service - single-record account creation.

Flow for every role:
1. Password and confirmation must match (checked here, at submit time)
2. Identity service issues a credential for (email, password)
3. One profile record is written under the issued identity id

The two writes are not atomic: if step 3 fails the identity already exists.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from placement_admin.core.auth import SessionContext
from placement_admin.core.errors import FormValidationError, IdentityError, StoreError
from placement_admin.schemas.schemas import (
    AdminSignupRequest, AdminType, RecruiterSignupRequest, StudentSignupRequest, UserRole
)
from placement_admin.services.access import Capability, require
from placement_admin.services.identity_service import IdentityService
from placement_admin.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Identity error codes with a user-facing message; anything else is generic
IDENTITY_MESSAGES = {
    IdentityError.EMAIL_IN_USE: "Email is already in use",
    IdentityError.INVALID_EMAIL: "Invalid email address",
}


def map_identity_error(exc: IdentityError, role: str) -> IdentityError:
    if exc.code == IdentityError.WEAK_PASSWORD:
        # carries the configured minimum length
        return IdentityError(exc.code, exc.message)
    message = IDENTITY_MESSAGES.get(exc.code, f"Failed to create {role} account")
    return IdentityError(exc.code, message)


def new_profile(fields: Dict[str, Any], identity_id: str, role: str) -> Dict[str, Any]:
    profile = dict(fields)
    profile.update({
        "uid": identity_id,
        "role": role,
        "status": "active",
        "createdAt": datetime.utcnow(),
    })
    return profile


class SignupService:
    def __init__(self, store: RecordStore, identity: IdentityService):
        self.store = store
        self.identity = identity

    def signup_student(self, ctx: SessionContext, request: StudentSignupRequest) -> str:
        require(ctx, Capability.CREATE_STUDENT)
        identity_id = self._create(
            "students", UserRole.student.value, request.email, request.password,
            request.confirm_password, request.to_profile(),
        )
        logger.info("Student %s %s registered", request.first_name, request.last_name)
        return identity_id

    def signup_recruiter(self, ctx: SessionContext, request: RecruiterSignupRequest) -> str:
        require(ctx, Capability.CREATE_RECRUITER)
        identity_id = self._create(
            "recruiters", UserRole.recruiter.value, request.email, request.password,
            request.confirm_password, request.to_profile(),
        )
        logger.info("Recruiter %s registered", request.company_name)
        return identity_id

    def signup_admin(self, ctx: SessionContext, request: AdminSignupRequest) -> str:
        require(ctx, Capability.CREATE_ADMIN)
        identity_id = self._create(
            "admins", UserRole.admin.value, request.email, request.password,
            request.confirm_password, request.to_profile(),
        )
        logger.info("Admin %s (%s) created", request.username, request.type.value)
        return identity_id

    def bootstrap_admin(self, request: AdminSignupRequest) -> str:
        """First lead admin, created from the command line without a session."""
        if request.type != AdminType.lead:
            raise FormValidationError("type", "The first admin must be a lead (A1)")
        if self.store.list_where("admins", "type", AdminType.lead.value):
            raise FormValidationError("type", "A lead admin already exists")
        identity_id = self._create(
            "admins", UserRole.admin.value, request.email, request.password,
            request.confirm_password, request.to_profile(),
        )
        logger.info("Bootstrap admin %s created", request.username)
        return identity_id

    def _create(
        self,
        collection: str,
        role: str,
        email: str,
        password: str,
        confirm_password: str,
        fields: Dict[str, Any],
    ) -> str:
        if password != confirm_password:
            raise FormValidationError("confirmPassword", "Passwords don't match")

        try:
            identity_id = self.identity.issue_credential(email, password, role)
        except IdentityError as exc:
            logger.warning("%s signup refused for %s: %s", role, email, exc.code)
            raise map_identity_error(exc, role) from exc

        try:
            self.store.insert_with_id(collection, identity_id, new_profile(fields, identity_id, role))
        except StoreError as exc:
            logger.error("Identity %s issued but %s profile write failed", identity_id, role)
            raise StoreError(f"Failed to create {role} account") from exc
        return identity_id
