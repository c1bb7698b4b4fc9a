"""
Authentication Utility - JWT sessions and the per-request session context.

Provides:
- JWT token creation/verification (each token carries a jti so it can be revoked)
- SessionContext: the signed-in admin plus logout(), passed explicitly to
  every service call instead of living in global state
- FastAPI dependency get_session_context for protected routes
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from placement_admin.core.config import get_settings
from placement_admin.core.errors import AccessDeniedError, AuthenticationError
from placement_admin.services.identity_service import IdentityService, get_identity_service
from placement_admin.services.record_store import RecordStore, get_record_store

# Bearer token extractor (errors are raised by us so they share the JSON shape)
bearer_scheme = HTTPBearer(auto_error=False)

LEAD = "A1"
ASSISTANT = "A2"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    role: str
    admin_type: str
    department_code: Optional[str] = None

    @property
    def is_lead(self) -> bool:
        return self.admin_type == LEAD


class SessionContext:
    """Populated when a request authenticates; cleared by logout()."""

    def __init__(self, current_user: CurrentUser, claims: dict, identity: IdentityService):
        self.current_user: Optional[CurrentUser] = current_user
        self._claims = claims
        self._identity = identity

    def logout(self) -> None:
        expires_at = datetime.utcfromtimestamp(int(self._claims["exp"]))
        self._identity.revoke_token(self._claims["jti"], expires_at)
        self.current_user = None


def admin_to_current_user(profile: dict) -> CurrentUser:
    return CurrentUser(
        id=profile["id"],
        email=profile.get("email", ""),
        role="admin",
        admin_type=profile.get("type", ASSISTANT),
        department_code=profile.get("deptCode") or None,
    )


def load_admin_profile(store: RecordStore, user_id: str) -> dict:
    """The admin profile behind an identity, refusing non-admins and blocked admins."""
    profile = store.get("admins", user_id)
    if not profile:
        raise AccessDeniedError("Only admins can sign in to the console")
    if profile.get("status", "active") == "blocked":
        raise AccessDeniedError("Account blocked")
    return profile


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity_service),
    store: RecordStore = Depends(get_record_store),
) -> SessionContext:
    """
    FastAPI dependency - the signed-in admin's session.

    Usage:
        @router.get("/protected")
        async def route(ctx: SessionContext = Depends(get_session_context)):
            return ctx.current_user
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    claims = decode_token(credentials.credentials)
    if not claims or not claims.get("sub") or not claims.get("jti"):
        raise AuthenticationError("Invalid or expired token")

    if identity.is_token_revoked(claims["jti"]):
        raise AuthenticationError("Session has been logged out")

    profile = load_admin_profile(store, claims["sub"])
    return SessionContext(admin_to_current_user(profile), claims, identity)
