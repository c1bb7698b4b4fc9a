"""
Authentication Routes

POST /auth/login - Login and get JWT token (admins only)
POST /auth/logout - Revoke the current token
GET /auth/me - Get the signed-in admin
"""

import logging

from fastapi import APIRouter, Depends

from placement_admin.core.auth import (
    SessionContext, admin_to_current_user, create_access_token, get_session_context, load_admin_profile
)
from placement_admin.core.errors import AuthenticationError
from placement_admin.schemas.schemas import CurrentUserResponse, LoginRequest, MessageResponse, TokenResponse
from placement_admin.services.identity_service import IdentityService, get_identity_service
from placement_admin.services.record_store import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
    store: RecordStore = Depends(get_record_store),
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    account = identity.authenticate(request.email, request.password)
    if not account:
        logger.info("Failed login for %s", request.email)
        raise AuthenticationError("Invalid email or password")

    user = admin_to_current_user(load_admin_profile(store, account["user_id"]))
    token = create_access_token(data={"sub": user.id, "role": user.role, "type": user.admin_type})
    logger.info("Admin %s (%s) signed in", user.email, user.admin_type)

    return TokenResponse(
        access_token=token,
        user_id=user.id,
        role=user.role,
        admin_type=user.admin_type,
        department_code=user.department_code,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(ctx: SessionContext = Depends(get_session_context)):
    """Revoke the presented token; later requests with it get 401."""
    email = ctx.current_user.email
    ctx.logout()
    logger.info("Admin %s signed out", email)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(ctx: SessionContext = Depends(get_session_context)):
    """Get current authenticated admin's info."""
    user = ctx.current_user
    return CurrentUserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        admin_type=user.admin_type,
        department_code=user.department_code,
    )
