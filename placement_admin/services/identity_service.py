"""
Identity Service - issues credentials and checks them at login.

One row per identity in the `identities` table (email + bcrypt hash + role).
The identity id is the key every profile record is stored under.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from passlib.context import CryptContext
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from placement_admin.core.config import get_settings
from placement_admin.core.errors import IdentityError
from placement_admin.db.postgres import get_db_session, get_session_factory, init_identity_schema

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


class IdentityService:
    """
    Credential-issuing service.

    issue_credential() fails with IdentityError carrying one of
    EMAIL_IN_USE, INVALID_EMAIL, WEAK_PASSWORD or UNKNOWN.
    """

    def __init__(self, session_factory: sessionmaker = None):
        self.session_factory = session_factory or get_session_factory()

    def init_schema(self) -> None:
        init_identity_schema(self.session_factory.kw["bind"])

    def issue_credential(self, email: str, password: str, role: str) -> str:
        """Create an identity and return its id."""
        email = normalize_email(email)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            raise IdentityError(IdentityError.INVALID_EMAIL, "Invalid email address")

        min_length = get_settings().min_identity_password_length
        if len(password or "") < min_length:
            raise IdentityError(
                IdentityError.WEAK_PASSWORD,
                f"Password should be at least {min_length} characters",
            )

        user_id = uuid.uuid4().hex
        try:
            with get_db_session(self.session_factory) as db:
                existing = db.execute(
                    text("SELECT user_id FROM identities WHERE email = :email"),
                    {"email": email}
                ).fetchone()
                if existing:
                    raise IdentityError(IdentityError.EMAIL_IN_USE, "Email is already in use")

                db.execute(
                    text("""
                        INSERT INTO identities (user_id, email, password_hash, role, created_at)
                        VALUES (:user_id, :email, :password_hash, :role, :created_at)
                    """),
                    {
                        "user_id": user_id,
                        "email": email,
                        "password_hash": hash_password(password),
                        "role": role,
                        "created_at": datetime.utcnow(),
                    }
                )
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise IdentityError(IdentityError.EMAIL_IN_USE, "Email is already in use")
        except SQLAlchemyError as exc:
            logger.exception("Identity insert failed for %s", email)
            raise IdentityError(IdentityError.UNKNOWN, "Identity service unavailable") from exc

        logger.info("Issued %s identity %s", role, user_id)
        return user_id

    def check_email_registered(self, email: str) -> bool:
        with get_db_session(self.session_factory) as db:
            row = db.execute(
                text("SELECT 1 FROM identities WHERE email = :email"),
                {"email": normalize_email(email)}
            ).fetchone()
        return row is not None

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """Return {user_id, email, role} when the password matches, else None."""
        with get_db_session(self.session_factory) as db:
            row = db.execute(
                text("SELECT user_id, email, password_hash, role FROM identities WHERE email = :email"),
                {"email": normalize_email(email)}
            ).fetchone()

        if not row or not verify_password(password, row[2]):
            return None
        return {"user_id": row[0], "email": row[1], "role": row[3]}

    def revoke_token(self, jti: str, expires_at: datetime) -> None:
        with get_db_session(self.session_factory) as db:
            already = db.execute(
                text("SELECT 1 FROM revoked_tokens WHERE jti = :jti"), {"jti": jti}
            ).fetchone()
            if not already:
                db.execute(
                    text("INSERT INTO revoked_tokens (jti, expires_at) VALUES (:jti, :expires_at)"),
                    {"jti": jti, "expires_at": expires_at}
                )

    def is_token_revoked(self, jti: str) -> bool:
        with get_db_session(self.session_factory) as db:
            row = db.execute(
                text("SELECT 1 FROM revoked_tokens WHERE jti = :jti"), {"jti": jti}
            ).fetchone()
        return row is not None


def get_identity_service() -> IdentityService:
    """FastAPI dependency; overridden in tests."""
    return IdentityService()
