"""
Credential Service.

Registers accounts, authenticates email/password pairs and issues or verifies
access tokens. Two credential kinds exist: the admin account configured in
settings, and users stored in the database. Both end in the same token
issuance path.
"""

import re
import secrets
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resumevault.core.config import settings
from resumevault.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    UnauthorizedError,
    ValidationError,
)
from resumevault.core.logging import get_logger
from resumevault.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from resumevault.models import User

logger = get_logger("credentials")

EMAIL_PATTERN = r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class CredentialKind(str, Enum):
    CONFIGURED_ADMIN = "configured_admin"
    STORED_USER = "stored_user"


@dataclass(frozen=True)
class Principal:
    """Result of a successful authentication."""

    kind: CredentialKind
    role: Role
    ttl: timedelta
    user: Optional[User] = None

    @property
    def claims(self) -> dict:
        claims = {"role": self.role.value}
        if self.user is not None:
            claims["sub"] = str(self.user.id)
        return claims


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims carried by an access token."""

    role: Role
    user_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


# ============== Lookups ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Get a user by primary key."""
    return db.query(User).filter(User.id == user_id).first()


# ============== Registration ==============


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def register(db: Session, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
    """
    Create a new user account.

    Raises:
        ValidationError: a field is missing or the email is malformed
        ConflictError: the email is already registered
    """
    if not _present(name) or not _present(email) or not _present(password):
        raise ValidationError("All fields are required")

    if not re.fullmatch(EMAIL_PATTERN, email):
        raise ValidationError("Invalid email format")

    if get_user_by_email(db, email):
        raise ConflictError("User already exists")

    new_user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        resume_uploaded=False,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        db.rollback()
        raise ConflictError("User already exists")
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id} <{new_user.email}>")
    return new_user


# ============== Authentication ==============


def _admin_configured() -> bool:
    return bool(settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD)


def _matches_admin(email: str, password: str) -> bool:
    if not _admin_configured():
        return False
    email_ok = secrets.compare_digest(email.encode(), settings.ADMIN_EMAIL.encode())
    password_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return email_ok and password_ok


def authenticate(db: Session, email: str, password: str) -> Principal:
    """
    Resolve an email/password pair to a Principal.

    The configured admin pair is checked first and never touches the
    database. Otherwise the stored user's bcrypt hash is verified.

    Raises:
        InvalidCredentialsError: unknown email or wrong password
    """
    if _matches_admin(email, password):
        return Principal(
            kind=CredentialKind.CONFIGURED_ADMIN,
            role=Role.ADMIN,
            ttl=timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES),
        )

    user = get_user_by_email(db, email)
    if not user:
        raise InvalidCredentialsError("User does not exist")

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError("Invalid credentials")

    return Principal(
        kind=CredentialKind.STORED_USER,
        role=Role.USER,
        ttl=timedelta(minutes=settings.USER_TOKEN_EXPIRE_MINUTES),
        user=user,
    )


def issue_access_token(principal: Principal) -> str:
    """Sign a token carrying the principal's claims for its TTL."""
    return create_access_token(principal.claims, expires_delta=principal.ttl)


def login(db: Session, email: Optional[str], password: Optional[str]) -> tuple[str, Principal]:
    """Authenticate and issue a token in one step."""
    if not email or not password:
        raise ValidationError("Email and password are required")

    try:
        principal = authenticate(db, email, password)
    except InvalidCredentialsError as e:
        logger.warning(f"Failed login for <{email}>: {e.detail}")
        raise

    token = issue_access_token(principal)
    if principal.role is Role.ADMIN:
        logger.info("Admin login")
    else:
        logger.info(f"User {principal.user.id} logged in")
    return token, principal


# ============== Verification ==============


def verify_access_token(token: str) -> TokenClaims:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        UnauthorizedError: bad signature, expired, or malformed claims
    """
    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Could not validate credentials")

    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise UnauthorizedError("Could not validate credentials")

    user_id = None
    subject = payload.get("sub")
    if subject is not None:
        if not str(subject).isdigit():
            raise UnauthorizedError("Could not validate credentials")
        user_id = int(subject)

    if role is Role.USER and user_id is None:
        raise UnauthorizedError("Could not validate credentials")

    return TokenClaims(role=role, user_id=user_id)
