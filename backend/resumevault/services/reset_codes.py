"""
Reset-Code Service.

Issues short-lived numeric codes for password resets. Delivery is the
operational log; a mail or SMS gateway would replace the logger call.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from sqlalchemy.orm import Session

from resumevault.core.config import settings
from resumevault.core.errors import (
    ExpiredCodeError,
    InvalidCodeError,
    NotFoundError,
    ValidationError,
)
from resumevault.core.logging import get_logger
from resumevault.core.security import get_password_hash
from resumevault.services.credentials import get_user_by_email

logger = get_logger("reset_codes")

CODE_MIN = 100000
CODE_MAX = 999999


def _utcnow() -> datetime:
    # Stored as naive UTC; SQLite drops tzinfo anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_reset_code() -> int:
    """Uniformly random six-digit code."""
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


def request_reset(db: Session, email: Optional[str], now: Optional[datetime] = None) -> int:
    """
    Issue a reset code for the account and return its lifetime in seconds.

    Raises:
        NotFoundError: no account with this email
    """
    user = get_user_by_email(db, email) if email else None
    if not user:
        raise NotFoundError("User not found")

    now = now or _utcnow()
    expires_in = settings.RESET_CODE_EXPIRE_SECONDS
    code = generate_reset_code()

    user.reset_code = code
    user.reset_code_expiry = now + timedelta(seconds=expires_in)
    db.commit()

    logger.info(f"Send OTP {code} to {email}")
    return expires_in


def verify_code(
    db: Session,
    email: Optional[str],
    code: Union[int, str, None],
    now: Optional[datetime] = None,
) -> None:
    """
    Check a submitted code against the stored one.

    The match is checked before the expiry, so an unknown code is always
    reported as invalid rather than expired.

    Raises:
        InvalidCodeError: no account with this email holds this code
        ExpiredCodeError: the code matched but its expiry has passed
    """
    user = get_user_by_email(db, email) if email else None
    submitted = str(code) if code is not None else ""

    if not user or user.reset_code is None or str(user.reset_code) != submitted:
        logger.warning(f"Invalid reset code submitted for <{email}>")
        raise InvalidCodeError("Invalid code")

    now = now or _utcnow()
    if user.reset_code_expiry is None or now > user.reset_code_expiry:
        raise ExpiredCodeError("Code expired")


def reset_password(
    db: Session,
    email: Optional[str],
    new_password: Optional[str],
    code: Union[int, str, None] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Replace the account's password and clear any pending reset code.

    A code is only re-checked when one is supplied, unless
    RESET_REQUIRES_CODE is enabled.

    Raises:
        NotFoundError: no account with this email
        ValidationError: missing password, or missing code when one is required
        InvalidCodeError / ExpiredCodeError: a supplied code does not verify
    """
    user = get_user_by_email(db, email) if email else None
    if not user:
        raise NotFoundError("User not found")

    if not new_password or not new_password.strip():
        raise ValidationError("Password is required")

    if code is None and settings.RESET_REQUIRES_CODE:
        raise ValidationError("Reset code is required")

    if code is not None:
        verify_code(db, email, code, now=now)

    user.hashed_password = get_password_hash(new_password)
    user.reset_code = None
    user.reset_code_expiry = None
    db.commit()

    logger.info(f"Password reset for user {user.id}")
