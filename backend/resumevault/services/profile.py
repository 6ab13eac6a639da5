"""
Profile/Upload Orchestrator.

Attaches resume text and a profile photo to a user and derives the view
fields shared by login, profile and admin responses.
"""

import base64
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from resumevault.core.config import settings
from resumevault.core.errors import NotFoundError, ValidationError
from resumevault.core.logging import get_logger
from resumevault.models import User
from resumevault.services.credentials import get_user_by_id
from resumevault.services.extraction import extract_resume_text

logger = get_logger("profile")

# Leading base64 characters of the JPEG (FF D8 FF) and PNG (89 50 4E 47) magic bytes
JPEG_BASE64_PREFIX = "/9j/"
PNG_BASE64_PREFIX = "iVBOR"


@dataclass
class UploadedFile:
    """An uploaded file already read into memory."""

    filename: str
    content_type: str
    data: bytes


@dataclass
class UploadStats:
    total_users: int
    resumes_uploaded: int
    pending_uploads: int
    users: list[User] = field(default_factory=list)


# ============== View Derivation ==============


def derive_resume_uploaded(user: User) -> bool:
    """
    Canonical rule for the resume_uploaded view field.

    A submitted resume counts even when no text could be extracted from it,
    so an upload always yields True here. The stored column is only a cache.
    """
    return user.resume_text is not None and user.photo is not None


def profile_image_url(photo: Optional[str]) -> str:
    """Build a displayable URL for the stored photo value."""
    if not photo:
        return settings.DEFAULT_AVATAR_PATH

    if photo.startswith(JPEG_BASE64_PREFIX):
        return f"data:image/jpeg;base64,{photo}"
    if photo.startswith(PNG_BASE64_PREFIX):
        return f"data:image/png;base64,{photo}"

    # Older records hold a filename served from the uploads folder
    base = settings.PUBLIC_BASE_URL.rstrip("/")
    return f"{base}/uploads/{photo}"


def _sync_resume_uploaded(user: User) -> None:
    user.resume_uploaded = derive_resume_uploaded(user)


# ============== Operations ==============


def get_profile(db: Session, user_id: int) -> User:
    """
    Raises:
        NotFoundError: no user with this id
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def upload(
    db: Session,
    user_id: int,
    resume: Optional[UploadedFile],
    photo: Optional[UploadedFile],
) -> User:
    """
    Store extracted resume text and the base64 photo on the user.

    Both files are required. Text is extracted before the record is touched,
    so a failing extractor leaves the stored profile as it was.

    Raises:
        ValidationError: resume or photo missing
        NotFoundError: no user with this id
        ExtractionError: the resume could not be parsed
    """
    if resume is None or photo is None:
        raise ValidationError("Resume and photo are required")

    user = get_profile(db, user_id)

    resume_text = extract_resume_text(resume.content_type, resume.data)
    encoded_photo = base64.b64encode(photo.data).decode("ascii")

    user.resume_text = resume_text
    user.photo = encoded_photo
    _sync_resume_uploaded(user)
    db.commit()
    db.refresh(user)

    logger.info(
        f"User {user.id} uploaded resume {resume.filename} ({resume.content_type}, "
        f"{len(resume_text)} chars) and photo {photo.filename} ({len(photo.data)} bytes)"
    )
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def summarize_users(db: Session) -> UploadStats:
    """Upload counts and the user list for the admin dashboard."""
    users = list_users(db)
    uploaded = sum(1 for user in users if derive_resume_uploaded(user))
    return UploadStats(
        total_users=len(users),
        resumes_uploaded=uploaded,
        pending_uploads=len(users) - uploaded,
        users=users,
    )


def delete_user(db: Session, user_id: int) -> None:
    """
    Raises:
        NotFoundError: no user with this id
    """
    user = get_profile(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")
