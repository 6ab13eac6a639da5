"""
Profile API endpoints.

Resume and photo upload, own-profile retrieval and lookup by id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from resumevault.api.v1.auth import (
    UserProfile,
    get_current_claims,
    get_current_user,
)
from resumevault.core.config import settings
from resumevault.core.errors import ServiceError
from resumevault.db.session import get_db
from resumevault.models import User
from resumevault.services import profile as profile_service
from resumevault.services.credentials import TokenClaims

router = APIRouter()


class UploadResponse(BaseModel):
    message: str = "Resume & Photo uploaded successfully"
    user: UserProfile


class ProfileResponse(BaseModel):
    user: UserProfile


def _read_upload(upload: Optional[UploadFile]) -> Optional[profile_service.UploadedFile]:
    # Browsers send an empty part with no filename when nothing was chosen
    if upload is None or not upload.filename:
        return None
    return profile_service.UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "",
        data=upload.file.read(),
    )


@router.post("/upload", response_model=UploadResponse)
def upload_profile(
    resume: Optional[UploadFile] = File(None),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Upload a resume (PDF or Word) and a profile photo.

    Both parts are required. Resume text is extracted and stored; the photo
    is stored base64-encoded.
    """
    try:
        resume_file = _read_upload(resume)
        photo_file = _read_upload(photo)
        user = profile_service.upload(db, current_user.id, resume_file, photo_file)
    except ServiceError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing upload: {str(e)}",
        )

    return UploadResponse(user=UserProfile.from_user(user))


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile."""
    return ProfileResponse(user=UserProfile.from_user(current_user))


@router.get("/users/{user_id}", response_model=ProfileResponse)
def get_user(
    user_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Get any user by id.

    Open to every valid token unless ENFORCE_USER_OWNERSHIP is set, in which
    case only the owner or an admin may read the record.
    """
    if settings.ENFORCE_USER_OWNERSHIP and not claims.is_admin and claims.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    user = profile_service.get_profile(db, user_id)
    return ProfileResponse(user=UserProfile.from_user(user))
