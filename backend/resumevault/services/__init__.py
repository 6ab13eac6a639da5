from resumevault.services.credentials import (
    Role,
    authenticate,
    issue_access_token,
    login,
    register,
    verify_access_token,
)
from resumevault.services.extraction import extract_resume_text
from resumevault.services.profile import (
    UploadedFile,
    delete_user,
    derive_resume_uploaded,
    get_profile,
    profile_image_url,
    summarize_users,
    upload,
)
from resumevault.services.reset_codes import request_reset, reset_password, verify_code

__all__ = [
    "Role",
    "authenticate",
    "issue_access_token",
    "login",
    "register",
    "verify_access_token",
    "extract_resume_text",
    "UploadedFile",
    "delete_user",
    "derive_resume_uploaded",
    "get_profile",
    "profile_image_url",
    "summarize_users",
    "upload",
    "request_reset",
    "reset_password",
    "verify_code",
]
