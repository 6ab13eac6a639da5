"""
Authentication API endpoints.

Handles registration, login with JWT token generation, and the password
reset flow. Also hosts the access-control dependencies used by the other
routers.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from resumevault.core.config import settings
from resumevault.core.errors import UnauthorizedError
from resumevault.db.session import get_db
from resumevault.models import User
from resumevault.services import credentials, reset_codes
from resumevault.services.credentials import Role, TokenClaims
from resumevault.services.profile import derive_resume_uploaded, profile_image_url

router = APIRouter()

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/login")


# ============== Pydantic Schemas ==============


class RegisterRequest(BaseModel):
    """Schema for user registration. Presence is checked by the service."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    """Public view of a user (no password, no reset code)."""

    id: int
    name: str
    email: str
    resume_uploaded: bool
    profile_image: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            resume_uploaded=derive_resume_uploaded(user),
            profile_image=profile_image_url(user.photo),
        )


class UserProfile(UserSummary):
    """Full profile view including resume text and raw photo."""

    resume_text: Optional[str] = None
    photo: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        summary = UserSummary.from_user(user)
        return cls(
            **summary.model_dump(),
            resume_text=user.resume_text,
            photo=user.photo,
        )


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserSummary


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"
    role: str
    user: Optional[UserSummary] = None  # absent for the configured admin


class MessageResponse(BaseModel):
    message: str


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ForgotPasswordResponse(BaseModel):
    message: str = "Reset code sent to email"
    expires_in: int


class VerifyCodeRequest(BaseModel):
    email: Optional[str] = None
    code: Optional[Union[int, str]] = None


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    code: Optional[Union[int, str]] = None


# ============== Access Control ==============


def get_current_claims(
    request: Request,
    token: str = Depends(oauth2_scheme),
) -> TokenClaims:
    """
    Dependency that authenticates the bearer token.

    Verified claims are attached to request.state.claims.
    """
    try:
        claims = credentials.verify_access_token(token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.claims = claims
    return claims


def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> User:
    """Dependency that resolves a user token to its stored account."""
    if claims.role is not Role.USER or claims.user_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account required",
        )

    user = credentials.get_user_by_id(db, claims.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return user


def require_admin(
    claims: TokenClaims = Depends(get_current_claims),
) -> TokenClaims:
    """Dependency that only lets admin tokens through."""
    if not claims.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admins only",
        )
    return claims


# ============== API Endpoints ==============


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user account."""
    user = credentials.register(db, user_data.name, user_data.email, user_data.password)
    return RegisterResponse(user=UserSummary.from_user(user))


@router.post("/login", response_model=Token)
def login(form_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Login and get a JWT access token.

    The configured admin pair yields an admin token without a user; any
    other pair is checked against the stored account.
    """
    access_token, principal = credentials.login(db, form_data.email, form_data.password)

    user_view = UserSummary.from_user(principal.user) if principal.user is not None else None
    return Token(access_token=access_token, role=principal.role.value, user=user_view)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Issue a one-time reset code for the account."""
    expires_in = reset_codes.request_reset(db, data.email)
    return ForgotPasswordResponse(expires_in=expires_in)


@router.post("/verify-code", response_model=MessageResponse)
def verify_code(data: VerifyCodeRequest, db: Session = Depends(get_db)):
    """Check a reset code without consuming it."""
    reset_codes.verify_code(db, data.email, data.code)
    return MessageResponse(message="Code verified")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password and clear the pending reset code."""
    reset_codes.reset_password(db, data.email, data.password, code=data.code)
    return MessageResponse(message="Password updated successfully")
