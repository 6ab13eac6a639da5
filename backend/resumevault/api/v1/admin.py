"""
Admin API endpoints.

User management and upload statistics. Every route requires an admin token.
Use with caution - delete is destructive.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from resumevault.api.v1.auth import UserProfile, UserSummary, require_admin
from resumevault.db.session import get_db
from resumevault.services import profile as profile_service

router = APIRouter(dependencies=[Depends(require_admin)])


class DashboardResponse(BaseModel):
    total_users: int
    resumes_uploaded: int
    pending_uploads: int
    users: list[UserSummary]


class UserListResponse(BaseModel):
    total: int
    users: list[UserSummary]


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(db: Session = Depends(get_db)):
    stats = profile_service.summarize_users(db)
    return DashboardResponse(
        total_users=stats.total_users,
        resumes_uploaded=stats.resumes_uploaded,
        pending_uploads=stats.pending_uploads,
        users=[UserSummary.from_user(user) for user in stats.users],
    )


@router.get("/users", response_model=UserListResponse)
def list_users(db: Session = Depends(get_db)):
    users = profile_service.list_users(db)
    return {"total": len(users), "users": [UserSummary.from_user(user) for user in users]}


@router.get("/users/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = profile_service.get_profile(db, user_id)
    return {"user": UserProfile.from_user(user)}


@router.delete("/user/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    profile_service.delete_user(db, user_id)
    return {"message": "User deleted", "user_id": user_id}
