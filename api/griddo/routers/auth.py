# api/griddo/routers/auth.py
from fastapi import APIRouter, Body, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps.current_user import current_user
from ..models import User
from ..schemas import ActionResponse
from ..services import profile, subscriptions

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def me(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    """
    Account page payload: profile, current plan and contest usage.
    """
    return {
        "id": user.id,
        "firebase_uid": user.firebase_uid,
        "email": user.email,
        "full_name": user.full_name,
        "avatar_url": user.avatar_url,
        "subscription": subscriptions.get_subscription(db, user.id),
        "usage": subscriptions.get_usage_stats(db, user.id),
    }


@router.patch("/profile", response_model=ActionResponse)
def update_profile(
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return profile.update_profile(db, user, payload)


@router.post("/avatar", response_model=ActionResponse)
def upload_avatar(
    file: UploadFile = File(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return profile.upload_avatar(db, user, file.file.read())
