# api/griddo/services/profile.py
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from ..constants import BUCKET_AVATARS
from ..models import User
from ..schemas import ActionResponse, ProfileUpdateIn
from ..utils.file_validators import JPEG, PNG, WEBP
from .ownership import require_auth, to_response, validate_input
from .uploads import store_image

AVATAR_MAX_BYTES = 2 * 1024 * 1024


def update_profile(db: Session, user: Optional[User], payload: Any) -> ActionResponse:
    def run():
        u = require_auth(user)
        data = validate_input(ProfileUpdateIn, payload, "Invalid profile data")
        u.full_name = data.full_name.strip()
        db.commit()
        return None

    result = to_response("update_profile", run)
    if result.is_error:
        db.rollback()
    return result


def upload_avatar(db: Session, user: Optional[User], data: Optional[bytes]) -> ActionResponse:
    """Avatars are kept at `{user_id}/avatar.{ext}` and overwritten on re-upload."""
    def run():
        u = require_auth(user)
        url = store_image(BUCKET_AVATARS, f"{u.id}/avatar", data, AVATAR_MAX_BYTES, (JPEG, PNG, WEBP), upsert=True)
        u.avatar_url = url
        db.commit()
        return {"url": url}

    result = to_response("upload_avatar", run)
    if result.is_error:
        db.rollback()
    return result
