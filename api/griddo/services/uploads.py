# api/griddo/services/uploads.py
"""
Image uploads for contests: payment QR codes and hero/logo branding.

Files are validated by content (magic numbers), never by filename or the
client's declared MIME type. Objects live under `{user_id}/{contest_id}/`,
so a delete is only honoured when the path starts with the caller's id.
"""
from __future__ import annotations

import time
from typing import Optional

from sqlalchemy.orm import Session

from ..constants import BUCKET_CONTEST_IMAGES, BUCKET_PAYMENT_QR
from ..models import Contest, User
from ..schemas import ActionResponse
from ..utils.file_validators import GIF, JPEG, PNG, WEBP, sniff_image_type, validate_image_bytes
from . import storage
from .ownership import ActionError, require_auth, to_response, with_contest_ownership

MB = 1024 * 1024
QR_MAX_BYTES = 2 * MB
CONTEST_IMAGE_MAX_BYTES = 5 * MB
IMAGE_KINDS = ("hero", "logo")

EXTENSIONS = {JPEG: "jpg", PNG: "png", GIF: "gif", WEBP: "webp"}


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def store_image(bucket: str, path_stem: str, data: Optional[bytes], max_bytes: int, allowed: tuple[str, ...], upsert: bool = False) -> str:
    """Validate `data` and upload it as `{path_stem}.{ext}`; returns the public URL."""
    if not data:
        raise ActionError("No file provided")

    ok, err = validate_image_bytes(data, max_bytes=max_bytes, allowed=allowed)
    if not ok:
        raise ActionError(err)

    content_type = sniff_image_type(data)
    path = f"{path_stem}.{EXTENSIONS[content_type]}"
    try:
        return storage.upload_object(bucket, path, data, content_type, upsert=upsert)
    except storage.StorageError as e:
        raise ActionError(f"Upload failed: {e}") from e


def remove_image(bucket: str, user: User, url: str) -> None:
    path = storage.path_from_url(bucket, url)
    if not path:
        raise ActionError("Invalid image URL")
    if not path.startswith(f"{user.id}/"):
        raise ActionError("You do not have permission to delete this image")
    try:
        storage.delete_object(bucket, path)
    except storage.StorageError as e:
        raise ActionError(f"Delete failed: {e}") from e


# ---- payment QR codes ----

def upload_payment_qr(db: Session, user: Optional[User], contest_id: str, payment_option_id: str, data: Optional[bytes]) -> ActionResponse:
    def action(u: User, contest: Contest):
        stem = f"{u.id}/{contest.id}/{payment_option_id}_{_timestamp_ms()}"
        url = store_image(BUCKET_PAYMENT_QR, stem, data, QR_MAX_BYTES, (JPEG, PNG, WEBP))
        return {"url": url}

    return with_contest_ownership(db, user, contest_id, action, "upload_payment_qr")


def delete_payment_qr(user: Optional[User], qr_code_url: str) -> ActionResponse:
    def run():
        remove_image(BUCKET_PAYMENT_QR, require_auth(user), qr_code_url)
        return None

    return to_response("delete_payment_qr", run)


# ---- contest branding ----

def upload_contest_image(db: Session, user: Optional[User], contest_id: str, image_type: str, data: Optional[bytes]) -> ActionResponse:
    def action(u: User, contest: Contest):
        if image_type not in IMAGE_KINDS:
            raise ActionError("Invalid image type")
        stem = f"{u.id}/{contest.id}/{image_type}_{_timestamp_ms()}"
        url = store_image(BUCKET_CONTEST_IMAGES, stem, data, CONTEST_IMAGE_MAX_BYTES, (JPEG, PNG, WEBP, GIF))
        return {"url": url}

    return with_contest_ownership(db, user, contest_id, action, "upload_contest_image")


def delete_contest_image(user: Optional[User], image_url: str) -> ActionResponse:
    def run():
        remove_image(BUCKET_CONTEST_IMAGES, require_auth(user), image_url)
        return None

    return to_response("delete_contest_image", run)
