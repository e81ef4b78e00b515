# api/griddo/services/storage.py
"""
Object storage for QR codes, contest images and avatars.

Any S3-compatible endpoint works; buckets are addressed by name and public
URLs are `{STORAGE_PUBLIC_BASE_URL}/{bucket}/{path}`.
"""
from __future__ import annotations

from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..settings import settings
from ..utils.logger import log_error

_client = None


class StorageError(Exception):
    pass


def _get_client():
    global _client
    if _client is not None:
        return _client
    if not (settings.STORAGE_ACCESS_KEY_ID and settings.STORAGE_SECRET_ACCESS_KEY):
        raise StorageError("Object storage not configured")

    _client = boto3.client(
        "s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL or None,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION,
    )
    return _client


def public_url(bucket: str, path: str) -> str:
    return f"{settings.STORAGE_PUBLIC_BASE_URL}/{bucket}/{path}"


def path_from_url(bucket: str, url: str) -> Optional[str]:
    """Object key inside `bucket` for a public URL, or None if it isn't one."""
    marker = f"/{bucket}/"
    if not url or marker not in url:
        return None
    path = url.split(marker, 1)[1].split("?", 1)[0]
    return path or None


def upload_object(bucket: str, path: str, data: bytes, content_type: str, upsert: bool = False) -> str:
    """Store `data` and return its public URL."""
    client = _get_client()
    try:
        if not upsert:
            # put_object overwrites silently; refuse to clobber an existing key
            try:
                client.head_object(Bucket=bucket, Key=path)
                raise StorageError(f"Object already exists: {bucket}/{path}")
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") not in ("404", "NoSuchKey", "NotFound"):
                    raise

        client.put_object(
            Bucket=bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
            CacheControl="max-age=3600",
        )
    except (BotoCoreError, ClientError) as e:
        log_error("storage.upload_object", e, bucket=bucket, path=path)
        raise StorageError(str(e)) from e

    return public_url(bucket, path)


def delete_object(bucket: str, path: str) -> None:
    client = _get_client()
    try:
        client.delete_object(Bucket=bucket, Key=path)
    except (BotoCoreError, ClientError) as e:
        log_error("storage.delete_object", e, bucket=bucket, path=path)
        raise StorageError(str(e)) from e
