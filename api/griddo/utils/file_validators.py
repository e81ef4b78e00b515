from __future__ import annotations

from typing import Optional, Tuple

INVALID_IMAGE_MESSAGE = (
    "File content does not match allowed image types. File may be corrupted or renamed."
)

JPEG = "image/jpeg"
PNG = "image/png"
GIF = "image/gif"
WEBP = "image/webp"


def sniff_image_type(data: bytes) -> Optional[str]:
    """Identify an image by its magic number, ignoring filename and declared MIME type."""
    # RIFF header + WEBP chunk id needs 12 bytes
    if len(data) < 12:
        return None

    if data[:3] == b"\xff\xd8\xff":
        return JPEG
    if data[:4] == b"\x89PNG":
        return PNG
    if data[:4] == b"GIF8":
        return GIF
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return WEBP
    return None


def validate_image_bytes(
    data: bytes,
    max_bytes: Optional[int] = None,
    allowed: Tuple[str, ...] = (JPEG, PNG, GIF, WEBP),
) -> Tuple[bool, Optional[str]]:
    """Returns (valid, error_message)."""
    if max_bytes is not None and len(data) > max_bytes:
        mb = max_bytes // (1024 * 1024)
        return False, f"File too large. Maximum size is {mb}MB."

    kind = sniff_image_type(data)
    if kind is None or kind not in allowed:
        return False, INVALID_IMAGE_MESSAGE
    return True, None
