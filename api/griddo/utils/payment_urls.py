from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote

# slashes, quotes, angle brackets and control characters are never part of a handle
_UNSAFE = re.compile(r'[/\\<>"\x00-\x1f]')


def sanitize_handle(handle: Optional[str]) -> Optional[str]:
    trimmed = (handle or "").strip()
    if not trimmed or _UNSAFE.search(trimmed):
        return None
    return trimmed


def generate_payment_url(payment_type: str, handle: str) -> Optional[str]:
    """Deep link for paying `handle`; Zelle has no public link format."""
    sanitized = sanitize_handle(handle)
    if not sanitized:
        return None

    encoded = quote(sanitized, safe="")
    if payment_type == "venmo":
        return f"https://venmo.com/{encoded}?txn=pay"
    if payment_type == "paypal":
        return f"https://paypal.me/{encoded}"
    if payment_type == "cashapp":
        return f"https://cash.app/{encoded}"
    return None
