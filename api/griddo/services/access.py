# api/griddo/services/access.py
"""
PIN protection for private contests.

A correct PIN earns a cookie `contest_access_<slug>` holding sha256 of the
contest's stored PIN, good for 7 days. Changing the PIN invalidates every
cookie issued for the old one.
"""
from __future__ import annotations

import hashlib
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud
from ..schemas import ActionResponse, ErrorOut
from ..utils.rate_limit import check_rate_limit

ACCESS_COOKIE_PREFIX = "contest_access_"
ACCESS_COOKIE_MAX_AGE = 7 * 24 * 60 * 60
PIN_ATTEMPTS_PER_MINUTE = 10


def access_cookie_name(slug: str) -> str:
    return f"{ACCESS_COOKIE_PREFIX}{slug}"


def pin_hash(pin: str) -> str:
    return hashlib.sha256(pin.encode("utf-8")).hexdigest()


def verify_pin(db: Session, contest_slug: str, entered_pin: str, client_key: Optional[str] = None) -> ActionResponse:
    """
    Compare `entered_pin` with the contest's PIN, ignoring case.
    On success `data.cookie_value` is what the caller stores in the access cookie.
    """
    if not contest_slug or not entered_pin:
        return ActionResponse.fail("Contest slug and PIN are required")

    if client_key and not check_rate_limit(f"pin:{contest_slug}:{client_key}", PIN_ATTEMPTS_PER_MINUTE).success:
        return ActionResponse.fail("Too many attempts. Please wait a moment and try again.")

    access_pin = crud.get_contest_pin(db, contest_slug)
    if access_pin is None:
        return ActionResponse.fail("Contest not found")

    if access_pin.upper() != entered_pin.strip().upper():
        return ActionResponse(data={"success": False}, error=ErrorOut(message="Incorrect PIN"))

    return ActionResponse.ok({"success": True, "cookie_value": pin_hash(access_pin)})


def has_contest_access(contest_slug: str, access_pin: Optional[str], cookie_value: Optional[str]) -> bool:
    """True when the contest has no PIN or the visitor holds a valid access cookie."""
    if not access_pin:
        return True
    return cookie_value == pin_hash(access_pin)
