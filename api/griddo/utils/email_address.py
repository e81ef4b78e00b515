from __future__ import annotations

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

_CRLF = re.compile(r"[\r\n]")


def sanitize_email(email: Optional[str]) -> Optional[str]:
    """
    Validate + normalize an address for storage and comparison.
    Returns None when the address is unusable.
    """
    if not email:
        return None

    trimmed = email.strip()
    # header injection attempts
    if _CRLF.search(trimmed):
        return None

    try:
        result = validate_email(trimmed, check_deliverability=False)
    except EmailNotValidError:
        return None

    return result.normalized.lower()
