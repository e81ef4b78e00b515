# api/griddo/services/email.py
from __future__ import annotations

from typing import Optional

import resend
from sqlalchemy.orm import Session

from ..models import EmailLog
from ..settings import settings
from ..utils.logger import log_error, log_warning

if settings.RESEND_API_KEY:
    resend.api_key = settings.RESEND_API_KEY
else:
    log_warning("email", "RESEND_API_KEY not set, emails will NOT send")


class EmailDisabled(Exception):
    pass


def send_email(to: str, subject: str, html: str) -> Optional[str]:
    """
    Thin wrapper around Resend's Emails.send. Returns the Resend message id.
    """
    if not settings.RESEND_API_KEY:
        raise EmailDisabled("RESEND_API_KEY missing")

    result = resend.Emails.send(
        {
            "from": settings.RESEND_FROM_EMAIL,
            "to": [to],
            "subject": subject,
            "html": html,
        }
    )
    return (result or {}).get("id")


def send_email_safe(
    db: Session,
    *,
    to: str,
    template: dict,
    email_type: str,
    contest_id: Optional[str] = None,
    square_id: Optional[str] = None,
) -> bool:
    """
    Fire-and-forget send: never raises, returns whether the email went out.
    Every attempt is recorded in email_logs.
    """
    resend_id = None
    status = "sent"
    try:
        resend_id = send_email(to=to, subject=template["subject"], html=template["html"])
    except EmailDisabled:
        status = "disabled"
    except Exception as e:
        status = "failed"
        log_error("send_email_safe", e, email_type=email_type, to=to, contest_id=contest_id)

    try:
        db.add(EmailLog(
            contest_id=contest_id,
            square_id=square_id,
            recipient_email=to,
            email_type=email_type,
            resend_id=resend_id,
            status=status,
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        log_error("send_email_safe.log", e, email_type=email_type)

    return status == "sent"
