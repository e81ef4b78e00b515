# api/griddo/services/payment_options.py
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from ..models import Contest, PaymentOption, User
from ..schemas import ActionResponse, PaymentOptionsIn
from ..utils.payment_urls import sanitize_handle
from .ownership import ActionError, validate_input, with_contest_ownership


def update_payment_options(db: Session, user: Optional[User], contest_id: str, options: Any) -> ActionResponse:
    """
    Replace the contest's payment options with `options`.

    The delete and the inserts share one transaction, so a failed insert
    leaves the previous set in place.
    """
    def action(u: User, contest: Contest):
        data = validate_input(PaymentOptionsIn, {"options": options}, "Invalid payment options")

        rows = []
        for opt in data.options:
            handle = opt.handle_or_link.strip()
            if not handle.startswith("http") and not sanitize_handle(handle):
                raise ActionError(f"Invalid {opt.type} handle", {"handle_or_link": [handle]})
            rows.append(PaymentOption(
                contest_id=contest.id,
                type=opt.type,
                handle_or_link=handle,
                display_name=opt.display_name or None,
                instructions=opt.instructions or None,
                sort_order=opt.sort_order,
                account_last_4_digits=opt.account_last_4_digits or None,
                qr_code_url=opt.qr_code_url or None,
            ))

        db.query(PaymentOption).filter(PaymentOption.contest_id == contest.id).delete(synchronize_session=False)
        db.add_all(rows)
        db.commit()
        return None

    return with_contest_ownership(db, user, contest_id, action, "update_payment_options")
