# api/griddo/templates/payment_confirmed_email.py
from .email_layout import (
    DETAIL_LABEL, GREETING, TEXT,
    cta_button, email_layout, esc, square_details_table,
)


def payment_confirmed_email(
    participant_name: str,
    contest_name: str,
    row_team_name: str,
    col_team_name: str,
    row_index: int,
    col_index: int,
    contest_url: str,
) -> dict:
    status_html = f"""
                <td style="{DETAIL_LABEL}">Status:</td>
                <td style="color:#22c55e; font-size:16px; font-weight:bold; text-align:right;">&#10003; Paid</td>"""

    content = f"""
        <p style="{GREETING}">Hi {esc(participant_name)},</p>
        <p style="margin:0 0 24px 0; color:{TEXT}; font-size:18px; font-weight:600;">
          Your payment has been confirmed!
        </p>
        {square_details_table(row_index, col_index, row_team_name, col_team_name, status_html)}
        <p style="{GREETING}">Your square is locked in. Good luck!</p>
        {cta_button("View Contest", contest_url)}
"""
    return {
        "subject": f"Payment confirmed for {contest_name}",
        "html": email_layout(content),
    }
