# api/griddo/templates/square_claimed_email.py
from typing import Optional

from .email_layout import (
    ACCENT, DETAIL_LABEL, GREETING, MUTED, TEXT,
    cta_button, email_layout, esc, square_details_table,
)


def _payment_row(option: dict) -> str:
    label = esc(option.get("display_name") or option["type"])
    handle = esc(option.get("handle"))
    link: Optional[str] = option.get("link")
    if link:
        value = f'<a href="{esc(link)}" style="color:{ACCENT}; text-decoration:none; margin-left:8px;">{handle}</a>'
    else:
        value = f'<span style="color:{MUTED}; margin-left:8px;">{handle}</span>'
    return f"""
          <tr>
            <td style="padding:8px 0; border-bottom:1px solid #3f3f46;">
              <strong style="color:{TEXT};">{label}:</strong>{value}
            </td>
          </tr>"""


def square_claimed_email(
    participant_name: str,
    contest_name: str,
    row_team_name: str,
    col_team_name: str,
    row_index: int,
    col_index: int,
    square_price: float,
    contest_url: str,
    payment_options: list[dict],
) -> dict:
    """payment_options: [{"type", "handle", "link"?, "display_name"?}]"""
    status_html = f"""
                <td style="{DETAIL_LABEL}">Amount Due:</td>
                <td style="color:{ACCENT}; font-size:16px; font-weight:bold; text-align:right;">${square_price:.2f}</td>"""

    payment_section = ""
    if payment_options:
        rows = "".join(_payment_row(o) for o in payment_options)
        payment_section = f"""
        <h3 style="margin:0 0 16px 0; color:{TEXT}; font-size:16px; font-weight:600;">
          Complete your payment using one of these options:
        </h3>
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="margin-bottom:24px;">
          {rows}
        </table>"""

    content = f"""
        <p style="{GREETING}">Hi {esc(participant_name)},</p>
        <p style="{GREETING}">
          You've claimed a square in <strong style="color:{ACCENT};">{esc(contest_name)}</strong>!
        </p>
        {square_details_table(row_index, col_index, row_team_name, col_team_name, status_html)}
        {payment_section}
        {cta_button("View Contest", contest_url)}
"""
    return {
        "subject": f"You claimed a square in {contest_name}!",
        "html": email_layout(content),
    }
