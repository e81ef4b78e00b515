# api/griddo/templates/email_layout.py
from datetime import datetime
import html

from ..settings import settings

ACCENT = "#F97316"
MUTED = "#a1a1aa"
TEXT = "#fafafa"

GREETING = f"margin:0 0 16px 0; color:{TEXT}; font-size:16px; line-height:1.6;"
DETAIL_LABEL = f"color:{MUTED}; font-size:14px; padding:6px 0;"


def esc(value) -> str:
    return html.escape("" if value is None else str(value))


def cta_button(label: str, url: str) -> str:
    return f"""
        <p style="text-align:center; margin:24px 0 16px;">
          <a href="{esc(url)}"
             style="display:inline-block; padding:12px 20px;
                    background:{ACCENT}; color:#ffffff; text-decoration:none;
                    border-radius:8px; font-weight:600;">
            {esc(label)}
          </a>
        </p>
"""


def square_details_table(row_index: int, col_index: int, row_team: str, col_team: str, status_html: str) -> str:
    return f"""
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0"
               style="background:#3f3f46; border-radius:8px; margin-bottom:24px;">
          <tr><td style="padding:20px;">
            <table role="presentation" width="100%" cellpadding="0" cellspacing="0">
              <tr>
                <td style="{DETAIL_LABEL}">{esc(row_team)}:</td>
                <td style="color:{TEXT}; font-size:16px; font-weight:bold; text-align:right;">Row {row_index + 1}</td>
              </tr>
              <tr>
                <td style="{DETAIL_LABEL}">{esc(col_team)}:</td>
                <td style="color:{TEXT}; font-size:16px; font-weight:bold; text-align:right;">Column {col_index + 1}</td>
              </tr>
              <tr>{status_html}</tr>
            </table>
          </td></tr>
        </table>
"""


def email_layout(content: str) -> str:
    year = datetime.utcnow().year
    site = esc(settings.SITE_URL)

    return f"""
<!DOCTYPE html>
<html>
  <body style="margin:0;padding:0;background:#18181b;">
    <div style="font-family: Inter, Arial, sans-serif; padding:24px; background:#18181b; color:{TEXT};">
      <div style="max-width:560px; margin:0 auto; background:#27272a; padding:32px; border-radius:16px; border:1px solid #3f3f46;">

        <div style="text-align:center; margin-bottom:24px;">
          <h1 style="margin:0; font-size:26px; font-weight:700; color:{ACCENT};">Fundwell</h1>
        </div>

        {content}

        <hr style="border:0; border-top:1px solid rgba(255,255,255,0.08); margin:24px 0;" />

        <p style="font-size:12px; opacity:0.6; text-align:center; line-height:1.5;">
          Fundwell • © {year}<br/>
          <a href="{site}" style="color:{MUTED};">{site}</a>
        </p>
      </div>
    </div>
  </body>
</html>
"""
