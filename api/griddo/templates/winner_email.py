# api/griddo/templates/winner_email.py
from .email_layout import ACCENT, MUTED, TEXT, cta_button, email_layout, esc


def _score_row(team: str, score: int) -> str:
    return f"""
              <tr>
                <td style="padding:12px 16px; background:#52525b; color:{TEXT}; font-size:16px; font-weight:600;">{esc(team)}</td>
                <td style="padding:12px 16px; background:#52525b; color:{TEXT}; font-size:24px; font-weight:bold; text-align:right;">{score}</td>
              </tr>"""


def winner_email(
    participant_name: str,
    contest_name: str,
    quarter_name: str,
    home_team_name: str,
    away_team_name: str,
    home_score: int,
    away_score: int,
    prize_amount: float,
    contest_url: str,
) -> dict:
    content = f"""
        <div style="text-align:center; padding-bottom:24px;">
          <div style="font-size:64px; line-height:1;">&#127942;</div>
          <h2 style="margin:16px 0 0 0; color:#FBBF24; font-size:32px; font-weight:bold; letter-spacing:2px;">WINNER!</h2>
        </div>
        <p style="margin:0 0 8px 0; color:{TEXT}; font-size:20px; text-align:center; font-weight:600;">
          Congratulations {esc(participant_name)}!
        </p>
        <p style="margin:0 0 24px 0; color:{MUTED}; font-size:16px; text-align:center;">
          You won <strong style="color:{ACCENT};">{esc(quarter_name)}</strong>
          in <strong style="color:{TEXT};">{esc(contest_name)}</strong>!
        </p>
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="margin-bottom:24px;">
          {_score_row(home_team_name, home_score)}
          {_score_row(away_team_name, away_score)}
        </table>
        <div style="text-align:center; margin-bottom:32px;">
          <p style="margin:0 0 8px 0; color:{MUTED}; font-size:14px; text-transform:uppercase; letter-spacing:1px;">Your Prize</p>
          <p style="margin:0; color:#22c55e; font-size:48px; font-weight:bold;">${prize_amount:,.2f}</p>
        </div>
        {cta_button("View Contest", contest_url)}
"""
    return {
        "subject": f"You won {quarter_name} in {contest_name}!",
        "html": email_layout(content),
    }
