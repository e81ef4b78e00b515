# api/griddo/services/contests.py
"""
Owner and participant actions on contests and their squares.

Every function returns an ActionResponse. Owner actions go through
`with_contest_ownership`; `claim_square` is public and guarded by the rate
limiter and a conditional UPDATE instead.
"""
from __future__ import annotations

import secrets
from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud
from ..constants import (
    BASEBALL_GAMES, FOOTBALL_QUARTERS, GRID_SIZE, QUARTER_DISPLAY_NAMES,
    PAYMENT_AVAILABLE, PAYMENT_PAID, PAYMENT_PENDING,
    STATUS_DRAFT, STATUS_IN_PROGRESS, STATUS_LOCKED, STATUS_OPEN,
    ContestErrors, max_squares_reached,
)
from ..models import Contest, Score, Square, User
from ..schemas import (
    ActionResponse, BulkUpdateSquaresIn, ClaimSquareIn, ContestCreate,
    ContestStatusUpdate, ContestUpdate, NumbersIn, PlayerIn, SaveScoresIn, SquareStatusIn,
    baseball_payout_total, football_payout_total,
)
from ..settings import settings
from ..templates.payment_confirmed_email import payment_confirmed_email
from ..templates.square_claimed_email import square_claimed_email
from ..templates.winner_email import winner_email
from ..utils.email_address import sanitize_email
from ..utils.logger import log_info
from ..utils.payment_urls import generate_payment_url
from ..utils.rate_limit import check_rate_limit
from ..utils.slugs import generate_contest_code, generate_contest_slug, generate_player_slug, short_id
from . import email as email_service
from . import subscriptions
from .ownership import ActionError, require_auth, to_response, validate_input, with_contest_ownership

# insert attempts = 1 + retries on a code/slug collision
MAX_CREATE_RETRIES = 3
CLAIM_RATE_LIMIT = 10
CLAIM_RATE_WINDOW_MS = 60_000

# NOT NULL columns an explicit null in an update must not reach
_REQUIRED_COLUMNS = {
    "name", "row_team_name", "col_team_name", "square_price",
    "prize_type", "status", "is_public", "enable_player_tracking",
}


def contest_url(slug: str) -> str:
    return f"{settings.SITE_URL}/contest/{slug}"


# ============================================================
# Create / delete
# ============================================================

def _new_contest(owner: User, data: ContestCreate) -> Contest:
    contest = Contest(
        owner_id=owner.id,
        code=generate_contest_code(),
        slug=generate_contest_slug(data.name, short_id()),
        name=data.name,
        description=data.description or None,
        sport_type=data.sport_type,
        row_team_name=data.row_team_name,
        col_team_name=data.col_team_name,
        square_price=data.square_price,
        max_squares_per_person=data.max_squares_per_person or None,
        payout_q1_percent=data.payout_q1_percent,
        payout_q2_percent=data.payout_q2_percent,
        payout_q3_percent=data.payout_q3_percent,
        payout_final_percent=data.payout_final_percent,
        payout_game1_percent=data.payout_game1_percent,
        payout_game2_percent=data.payout_game2_percent,
        payout_game3_percent=data.payout_game3_percent,
        payout_game4_percent=data.payout_game4_percent,
        payout_game5_percent=data.payout_game5_percent,
        payout_game6_percent=data.payout_game6_percent,
        payout_game7_percent=data.payout_game7_percent,
        prize_type=data.prize_type,
        prize_q1_text=data.prize_q1_text,
        prize_q2_text=data.prize_q2_text,
        prize_q3_text=data.prize_q3_text,
        prize_final_text=data.prize_final_text,
        hero_image_url=str(data.hero_image_url) if data.hero_image_url else None,
        org_image_url=str(data.org_image_url) if data.org_image_url else None,
        primary_color=data.primary_color,
        secondary_color=data.secondary_color,
        # PIN only kept when protection is switched on
        access_pin=data.access_pin if data.require_pin else None,
        status=STATUS_DRAFT,
    )
    contest.squares = [
        Square(row_index=r, col_index=c, payment_status=PAYMENT_AVAILABLE)
        for r in range(GRID_SIZE)
        for c in range(GRID_SIZE)
    ]
    return contest


def create_contest(db: Session, user: Optional[User], payload: Any) -> ActionResponse:
    def run():
        owner = require_auth(user)
        data = validate_input(ContestCreate, payload, "Invalid contest data")

        limit = subscriptions.get_contest_limit(db, owner.id)
        if not limit["can_create"]:
            raise ActionError(ContestErrors.LIMIT_REACHED, {
                "limit": limit["limit"],
                "current_count": limit["current_count"],
            })

        for attempt in range(MAX_CREATE_RETRIES + 1):
            contest = _new_contest(owner, data)
            db.add(contest)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                log_info("create_contest", "code/slug collision, retrying", attempt=attempt)
                continue
            db.refresh(contest)
            return contest.as_owner_dict()

        raise ActionError("Failed to generate unique code. Please try again.")

    result = to_response("create_contest", run)
    if result.is_error:
        db.rollback()
    return result


def delete_contest(db: Session, user: Optional[User], contest_id: str) -> ActionResponse:
    """Soft delete: the contest disappears from listings and public pages."""
    def action(u: User, contest: Contest):
        n = (
            db.query(Contest)
            .filter(Contest.id == contest_id, Contest.owner_id == u.id)
            .update({"deleted_at": datetime.utcnow()}, synchronize_session="fetch")
        )
        if not n:
            raise ActionError(ContestErrors.FAILED_TO_DELETE)
        db.commit()
        return None

    return with_contest_ownership(db, user, contest_id, action, "delete_contest")


# ============================================================
# Lifecycle
# ============================================================

def check_status_transition(db: Session, contest: Contest, target: Optional[str]) -> None:
    """
    Preconditions for entering `target`. Only `open` and `in_progress` are
    gated; any other transition is allowed as-is.
    """
    if target == STATUS_IN_PROGRESS:
        if not contest.row_numbers or not contest.col_numbers:
            raise ActionError(ContestErrors.NUMBERS_REQUIRED_TO_START)

    if target == STATUS_OPEN:
        if contest.status == STATUS_LOCKED and crud.count_scores(db, contest.id) > 0:
            raise ActionError(ContestErrors.SCORES_BLOCK_UNLOCK)
        if crud.count_payment_options(db, contest.id) == 0:
            raise ActionError(ContestErrors.PAYMENT_OPTIONS_REQUIRED)


def _check_merged_payouts(contest: Contest, updates: dict) -> None:
    """Payout totals are checked against the contest as it will be after `updates`."""
    fields = [k for k in Contest.__table__.columns.keys() if k.startswith("payout_")]
    if not any(k in updates for k in fields):
        return
    merged = {k: updates[k] if k in updates else getattr(contest, k) for k in fields}
    errors = {}
    if football_payout_total(merged) > 100:
        errors["football_payouts"] = ["Total payout cannot exceed 100%"]
    if baseball_payout_total(merged) > 100:
        errors["baseball_payouts"] = ["Total payout cannot exceed 100%"]
    if errors:
        raise ActionError("Invalid contest data", errors)


def update_contest(db: Session, user: Optional[User], contest_id: str, updates: Any) -> ActionResponse:
    def action(u: User, contest: Contest):
        data = validate_input(ContestUpdate, updates, "Invalid contest data").model_dump(exclude_unset=True)
        data = {k: v for k, v in data.items() if v is not None or k not in _REQUIRED_COLUMNS}
        _check_merged_payouts(contest, data)
        check_status_transition(db, contest, data.get("status"))

        if not data:
            return {"id": contest.id}

        n = (
            db.query(Contest)
            .filter(Contest.id == contest_id, Contest.owner_id == u.id)
            .update(data, synchronize_session="fetch")
        )
        if not n:
            raise ActionError(ContestErrors.NOT_FOUND_OR_NOT_OWNER)
        db.commit()
        return {"id": contest_id}

    return with_contest_ownership(db, user, contest_id, action, "update_contest")


def update_contest_status(db: Session, user: Optional[User], contest_id: str, target_status: Any) -> ActionResponse:
    """Status button on the dashboard; opening also makes the contest public."""
    def action(u: User, contest: Contest):
        target = validate_input(ContestStatusUpdate, {"status": target_status}, ContestErrors.INVALID_STATUS).status
        check_status_transition(db, contest, target)

        values: dict[str, Any] = {"status": target}
        if target == STATUS_OPEN:
            values["is_public"] = True

        n = (
            db.query(Contest)
            .filter(Contest.id == contest_id, Contest.owner_id == u.id)
            .update(values, synchronize_session="fetch")
        )
        if not n:
            raise ActionError(ContestErrors.NOT_FOUND_OR_NOT_OWNER)
        db.commit()
        db.refresh(contest)
        return contest.as_owner_dict()

    return with_contest_ownership(db, user, contest_id, action, "update_contest_status")


# ============================================================
# Numbers & scores
# ============================================================

def _is_digit_permutation(values: Optional[Iterable[int]]) -> bool:
    return values is not None and sorted(values) == list(range(GRID_SIZE))


def set_contest_numbers(db: Session, user: Optional[User], contest_id: str, payload: Any) -> ActionResponse:
    def action(u: User, contest: Contest):
        data = validate_input(NumbersIn, payload, ContestErrors.INVALID_NUMBERS)

        if crud.count_scores(db, contest.id) > 0:
            raise ActionError(ContestErrors.SCORES_BLOCK_NUMBERS)

        if data.auto_generate:
            rng = secrets.SystemRandom()
            rows = rng.sample(range(GRID_SIZE), GRID_SIZE)
            cols = rng.sample(range(GRID_SIZE), GRID_SIZE)
        else:
            rows, cols = data.row_numbers, data.col_numbers
            if not (_is_digit_permutation(rows) and _is_digit_permutation(cols)):
                raise ActionError(ContestErrors.INVALID_NUMBERS)

        contest.row_numbers = list(rows)
        contest.col_numbers = list(cols)
        contest.numbers_auto_generated = data.auto_generate
        db.commit()
        return {"row_numbers": contest.row_numbers, "col_numbers": contest.col_numbers}

    return with_contest_ownership(db, user, contest_id, action, "set_contest_numbers")


def quarters_for_sport(sport_type: str) -> tuple[str, ...]:
    return BASEBALL_GAMES if sport_type == "baseball" else FOOTBALL_QUARTERS


def winning_position(row_numbers: list[int], col_numbers: list[int], home_score: int, away_score: int):
    """(row, col) of the square whose numbers match the scores' last digits, or None."""
    home, away = home_score % 10, away_score % 10
    if home not in row_numbers or away not in col_numbers:
        return None
    return row_numbers.index(home), col_numbers.index(away)


def prize_amount(contest: Contest, quarter: str) -> float:
    pct = getattr(contest, f"payout_{quarter}_percent", None) or 0
    return contest.square_price * 100 * pct / 100


def save_scores(db: Session, user: Optional[User], contest_id: str, payload: Any) -> ActionResponse:
    """
    Upsert one score per quarter and resolve each quarter's winning square.
    Winners are emailed only when the winning square for a quarter changes.
    """
    notify: list[tuple[Square, dict]] = []

    def action(u: User, contest: Contest):
        data = validate_input(SaveScoresIn, payload, "Invalid scores")

        if contest.status != STATUS_IN_PROGRESS:
            raise ActionError(ContestErrors.SCORES_ONLY_IN_PROGRESS)
        if not contest.row_numbers or not contest.col_numbers:
            raise ActionError(ContestErrors.NUMBERS_REQUIRED)

        allowed = quarters_for_sport(contest.sport_type)
        if any(s.quarter not in allowed for s in data.scores):
            raise ActionError(ContestErrors.INVALID_QUARTER)

        squares = {(sq.row_index, sq.col_index): sq for sq in crud.get_squares_for_contest(db, contest.id)}
        existing = {s.quarter: s for s in crud.get_scores_for_contest(db, contest.id)}

        winners = []
        for entry in data.scores:
            pos = winning_position(contest.row_numbers, contest.col_numbers, entry.home_score, entry.away_score)
            square = squares.get(pos) if pos else None
            winning_square_id = square.id if square else None

            score = existing.get(entry.quarter)
            previous_winner = score.winning_square_id if score else None
            if score is None:
                score = Score(contest_id=contest.id, quarter=entry.quarter)
                db.add(score)
                existing[entry.quarter] = score
            score.home_score = entry.home_score
            score.away_score = entry.away_score
            score.winning_square_id = winning_square_id
            score.entered_at = datetime.utcnow()

            winner_name = None
            if square and square.claimant_first_name:
                winner_name = " ".join(
                    p for p in (square.claimant_first_name, square.claimant_last_name) if p
                )

            winners.append({
                "quarter": entry.quarter,
                "home_score": entry.home_score,
                "away_score": entry.away_score,
                "winning_square_id": winning_square_id,
                "winner_name": winner_name,
                "winner_email": square.claimant_email if square else None,
            })

            if winning_square_id and winning_square_id != previous_winner and square.claimant_email:
                notify.append((square, winner_email(
                    participant_name=square.claimant_first_name or "Winner",
                    contest_name=contest.name,
                    quarter_name=QUARTER_DISPLAY_NAMES.get(entry.quarter, entry.quarter),
                    home_team_name=contest.row_team_name,
                    away_team_name=contest.col_team_name,
                    home_score=entry.home_score,
                    away_score=entry.away_score,
                    prize_amount=prize_amount(contest, entry.quarter),
                    contest_url=contest_url(contest.slug),
                )))

        db.commit()
        return {"winners": winners}

    result = with_contest_ownership(db, user, contest_id, action, "save_scores")
    if not result.is_error:
        for square, template in notify:
            email_service.send_email_safe(
                db,
                to=square.claimant_email,
                template=template,
                contest_id=contest_id,
                square_id=square.id,
                email_type="winner_notification",
            )
    return result


# ============================================================
# Squares (owner side)
# ============================================================

def bulk_update_squares(db: Session, user: Optional[User], contest_id: str, square_ids: list[str], new_status: str) -> ActionResponse:
    def action(u: User, contest: Contest):
        if not square_ids:
            raise ActionError(ContestErrors.NO_SQUARES_SELECTED)
        data = validate_input(
            BulkUpdateSquaresIn,
            {"square_ids": square_ids, "new_status": new_status},
            ContestErrors.INVALID_STATUS,
        )

        values: dict[str, Any] = {"payment_status": data.new_status}
        if data.new_status == PAYMENT_PAID:
            values["paid_at"] = datetime.utcnow()
        elif data.new_status == PAYMENT_PENDING:
            values["paid_at"] = None

        n = (
            db.query(Square)
            .filter(Square.contest_id == contest.id, Square.id.in_(data.square_ids))
            .update(values, synchronize_session=False)
        )
        db.commit()
        return {"updated": n}

    return with_contest_ownership(db, user, contest_id, action, "bulk_update_squares")


def update_square_status(db: Session, user: Optional[User], contest_id: str, square_id: str, new_status: str) -> ActionResponse:
    """
    Owner sets one square's payment status. `available` releases the square
    and wipes the claimant; `paid` emails the claimant a confirmation.
    """
    if not square_id or not contest_id or not new_status:
        return ActionResponse.fail(ContestErrors.ALL_FIELDS_REQUIRED)

    notify: list[dict] = []

    def action(u: User, contest: Contest):
        data = validate_input(SquareStatusIn, {"new_status": new_status}, ContestErrors.INVALID_STATUS)
        square = crud.get_square(db, contest.id, square_id)
        if not square:
            raise ActionError(ContestErrors.SQUARE_NOT_FOUND)

        square.payment_status = data.new_status
        if data.new_status == PAYMENT_AVAILABLE:
            square.claimant_first_name = None
            square.claimant_last_name = None
            square.claimant_email = None
            square.claimant_venmo = None
            square.referred_by = None
            square.claimed_at = None
            square.paid_at = None
        elif data.new_status == PAYMENT_PAID:
            square.paid_at = datetime.utcnow()
        else:
            square.paid_at = None
        db.commit()

        if data.new_status == PAYMENT_PAID and square.claimant_email:
            notify.append({
                "to": square.claimant_email,
                "square_id": square.id,
                "template": payment_confirmed_email(
                    participant_name=square.claimant_first_name or "there",
                    contest_name=contest.name,
                    row_team_name=contest.row_team_name,
                    col_team_name=contest.col_team_name,
                    row_index=square.row_index,
                    col_index=square.col_index,
                    contest_url=contest_url(contest.slug),
                ),
            })
        return {"success": True}

    result = with_contest_ownership(db, user, contest_id, action, "update_square_status")
    for msg in notify:
        email_service.send_email_safe(
            db,
            to=msg["to"],
            template=msg["template"],
            contest_id=contest_id,
            square_id=msg["square_id"],
            email_type="payment_confirmed",
        )
    return result


# ============================================================
# Squares (participant side)
# ============================================================

def _payment_lines(db: Session, contest_id: str) -> list[dict]:
    lines = []
    for opt in crud.get_payment_options_for_contest(db, contest_id):
        handle = opt.handle_or_link
        link = handle if handle.startswith("http") else generate_payment_url(opt.type, handle)
        lines.append({
            "type": opt.type,
            "display_name": opt.display_name,
            "handle": handle,
            "link": link,
        })
    return lines


def claim_square(db: Session, payload: Any) -> ActionResponse:
    """
    Public claim of an available square. The final UPDATE only matches while
    the square is still available, so two concurrent claims can't both win.
    """
    claimed: dict = {}

    def run():
        data = validate_input(ClaimSquareIn, payload, ContestErrors.ALL_FIELDS_REQUIRED)

        email = sanitize_email(data.email)
        if not email:
            raise ActionError(ContestErrors.INVALID_EMAIL)

        if not check_rate_limit(f"claim:{email}", CLAIM_RATE_LIMIT, CLAIM_RATE_WINDOW_MS).success:
            raise ActionError(ContestErrors.RATE_LIMITED)

        first, last = data.first_name.strip(), data.last_name.strip()
        if not (data.square_id and data.contest_id and first and last):
            raise ActionError(ContestErrors.ALL_FIELDS_REQUIRED)

        contest = crud.get_contest_by_id(db, data.contest_id)
        if not contest or contest.deleted_at is not None:
            raise ActionError(ContestErrors.NOT_FOUND)
        if contest.status != STATUS_OPEN:
            raise ActionError(ContestErrors.NOT_OPEN)

        square = crud.get_square(db, contest.id, data.square_id)
        if not square:
            raise ActionError(ContestErrors.SQUARE_NOT_FOUND)
        if square.payment_status != PAYMENT_AVAILABLE:
            raise ActionError(ContestErrors.SQUARE_TAKEN)

        if contest.max_squares_per_person:
            if crud.count_claimed_by_email(db, contest.id, email) >= contest.max_squares_per_person:
                raise ActionError(max_squares_reached(contest.max_squares_per_person))

        referred_by = None
        if data.referred_by_slug:
            slugs = {p.get("slug") for p in (contest.players or [])}
            if data.referred_by_slug in slugs:
                referred_by = data.referred_by_slug

        n = (
            db.query(Square)
            .filter(
                Square.id == square.id,
                Square.contest_id == contest.id,
                Square.payment_status == PAYMENT_AVAILABLE,
            )
            .update({
                "claimant_first_name": first,
                "claimant_last_name": last,
                "claimant_email": email,
                "claimant_venmo": (data.venmo_handle or "").strip() or None,
                "referred_by": referred_by,
                "payment_status": PAYMENT_PENDING,
                "claimed_at": datetime.utcnow(),
            }, synchronize_session=False)
        )
        if n == 0:
            db.rollback()
            raise ActionError(ContestErrors.RACE_CONDITION)
        db.commit()

        claimed.update({
            "email": email,
            "template": square_claimed_email(
                participant_name=first,
                contest_name=contest.name,
                row_team_name=contest.row_team_name,
                col_team_name=contest.col_team_name,
                row_index=square.row_index,
                col_index=square.col_index,
                square_price=contest.square_price,
                contest_url=contest_url(contest.slug),
                payment_options=_payment_lines(db, contest.id),
            ),
            "contest_id": contest.id,
            "square_id": square.id,
        })
        return {"square": {"id": square.id, "row_index": square.row_index, "col_index": square.col_index}}

    result = to_response("claim_square", run)
    if result.is_error:
        db.rollback()
    elif claimed:
        email_service.send_email_safe(
            db,
            to=claimed["email"],
            template=claimed["template"],
            contest_id=claimed["contest_id"],
            square_id=claimed["square_id"],
            email_type="square_claimed",
        )
    return result


# ============================================================
# Player tracking
# ============================================================

def add_player(db: Session, user: Optional[User], contest_id: str, payload: Any) -> ActionResponse:
    def action(u: User, contest: Contest):
        data = validate_input(PlayerIn, payload, "Invalid player")
        players = list(contest.players or [])
        player = {
            "name": data.name.strip(),
            "number": data.number,
            "slug": generate_player_slug(data.name.strip(), players),
        }
        # reassign so the JSON column is flagged dirty
        contest.players = players + [player]
        db.commit()
        return player

    return with_contest_ownership(db, user, contest_id, action, "add_player")


def remove_player(db: Session, user: Optional[User], contest_id: str, player_slug: str) -> ActionResponse:
    def action(u: User, contest: Contest):
        players = list(contest.players or [])
        remaining = [p for p in players if p.get("slug") != player_slug]
        if len(remaining) == len(players):
            raise ActionError("Player not found")
        contest.players = remaining
        db.commit()
        return {"players": remaining}

    return with_contest_ownership(db, user, contest_id, action, "remove_player")
