from collections import Counter
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from . import models
from .constants import ACTIVE_CONTEST_STATUSES, PAYMENT_AVAILABLE, PAYMENT_STATUSES


# -------- Contests --------
def get_contest_by_id(db: Session, contest_id: str) -> Optional[models.Contest]:
    return db.query(models.Contest).filter(models.Contest.id == contest_id).first()


def get_owner_contest_by_id(db: Session, contest_id: str, user_id: str) -> Optional[models.Contest]:
    return (
        db.query(models.Contest)
        .filter(models.Contest.id == contest_id, models.Contest.owner_id == user_id)
        .first()
    )


def get_contest_by_slug(db: Session, slug: str) -> Optional[models.Contest]:
    return (
        db.query(models.Contest)
        .filter(models.Contest.slug == slug, models.Contest.deleted_at.is_(None))
        .first()
    )


def get_contest_pin(db: Session, slug: str) -> Optional[str]:
    row = (
        db.query(models.Contest.access_pin)
        .filter(models.Contest.slug == slug, models.Contest.deleted_at.is_(None))
        .first()
    )
    return row[0] if row else None


def list_contests_for_owner(db: Session, owner_id: str) -> list[dict]:
    contests = (
        db.query(models.Contest)
        .filter(models.Contest.owner_id == owner_id, models.Contest.deleted_at.is_(None))
        .order_by(models.Contest.created_at.desc())
        .all()
    )
    if not contests:
        return []

    rows = (
        db.query(models.Square.contest_id, models.Square.payment_status, func.count(models.Square.id))
        .filter(models.Square.contest_id.in_([c.id for c in contests]))
        .group_by(models.Square.contest_id, models.Square.payment_status)
        .all()
    )
    counts: dict[str, dict[str, int]] = {c.id: {s: 0 for s in PAYMENT_STATUSES} for c in contests}
    for contest_id, status, n in rows:
        counts[contest_id][status] = n

    out = []
    for c in contests:
        d = c.as_owner_dict()
        d["square_counts"] = counts[c.id]
        out.append(d)
    return out


def count_active_contests(db: Session, owner_id: str) -> int:
    return (
        db.query(models.Contest)
        .filter(
            models.Contest.owner_id == owner_id,
            models.Contest.deleted_at.is_(None),
            models.Contest.status.in_(ACTIVE_CONTEST_STATUSES),
        )
        .count()
    )


def count_contests(db: Session, owner_id: str) -> int:
    return (
        db.query(models.Contest)
        .filter(models.Contest.owner_id == owner_id, models.Contest.deleted_at.is_(None))
        .count()
    )


# -------- Squares --------
def get_squares_for_contest(db: Session, contest_id: str) -> list[models.Square]:
    return (
        db.query(models.Square)
        .filter(models.Square.contest_id == contest_id)
        .order_by(models.Square.row_index, models.Square.col_index)
        .all()
    )


def get_square(db: Session, contest_id: str, square_id: str) -> Optional[models.Square]:
    return (
        db.query(models.Square)
        .filter(models.Square.id == square_id, models.Square.contest_id == contest_id)
        .first()
    )


def get_participants_for_contest(db: Session, contest_id: str) -> list[models.Square]:
    """Claimed squares (pending or paid), newest claim first."""
    return (
        db.query(models.Square)
        .filter(
            models.Square.contest_id == contest_id,
            models.Square.payment_status != PAYMENT_AVAILABLE,
        )
        .order_by(models.Square.claimed_at.desc())
        .all()
    )


def count_claimed_by_email(db: Session, contest_id: str, email: str) -> int:
    return (
        db.query(models.Square)
        .filter(
            models.Square.contest_id == contest_id,
            func.lower(models.Square.claimant_email) == email.lower(),
            models.Square.payment_status != PAYMENT_AVAILABLE,
        )
        .count()
    )


def get_player_sales_counts(db: Session, contest_id: str) -> dict[str, int]:
    """Squares sold per referring player slug."""
    rows = (
        db.query(models.Square.referred_by)
        .filter(
            models.Square.contest_id == contest_id,
            models.Square.referred_by.isnot(None),
            models.Square.claimant_first_name.isnot(None),
        )
        .all()
    )
    return dict(Counter(r[0] for r in rows))


# -------- Payment options --------
def get_payment_options_for_contest(db: Session, contest_id: str) -> list[models.PaymentOption]:
    return (
        db.query(models.PaymentOption)
        .filter(models.PaymentOption.contest_id == contest_id)
        .order_by(models.PaymentOption.sort_order.asc())
        .all()
    )


def count_payment_options(db: Session, contest_id: str) -> int:
    return db.query(models.PaymentOption).filter(models.PaymentOption.contest_id == contest_id).count()


# -------- Scores --------
def get_scores_for_contest(db: Session, contest_id: str) -> list[models.Score]:
    return db.query(models.Score).filter(models.Score.contest_id == contest_id).all()


def count_scores(db: Session, contest_id: str) -> int:
    return db.query(models.Score).filter(models.Score.contest_id == contest_id).count()
