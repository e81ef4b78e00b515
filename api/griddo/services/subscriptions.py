# api/griddo/services/subscriptions.py
"""
Plan gating.

Free accounts may run FREE_CONTEST_LIMIT active contests at a time (completed
and deleted contests don't count); an active or trialing subscription lifts
the limit.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from .. import crud
from ..constants import ACTIVE_SUBSCRIPTION_STATUSES
from ..models import Price, Subscription
from ..settings import settings
from ..utils.logger import log_error


def has_active_subscription(db: Session, user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    n = (
        db.query(Subscription)
        .filter(
            Subscription.user_id == user_id,
            Subscription.status.in_(ACTIVE_SUBSCRIPTION_STATUSES),
        )
        .count()
    )
    return n > 0


def get_contest_limit(db: Session, user_id: str) -> dict:
    """
    {can_create, limit, current_count}; limit is None for subscribers.
    Fails closed: any query error means the user may not create.
    """
    try:
        subscribed = has_active_subscription(db, user_id)
        current = crud.count_active_contests(db, user_id)
    except Exception as e:
        db.rollback()
        log_error("get_contest_limit", e, user_id=user_id)
        return {"can_create": False, "limit": settings.FREE_CONTEST_LIMIT, "current_count": 0}

    if subscribed:
        return {"can_create": True, "limit": None, "current_count": current}

    return {
        "can_create": current < settings.FREE_CONTEST_LIMIT,
        "limit": settings.FREE_CONTEST_LIMIT,
        "current_count": current,
    }


def get_usage_stats(db: Session, user_id: str) -> dict:
    try:
        return {
            "active_contests": crud.count_active_contests(db, user_id),
            "total_contests": crud.count_contests(db, user_id),
        }
    except Exception as e:
        db.rollback()
        log_error("get_usage_stats", e, user_id=user_id)
        return {"active_contests": 0, "total_contests": 0}


def get_subscription(db: Session, user_id: str) -> Optional[dict]:
    """Current active/trialing subscription with its price and product, for the account page."""
    sub = (
        db.query(Subscription)
        .options(joinedload(Subscription.price).joinedload(Price.product))
        .filter(
            Subscription.user_id == user_id,
            Subscription.status.in_(ACTIVE_SUBSCRIPTION_STATUSES),
        )
        .order_by(Subscription.created.desc())
        .first()
    )
    if not sub:
        return None

    price = sub.price
    product = price.product if price else None
    return {
        "id": sub.id,
        "status": sub.status,
        "cancel_at_period_end": bool(sub.cancel_at_period_end),
        "current_period_end": sub.current_period_end.isoformat() if sub.current_period_end else None,
        "trial_end": sub.trial_end.isoformat() if sub.trial_end else None,
        "price": {
            "id": price.id,
            "unit_amount": price.unit_amount,
            "currency": price.currency,
            "interval": price.interval,
        } if price else None,
        "product": {
            "id": product.id,
            "name": product.name,
            "description": product.description,
        } if product else None,
    }
