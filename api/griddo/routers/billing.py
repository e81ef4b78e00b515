# api/griddo/routers/billing.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps.current_user import current_user
from ..models import Price, Product, Subscription, User
from ..services import stripe_client, subscriptions
from ..settings import settings
from ..utils.logger import log_error, log_info

router = APIRouter(tags=["billing"])


def _ensure_customer(db: Session, user: User) -> str:
    if not user.stripe_customer_id:
        user.stripe_customer_id = stripe_client.get_or_create_customer(user.email, user.id)
        db.commit()
    return user.stripe_customer_id


# ============================================================
# Pro checkout
# ============================================================

@router.post("/api/billing/checkout")
def create_checkout(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    """
    Start Stripe Checkout for the Pro plan.
    Returns: { url: "https://checkout.stripe.com/..." }
    """
    if not settings.STRIPE_SECRET_KEY or not settings.STRIPE_PRO_PRICE_ID:
        raise HTTPException(500, "Stripe is not configured on server")

    if subscriptions.has_active_subscription(db, user.id):
        raise HTTPException(400, "You already have an active subscription.")

    try:
        customer_id = _ensure_customer(db, user)
        url = stripe_client.create_checkout_session(
            customer_id=customer_id,
            user_id=user.id,
            success_url=f"{settings.SITE_URL}/account?upgraded=1",
            cancel_url=f"{settings.SITE_URL}/pricing?canceled=1",
        )
    except Exception as e:
        log_error("create_checkout", e, user_id=user.id)
        raise HTTPException(500, "Unable to start checkout. Please try again.")

    return {"url": url}


# ============================================================
# Billing portal
# ============================================================

@router.get("/manage-subscription")
def manage_subscription(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Send the owner to the Stripe billing portal; Stripe returns them to /account."""
    try:
        customer_id = _ensure_customer(db, user)
        url = stripe_client.create_billing_portal_session(
            customer_id=customer_id,
            return_url=f"{settings.SITE_URL}/account",
        )
    except Exception as e:
        log_error("manage_subscription", e, user_id=user.id)
        raise HTTPException(500, "Unable to create billing portal session. Please contact support.")

    return RedirectResponse(url, status_code=303)


@router.get("/api/billing/subscription")
def current_subscription(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return {
        "subscription": subscriptions.get_subscription(db, user.id),
        "limit": subscriptions.get_contest_limit(db, user.id),
    }


# ============================================================
# Stripe webhook: mirrors products / prices / subscriptions
# ============================================================

def _ts(value) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)


def _upsert_product(db: Session, data: dict) -> Product:
    product = db.get(Product, data["id"]) or Product(id=data["id"])
    product.active = data.get("active")
    product.name = data.get("name")
    product.description = data.get("description")
    images = data.get("images") or []
    product.image = images[0] if images else None
    product.metadata_json = data.get("metadata") or {}
    db.add(product)
    return product


def _upsert_price(db: Session, data: dict) -> Price:
    product_id = data.get("product")
    if isinstance(product_id, dict):
        product_id = _upsert_product(db, product_id).id
    elif product_id and not db.get(Product, product_id):
        db.add(Product(id=product_id))

    recurring = data.get("recurring") or {}
    price = db.get(Price, data["id"]) or Price(id=data["id"])
    price.product_id = product_id
    price.active = data.get("active")
    price.description = data.get("nickname")
    price.unit_amount = data.get("unit_amount")
    price.currency = data.get("currency")
    price.type = data.get("type")
    price.interval = recurring.get("interval")
    price.interval_count = recurring.get("interval_count")
    price.trial_period_days = recurring.get("trial_period_days")
    price.metadata_json = data.get("metadata") or {}
    db.add(price)
    return price


def _find_user(db: Session, customer_id: Optional[str], metadata: dict) -> Optional[User]:
    user = None
    if metadata.get("user_id"):
        user = db.get(User, metadata["user_id"])
    if not user and customer_id:
        user = db.query(User).filter(User.stripe_customer_id == customer_id).first()
    return user


def _upsert_subscription(db: Session, data: dict) -> Optional[Subscription]:
    metadata = data.get("metadata") or {}
    customer_id = data.get("customer")
    user = _find_user(db, customer_id, metadata)
    if not user:
        log_info("stripe_webhook", "subscription for unknown customer", customer=customer_id)
        return None
    if customer_id and not user.stripe_customer_id:
        user.stripe_customer_id = customer_id

    items = (data.get("items") or {}).get("data") or []
    item = items[0] if items else {}
    price_id = None
    if item.get("price"):
        price_id = _upsert_price(db, item["price"]).id

    sub = db.get(Subscription, data["id"]) or Subscription(id=data["id"], user_id=user.id)
    sub.user_id = user.id
    sub.status = data.get("status")
    sub.price_id = price_id
    sub.quantity = item.get("quantity") or data.get("quantity")
    sub.cancel_at_period_end = data.get("cancel_at_period_end")
    sub.cancel_at = _ts(data.get("cancel_at"))
    sub.canceled_at = _ts(data.get("canceled_at"))
    # newer API versions report the billing period per item
    sub.current_period_start = _ts(data.get("current_period_start") or item.get("current_period_start"))
    sub.current_period_end = _ts(data.get("current_period_end") or item.get("current_period_end"))
    sub.ended_at = _ts(data.get("ended_at"))
    sub.trial_start = _ts(data.get("trial_start"))
    sub.trial_end = _ts(data.get("trial_end"))
    if data.get("created"):
        sub.created = _ts(data["created"])
    sub.metadata_json = metadata
    db.add(sub)
    return sub


@router.post("/api/billing/webhook")
async def stripe_webhook(request: Request, db: Session = Depends(get_db)):
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature", "")

    try:
        event = stripe_client.parse_event(payload, sig_header)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid payload")

    event_type = event.get("type", "")
    data = (event.get("data") or {}).get("object") or {}

    try:
        if event_type in ("product.created", "product.updated", "product.deleted"):
            product = _upsert_product(db, data)
            if event_type == "product.deleted":
                product.active = False

        elif event_type in ("price.created", "price.updated", "price.deleted"):
            price = _upsert_price(db, data)
            if event_type == "price.deleted":
                price.active = False

        elif event_type in (
            "customer.subscription.created",
            "customer.subscription.updated",
            "customer.subscription.deleted",
        ):
            _upsert_subscription(db, data)

        elif event_type == "checkout.session.completed":
            if data.get("mode") == "subscription":
                user = _find_user(db, data.get("customer"), data.get("metadata") or {})
                if user and data.get("customer"):
                    user.stripe_customer_id = data["customer"]
                if data.get("subscription"):
                    sub = stripe_client.retrieve_subscription(data["subscription"])
                    if sub:
                        _upsert_subscription(db, sub)

        else:
            return {"ok": True, "ignored": event_type}

        db.commit()
    except Exception as e:
        db.rollback()
        log_error("stripe_webhook", e, event_type=event_type)
        # non-2xx makes Stripe retry
        raise HTTPException(status_code=500, detail="Webhook handler failed")

    return {"ok": True}
