# api/griddo/services/stripe_client.py
from __future__ import annotations

import json
from typing import Optional

import stripe

from ..settings import settings
from ..utils.logger import log_error, log_warning

# ============================================================
# Stripe config
# ============================================================

if settings.STRIPE_SECRET_KEY:
    stripe.api_key = settings.STRIPE_SECRET_KEY


class StripeNotConfigured(Exception):
    pass


def _require_key() -> None:
    if not settings.STRIPE_SECRET_KEY:
        raise StripeNotConfigured("Stripe not configured")


# ============================================================
# Webhook Parser (used by routers/billing.py)
# ============================================================

def parse_event(payload: bytes, sig_header: str) -> dict:
    """
    Verify a Stripe webhook against the signing secret and return the event
    as a plain dict.

    Without STRIPE_WEBHOOK_SECRET the signature check is skipped, but only
    outside production (local dev / stripe-cli).
    """
    if settings.STRIPE_WEBHOOK_SECRET:
        try:
            stripe.Webhook.construct_event(
                payload=payload,
                sig_header=sig_header,
                secret=settings.STRIPE_WEBHOOK_SECRET,
            )
        except Exception as e:
            log_warning("stripe.parse_event", "Stripe signature verification failed", error=str(e))
            raise
    elif settings.is_production:
        raise StripeNotConfigured("STRIPE_WEBHOOK_SECRET missing")
    else:
        log_warning("stripe.parse_event", "STRIPE_WEBHOOK_SECRET not set, skipping signature verification")

    return json.loads(payload)


# ============================================================
# Customers
# ============================================================

def get_or_create_customer(email: Optional[str], user_id: str) -> str:
    """
    Find the Stripe customer for this account (by email) or create one.
    Returns the customer id.
    """
    _require_key()

    if email:
        result = stripe.Customer.search(query=f"email:'{email}'")
        if result.data:
            return result.data[0].id

    customer = stripe.Customer.create(email=email, metadata={"user_id": user_id})
    return customer.id


def create_billing_portal_session(customer_id: str, return_url: str) -> str:
    """Billing portal URL where the owner manages their subscription."""
    _require_key()

    session = stripe.billing_portal.Session.create(
        customer=customer_id,
        return_url=return_url,
    )
    return session.url


# ============================================================
# Pro plan checkout
# ============================================================

def create_checkout_session(
    customer_id: str,
    user_id: str,
    success_url: str,
    cancel_url: str,
    price_id: Optional[str] = None,
) -> str:
    _require_key()
    price_id = price_id or settings.STRIPE_PRO_PRICE_ID
    if not price_id:
        raise StripeNotConfigured("Missing STRIPE_PRO_PRICE_ID")

    session = stripe.checkout.Session.create(
        mode="subscription",
        customer=customer_id,
        line_items=[{"price": price_id, "quantity": 1}],
        allow_promotion_codes=True,
        success_url=success_url,
        cancel_url=cancel_url,
        subscription_data={"metadata": {"user_id": user_id}},
        metadata={"user_id": user_id},
    )
    return session.url


def retrieve_subscription(subscription_id: str) -> Optional[dict]:
    """Fetch a subscription as a plain dict, None when Stripe can't be reached."""
    try:
        _require_key()
        sub = stripe.Subscription.retrieve(subscription_id)
        # str(StripeObject) is its recursive JSON form
        return json.loads(str(sub))
    except Exception as e:
        log_error("stripe.retrieve_subscription", e, subscription_id=subscription_id)
        return None
