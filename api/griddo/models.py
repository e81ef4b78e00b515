import uuid
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey, Boolean, Text,
    UniqueConstraint, Index, JSON,
)
from sqlalchemy.orm import relationship

from .db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    firebase_uid = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, index=True)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    stripe_customer_id = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    contests = relationship("Contest", back_populates="owner")
    subscriptions = relationship("Subscription", back_populates="user")


class Contest(Base):
    __tablename__ = "contests"

    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    code = Column(String(6), unique=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    sport_type = Column(String, nullable=False, default="football")  # football | baseball
    row_team_name = Column(String(50), nullable=False)
    col_team_name = Column(String(50), nullable=False)
    square_price = Column(Float, nullable=False)
    max_squares_per_person = Column(Integer, nullable=True)

    # 10 distinct digits each, assigned before the game starts
    row_numbers = Column(JSON, nullable=True)
    col_numbers = Column(JSON, nullable=True)
    numbers_auto_generated = Column(Boolean, nullable=True)

    # Football payouts
    payout_q1_percent = Column(Float, nullable=True)
    payout_q2_percent = Column(Float, nullable=True)
    payout_q3_percent = Column(Float, nullable=True)
    payout_final_percent = Column(Float, nullable=True)
    # Baseball payouts
    payout_game1_percent = Column(Float, nullable=True)
    payout_game2_percent = Column(Float, nullable=True)
    payout_game3_percent = Column(Float, nullable=True)
    payout_game4_percent = Column(Float, nullable=True)
    payout_game5_percent = Column(Float, nullable=True)
    payout_game6_percent = Column(Float, nullable=True)
    payout_game7_percent = Column(Float, nullable=True)

    prize_type = Column(String, nullable=False, default="percentage")  # percentage | custom
    prize_q1_text = Column(String(25), nullable=True)
    prize_q2_text = Column(String(25), nullable=True)
    prize_q3_text = Column(String(25), nullable=True)
    prize_final_text = Column(String(25), nullable=True)

    hero_image_url = Column(String, nullable=True)
    org_image_url = Column(String, nullable=True)
    primary_color = Column(String(7), nullable=True)
    secondary_color = Column(String(7), nullable=True)

    status = Column(String, nullable=False, default="draft", index=True)
    is_public = Column(Boolean, nullable=False, default=False)
    access_pin = Column(String, nullable=True)

    enable_player_tracking = Column(Boolean, nullable=False, default=False)
    players = Column(JSON, nullable=True)  # [{"name", "number", "slug"}]

    deleted_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="contests")
    squares = relationship("Square", back_populates="contest", cascade="all, delete-orphan")
    payment_options = relationship(
        "PaymentOption",
        back_populates="contest",
        cascade="all, delete-orphan",
        order_by="PaymentOption.sort_order",
    )
    scores = relationship("Score", back_populates="contest", cascade="all, delete-orphan")

    def as_public_dict(self):
        """Contest fields safe to show participants (no access_pin)."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "slug": self.slug,
            "code": self.code,
            "description": self.description,
            "status": self.status,
            "sport_type": self.sport_type,
            "row_team_name": self.row_team_name,
            "col_team_name": self.col_team_name,
            "square_price": self.square_price,
            "max_squares_per_person": self.max_squares_per_person,
            "primary_color": self.primary_color or "#F97316",
            "secondary_color": self.secondary_color or "#D97706",
            "hero_image_url": self.hero_image_url,
            "org_image_url": self.org_image_url,
            "row_numbers": self.row_numbers,
            "col_numbers": self.col_numbers,
            "prize_type": self.prize_type,
            "prize_q1_text": self.prize_q1_text,
            "prize_q2_text": self.prize_q2_text,
            "prize_q3_text": self.prize_q3_text,
            "prize_final_text": self.prize_final_text,
            "payout_q1_percent": self.payout_q1_percent,
            "payout_q2_percent": self.payout_q2_percent,
            "payout_q3_percent": self.payout_q3_percent,
            "payout_final_percent": self.payout_final_percent,
            "payout_game1_percent": self.payout_game1_percent,
            "payout_game2_percent": self.payout_game2_percent,
            "payout_game3_percent": self.payout_game3_percent,
            "payout_game4_percent": self.payout_game4_percent,
            "payout_game5_percent": self.payout_game5_percent,
            "payout_game6_percent": self.payout_game6_percent,
            "payout_game7_percent": self.payout_game7_percent,
            "requires_pin": bool(self.access_pin),
        }

    def as_owner_dict(self):
        data = self.as_public_dict()
        data.update({
            "access_pin": self.access_pin,
            "is_public": self.is_public,
            "numbers_auto_generated": self.numbers_auto_generated,
            "enable_player_tracking": self.enable_player_tracking,
            "players": self.players or [],
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        })
        return data


class Square(Base):
    __tablename__ = "squares"

    id = Column(String(36), primary_key=True, default=_uuid)
    contest_id = Column(String(36), ForeignKey("contests.id", ondelete="CASCADE"), index=True, nullable=False)
    row_index = Column(Integer, nullable=False)
    col_index = Column(Integer, nullable=False)
    payment_status = Column(String, nullable=False, default="available", index=True)

    claimant_first_name = Column(String(50), nullable=True)
    claimant_last_name = Column(String(50), nullable=True)
    claimant_email = Column(String, nullable=True, index=True)
    claimant_venmo = Column(String(32), nullable=True)
    referred_by = Column(String(100), nullable=True)
    claimed_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    contest = relationship("Contest", back_populates="squares")

    __table_args__ = (
        UniqueConstraint("contest_id", "row_index", "col_index", name="uq_square_position"),
    )

    def as_dict(self, include_private: bool = False):
        data = {
            "id": self.id,
            "row_index": self.row_index,
            "col_index": self.col_index,
            "payment_status": self.payment_status,
            "claimant_first_name": self.claimant_first_name,
            "claimant_last_name": self.claimant_last_name,
        }
        if include_private:
            data.update({
                "claimant_email": self.claimant_email,
                "claimant_venmo": self.claimant_venmo,
                "referred_by": self.referred_by,
                "claimed_at": self.claimed_at.isoformat() if self.claimed_at else None,
                "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            })
        return data


class PaymentOption(Base):
    __tablename__ = "payment_options"

    id = Column(String(36), primary_key=True, default=_uuid)
    contest_id = Column(String(36), ForeignKey("contests.id", ondelete="CASCADE"), index=True, nullable=False)
    type = Column(String, nullable=False)  # venmo | paypal | cashapp | zelle
    handle_or_link = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    instructions = Column(Text, nullable=True)
    account_last_4_digits = Column(String(4), nullable=True)
    qr_code_url = Column(String, nullable=True)
    sort_order = Column(Integer, nullable=True, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    contest = relationship("Contest", back_populates="payment_options")

    def as_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "handle_or_link": self.handle_or_link,
            "display_name": self.display_name,
            "instructions": self.instructions,
            "account_last_4_digits": self.account_last_4_digits,
            "qr_code_url": self.qr_code_url,
            "sort_order": self.sort_order,
        }


class Score(Base):
    __tablename__ = "scores"

    id = Column(String(36), primary_key=True, default=_uuid)
    contest_id = Column(String(36), ForeignKey("contests.id", ondelete="CASCADE"), index=True, nullable=False)
    quarter = Column(String, nullable=False)
    home_score = Column(Integer, nullable=False)
    away_score = Column(Integer, nullable=False)
    winning_square_id = Column(String(36), ForeignKey("squares.id", ondelete="SET NULL"), nullable=True)
    entered_at = Column(DateTime, default=datetime.utcnow)

    contest = relationship("Contest", back_populates="scores")

    __table_args__ = (
        UniqueConstraint("contest_id", "quarter", name="uq_score_quarter"),
    )

    def as_dict(self):
        return {
            "id": self.id,
            "quarter": self.quarter,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winning_square_id": self.winning_square_id,
            "entered_at": self.entered_at.isoformat() if self.entered_at else None,
        }


# ---------------------------------------------------------------------------
# Billing mirror (written by the Stripe webhook)
# ---------------------------------------------------------------------------

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)  # Stripe product id
    active = Column(Boolean, nullable=True)
    name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    metadata_json = Column("metadata", JSON, nullable=True)

    prices = relationship("Price", back_populates="product")


class Price(Base):
    __tablename__ = "prices"

    id = Column(String, primary_key=True)  # Stripe price id
    product_id = Column(String, ForeignKey("products.id"), nullable=True)
    active = Column(Boolean, nullable=True)
    description = Column(Text, nullable=True)
    unit_amount = Column(Integer, nullable=True)
    currency = Column(String(3), nullable=True)
    type = Column(String, nullable=True)  # one_time | recurring
    interval = Column(String, nullable=True)  # day | week | month | year
    interval_count = Column(Integer, nullable=True)
    trial_period_days = Column(Integer, nullable=True)
    metadata_json = Column("metadata", JSON, nullable=True)

    product = relationship("Product", back_populates="prices")


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String, primary_key=True)  # Stripe subscription id
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(String, nullable=True, index=True)
    price_id = Column(String, ForeignKey("prices.id"), nullable=True)
    quantity = Column(Integer, nullable=True)
    cancel_at_period_end = Column(Boolean, nullable=True)
    cancel_at = Column(DateTime, nullable=True)
    canceled_at = Column(DateTime, nullable=True)
    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
    trial_start = Column(DateTime, nullable=True)
    trial_end = Column(DateTime, nullable=True)
    created = Column(DateTime, default=datetime.utcnow)
    metadata_json = Column("metadata", JSON, nullable=True)

    user = relationship("User", back_populates="subscriptions")
    price = relationship("Price")

    __table_args__ = (
        Index("ix_subscriptions_user_status", "user_id", "status"),
    )


class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(String(36), primary_key=True, default=_uuid)
    contest_id = Column(String(36), ForeignKey("contests.id", ondelete="CASCADE"), index=True, nullable=True)
    square_id = Column(String(36), ForeignKey("squares.id", ondelete="SET NULL"), nullable=True)
    recipient_email = Column(String, nullable=False)
    email_type = Column(String, nullable=False)
    resend_id = Column(String, nullable=True)
    status = Column(String, nullable=True)  # sent | failed | disabled
    sent_at = Column(DateTime, default=datetime.utcnow)
