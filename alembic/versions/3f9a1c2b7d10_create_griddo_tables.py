"""create users, contests, squares, payment_options, scores, billing and email_logs tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 10:12:41.118302
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f9a1c2b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("firebase_uid", sa.String(), nullable=False, unique=True, index=True),
        sa.Column("email", sa.String(), nullable=True, index=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("stripe_customer_id", sa.String(), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    # --- contests ---
    op.create_table(
        "contests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("code", sa.String(6), nullable=False, unique=True),
        sa.Column("slug", sa.String(), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sport_type", sa.String(), nullable=False, server_default="football"),
        sa.Column("row_team_name", sa.String(50), nullable=False),
        sa.Column("col_team_name", sa.String(50), nullable=False),
        sa.Column("square_price", sa.Float(), nullable=False),
        sa.Column("max_squares_per_person", sa.Integer(), nullable=True),
        sa.Column("row_numbers", sa.JSON(), nullable=True),
        sa.Column("col_numbers", sa.JSON(), nullable=True),
        sa.Column("numbers_auto_generated", sa.Boolean(), nullable=True),
        sa.Column("payout_q1_percent", sa.Float(), nullable=True),
        sa.Column("payout_q2_percent", sa.Float(), nullable=True),
        sa.Column("payout_q3_percent", sa.Float(), nullable=True),
        sa.Column("payout_final_percent", sa.Float(), nullable=True),
        sa.Column("payout_game1_percent", sa.Float(), nullable=True),
        sa.Column("payout_game2_percent", sa.Float(), nullable=True),
        sa.Column("payout_game3_percent", sa.Float(), nullable=True),
        sa.Column("payout_game4_percent", sa.Float(), nullable=True),
        sa.Column("payout_game5_percent", sa.Float(), nullable=True),
        sa.Column("payout_game6_percent", sa.Float(), nullable=True),
        sa.Column("payout_game7_percent", sa.Float(), nullable=True),
        sa.Column("prize_type", sa.String(), nullable=False, server_default="percentage"),
        sa.Column("prize_q1_text", sa.String(25), nullable=True),
        sa.Column("prize_q2_text", sa.String(25), nullable=True),
        sa.Column("prize_q3_text", sa.String(25), nullable=True),
        sa.Column("prize_final_text", sa.String(25), nullable=True),
        sa.Column("hero_image_url", sa.String(), nullable=True),
        sa.Column("org_image_url", sa.String(), nullable=True),
        sa.Column("primary_color", sa.String(7), nullable=True),
        sa.Column("secondary_color", sa.String(7), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="draft", index=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("access_pin", sa.String(), nullable=True),
        sa.Column("enable_player_tracking", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("players", sa.JSON(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True, index=True),
        sa.Column("created_at", sa.DateTime(), nullable=True, index=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    # --- squares ---
    op.create_table(
        "squares",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("contest_id", sa.String(36), sa.ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("row_index", sa.Integer(), nullable=False),
        sa.Column("col_index", sa.Integer(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="available", index=True),
        sa.Column("claimant_first_name", sa.String(50), nullable=True),
        sa.Column("claimant_last_name", sa.String(50), nullable=True),
        sa.Column("claimant_email", sa.String(), nullable=True, index=True),
        sa.Column("claimant_venmo", sa.String(32), nullable=True),
        sa.Column("referred_by", sa.String(100), nullable=True),
        sa.Column("claimed_at", sa.DateTime(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("contest_id", "row_index", "col_index", name="uq_square_position"),
    )

    # --- payment_options ---
    op.create_table(
        "payment_options",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("contest_id", sa.String(36), sa.ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("handle_or_link", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("account_last_4_digits", sa.String(4), nullable=True),
        sa.Column("qr_code_url", sa.String(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )

    # --- scores ---
    op.create_table(
        "scores",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("contest_id", sa.String(36), sa.ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("quarter", sa.String(), nullable=False),
        sa.Column("home_score", sa.Integer(), nullable=False),
        sa.Column("away_score", sa.Integer(), nullable=False),
        sa.Column("winning_square_id", sa.String(36), sa.ForeignKey("squares.id", ondelete="SET NULL"), nullable=True),
        sa.Column("entered_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("contest_id", "quarter", name="uq_score_quarter"),
    )

    # --- Stripe mirror ---
    op.create_table(
        "products",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
    )
    op.create_table(
        "prices",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("unit_amount", sa.Integer(), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("type", sa.String(), nullable=True),
        sa.Column("interval", sa.String(), nullable=True),
        sa.Column("interval_count", sa.Integer(), nullable=True),
        sa.Column("trial_period_days", sa.Integer(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
    )
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("status", sa.String(), nullable=True, index=True),
        sa.Column("price_id", sa.String(), sa.ForeignKey("prices.id"), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=True),
        sa.Column("cancel_at", sa.DateTime(), nullable=True),
        sa.Column("canceled_at", sa.DateTime(), nullable=True),
        sa.Column("current_period_start", sa.DateTime(), nullable=True),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("ended_at", sa.DateTime(), nullable=True),
        sa.Column("trial_start", sa.DateTime(), nullable=True),
        sa.Column("trial_end", sa.DateTime(), nullable=True),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
    )
    op.create_index("ix_subscriptions_user_status", "subscriptions", ["user_id", "status"])

    # --- email_logs ---
    op.create_table(
        "email_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("contest_id", sa.String(36), sa.ForeignKey("contests.id", ondelete="CASCADE"), nullable=True, index=True),
        sa.Column("square_id", sa.String(36), sa.ForeignKey("squares.id", ondelete="SET NULL"), nullable=True),
        sa.Column("recipient_email", sa.String(), nullable=False),
        sa.Column("email_type", sa.String(), nullable=False),
        sa.Column("resend_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("email_logs")
    op.drop_index("ix_subscriptions_user_status", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_table("prices")
    op.drop_table("products")
    op.drop_table("scores")
    op.drop_table("payment_options")
    op.drop_table("squares")
    op.drop_table("contests")
    op.drop_table("users")
