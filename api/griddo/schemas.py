from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator, model_validator

from .constants import FOOTBALL_QUARTERS, BASEBALL_GAMES, GAME_QUARTERS, PRIZE_TEXT_MAX_LENGTH

ContestStatusIn = Literal["draft", "open", "locked", "in_progress", "completed"]
PaymentStatusIn = Literal["available", "pending", "paid"]
PaymentOptionTypeIn = Literal["venmo", "paypal", "cashapp", "zelle"]
SportTypeIn = Literal["football", "baseball"]
PrizeTypeIn = Literal["percentage", "custom"]
GameQuarterIn = Literal[GAME_QUARTERS]  # type: ignore[valid-type]

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


# ---- Action envelope ----
class ErrorOut(BaseModel):
    message: str
    details: Optional[dict[str, Any]] = None


class ActionResponse(BaseModel):
    """Uniform result of every action: exactly one of data / error is meaningful."""
    data: Any = None
    error: Optional[ErrorOut] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResponse":
        return cls(data=data, error=None)

    @classmethod
    def fail(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ActionResponse":
        return cls(data=None, error=ErrorOut(message=message, details=details))

    @property
    def is_error(self) -> bool:
        return self.error is not None


def football_payout_total(data: dict) -> float:
    return sum(float(data.get(f"payout_{q}_percent") or 0) for q in FOOTBALL_QUARTERS)


def baseball_payout_total(data: dict) -> float:
    return sum(float(data.get(f"payout_{g}_percent") or 0) for g in BASEBALL_GAMES)


# ---- Contests ----
class ContestCreate(BaseModel):
    # Basic info
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    row_team_name: str = Field(min_length=1, max_length=50)
    col_team_name: str = Field(min_length=1, max_length=50)
    sport_type: SportTypeIn = "football"

    # Settings
    square_price: float = Field(ge=1, lt=10000)
    max_squares_per_person: Optional[int] = Field(default=None, ge=1, le=100)
    payout_q1_percent: float = Field(default=20, ge=0, le=100)
    payout_q2_percent: float = Field(default=20, ge=0, le=100)
    payout_q3_percent: float = Field(default=20, ge=0, le=100)
    payout_final_percent: float = Field(default=40, ge=0, le=100)
    payout_game1_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game2_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game3_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game4_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game5_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game6_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game7_percent: Optional[float] = Field(default=None, ge=0, le=100)
    prize_type: PrizeTypeIn = "percentage"
    prize_q1_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_q2_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_q3_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_final_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)

    # Branding
    hero_image_url: Optional[HttpUrl] = None
    org_image_url: Optional[HttpUrl] = None
    primary_color: str = Field(default="#F97316", pattern=HEX_COLOR)
    secondary_color: str = Field(default="#D97706", pattern=HEX_COLOR)

    # Access control
    require_pin: bool = False
    access_pin: Optional[str] = Field(default=None, min_length=4, max_length=12)

    @field_validator("hero_image_url", "org_image_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, v):
        return None if v == "" else v

    @model_validator(mode="after")
    def _check_totals(self):
        data = self.model_dump()
        if football_payout_total(data) > 100 or baseball_payout_total(data) > 100:
            raise ValueError("Total payout cannot exceed 100%")
        if self.require_pin and not self.access_pin:
            raise ValueError("An access PIN is required when PIN protection is enabled")
        return self


class ContestUpdate(BaseModel):
    """Fields an owner may change after creation. Only explicitly-set fields are written."""
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    row_team_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    col_team_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    square_price: Optional[float] = Field(default=None, ge=1, lt=10000)
    max_squares_per_person: Optional[int] = Field(default=None, ge=1, le=100)
    payout_q1_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_q2_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_q3_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_final_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game1_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game2_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game3_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game4_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game5_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game6_percent: Optional[float] = Field(default=None, ge=0, le=100)
    payout_game7_percent: Optional[float] = Field(default=None, ge=0, le=100)
    prize_type: Optional[PrizeTypeIn] = None
    prize_q1_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_q2_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_q3_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    prize_final_text: Optional[str] = Field(default=None, max_length=PRIZE_TEXT_MAX_LENGTH)
    hero_image_url: Optional[str] = None
    org_image_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    access_pin: Optional[str] = Field(default=None, min_length=4, max_length=12)
    is_public: Optional[bool] = None
    enable_player_tracking: Optional[bool] = None
    status: Optional[ContestStatusIn] = None

    @model_validator(mode="after")
    def _check_totals(self):
        data = self.model_dump(exclude_unset=True)
        if football_payout_total(data) > 100 or baseball_payout_total(data) > 100:
            raise ValueError("Total payout cannot exceed 100%")
        return self


class ContestStatusUpdate(BaseModel):
    status: ContestStatusIn


class NumbersIn(BaseModel):
    row_numbers: Optional[list[int]] = None
    col_numbers: Optional[list[int]] = None
    auto_generate: bool = False


class ScoreIn(BaseModel):
    quarter: GameQuarterIn
    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)


class SaveScoresIn(BaseModel):
    scores: list[ScoreIn]


# ---- Squares ----
class ClaimSquareIn(BaseModel):
    square_id: str
    contest_id: str
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=1)
    venmo_handle: Optional[str] = Field(default=None, max_length=32)
    referred_by_slug: Optional[str] = Field(default=None, max_length=50)


class BulkUpdateSquaresIn(BaseModel):
    square_ids: list[str]
    new_status: Literal["pending", "paid"]


class SquareStatusIn(BaseModel):
    new_status: PaymentStatusIn


# ---- Payment options ----
class PaymentOptionIn(BaseModel):
    type: PaymentOptionTypeIn
    handle_or_link: str = Field(min_length=1, max_length=200)
    display_name: Optional[str] = Field(default=None, max_length=100)
    instructions: Optional[str] = Field(default=None, max_length=500)
    sort_order: int = 0
    account_last_4_digits: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    qr_code_url: Optional[str] = None


class PaymentOptionsIn(BaseModel):
    options: list[PaymentOptionIn]


# ---- Players ----
class PlayerIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    number: Optional[int] = Field(default=None, gt=0)


# ---- Account ----
class ProfileUpdateIn(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
