# api/griddo/constants.py
from __future__ import annotations

TOTAL_SQUARES = 100
GRID_SIZE = 10
PRIZE_TEXT_MAX_LENGTH = 25

# --- contest_status ---
STATUS_DRAFT = "draft"
STATUS_OPEN = "open"
STATUS_LOCKED = "locked"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
CONTEST_STATUSES = (STATUS_DRAFT, STATUS_OPEN, STATUS_LOCKED, STATUS_IN_PROGRESS, STATUS_COMPLETED)
ACTIVE_CONTEST_STATUSES = (STATUS_DRAFT, STATUS_OPEN, STATUS_LOCKED, STATUS_IN_PROGRESS)

# --- payment_status ---
PAYMENT_AVAILABLE = "available"
PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_STATUSES = (PAYMENT_AVAILABLE, PAYMENT_PENDING, PAYMENT_PAID)

PAYMENT_OPTION_TYPES = ("venmo", "paypal", "cashapp", "zelle")
SPORT_TYPES = ("football", "baseball")
PRIZE_TYPES = ("percentage", "custom")

# --- game_quarter ---
FOOTBALL_QUARTERS = ("q1", "q2", "q3", "final")
BASEBALL_GAMES = ("game1", "game2", "game3", "game4", "game5", "game6", "game7")
GAME_QUARTERS = FOOTBALL_QUARTERS + BASEBALL_GAMES

QUARTER_DISPLAY_NAMES = {
    "q1": "Q1",
    "q2": "Halftime",
    "q3": "Q3",
    "final": "Final",
    "game1": "Game 1",
    "game2": "Game 2",
    "game3": "Game 3",
    "game4": "Game 4",
    "game5": "Game 5",
    "game6": "Game 6",
    "game7": "Game 7",
}

ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")

# --- storage buckets ---
BUCKET_PAYMENT_QR = "payment-qr-codes"
BUCKET_CONTEST_IMAGES = "contest-images"
BUCKET_AVATARS = "avatars"


class ContestErrors:
    NOT_FOUND = "Contest not found"
    NOT_FOUND_OR_NOT_OWNER = "Contest not found or access denied"
    UNAUTHORIZED = "You must be logged in"
    NOT_OWNER = "You do not own this contest"
    NOT_OPEN = "This contest is not currently accepting claims"
    SQUARE_TAKEN = "This square has already been claimed. Please select another."
    SQUARE_NOT_FOUND = "Square not found"
    FAILED_TO_CLAIM = "Failed to claim square. Please try again."
    RACE_CONDITION = "This square was just claimed by someone else. Please select another."
    SCORES_ONLY_IN_PROGRESS = "Scores can only be entered when the contest is in progress"
    NUMBERS_REQUIRED = "Grid numbers must be assigned before entering scores"
    NUMBERS_REQUIRED_TO_START = "Please enter numbers before starting the game"
    SCORES_BLOCK_UNLOCK = "Cannot unlock contest after scores have been entered"
    PAYMENT_OPTIONS_REQUIRED = "Please add payment options before opening the contest"
    SCORES_BLOCK_NUMBERS = "Numbers cannot be changed after scores have been entered"
    INVALID_NUMBERS = "Row and column numbers must each contain the digits 0-9 exactly once"
    INVALID_QUARTER = "Invalid quarter for this contest"
    INVALID_STATUS = "Invalid status value"
    ALL_FIELDS_REQUIRED = "All required fields must be provided"
    NO_SQUARES_SELECTED = "No squares selected"
    FAILED_TO_UPDATE = "Failed to update square status"
    FAILED_TO_UPDATE_CONTEST = "Failed to update contest"
    FAILED_TO_DELETE = "Failed to delete"
    LIMIT_REACHED = "You have reached your active contest limit. Upgrade to create more contests."
    UNEXPECTED = "An unexpected error occurred"
    RATE_LIMITED = "Too many requests. Please wait a moment and try again."
    INVALID_EMAIL = "Invalid email address format"


def max_squares_reached(limit: int) -> str:
    return f"You have already claimed the maximum of {limit} square(s) for this contest."
