# api/griddo/settings.py
import os
from pathlib import Path
from dotenv import load_dotenv

# Always load the repo-root .env, regardless of CWD
ROOT_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ROOT_ENV)


class Settings:
    # ----------------------------------------------------------------------
    # Runtime
    # ----------------------------------------------------------------------
    ENV = os.getenv("ENV", "local")
    SITE_URL = os.getenv("SITE_URL", "http://localhost:3000").rstrip("/")

    # ----------------------------------------------------------------------
    # Database
    # ----------------------------------------------------------------------
    DATABASE_URL = os.getenv("DATABASE_URL", "")
    PGHOST = os.getenv("PGHOST", "localhost")
    PGPORT = int(os.getenv("PGPORT", "5432"))
    PGUSER = os.getenv("PGUSER", "griddo")
    PGPASSWORD = os.getenv("PGPASSWORD", "griddo")
    PGDATABASE = os.getenv("PGDATABASE", "griddo")

    # ----------------------------------------------------------------------
    # Plans
    # ----------------------------------------------------------------------
    # Active (non-completed, non-deleted) contests allowed without a subscription
    FREE_CONTEST_LIMIT = int(os.getenv("FREE_CONTEST_LIMIT", "1"))

    # ----------------------------------------------------------------------
    # Stripe
    # ----------------------------------------------------------------------
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    STRIPE_PRO_PRICE_ID = os.getenv("STRIPE_PRO_PRICE_ID", "")

    # ----------------------------------------------------------------------
    # Email (Resend)
    # ----------------------------------------------------------------------
    RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
    RESEND_FROM_EMAIL = os.getenv("RESEND_FROM_EMAIL", "Fundwell <no-reply@griddo.us>")

    # ----------------------------------------------------------------------
    # Auth (Firebase)
    # ----------------------------------------------------------------------
    FIREBASE_SERVICE_ACCOUNT_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "")

    # ----------------------------------------------------------------------
    # Object storage (any S3-compatible endpoint)
    # ----------------------------------------------------------------------
    STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL", "")
    STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID", "")
    STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY", "")
    STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")
    # e.g. https://<project>.supabase.co/storage/v1/object/public
    STORAGE_PUBLIC_BASE_URL = os.getenv("STORAGE_PUBLIC_BASE_URL", "").rstrip("/")

    # ----------------------------------------------------------------------
    # Error tracking
    # ----------------------------------------------------------------------
    SENTRY_DSN = os.getenv("SENTRY_DSN", "")

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


settings = Settings()
