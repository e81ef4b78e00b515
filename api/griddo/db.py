# api/griddo/db.py
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .settings import settings

# Prefer a full DATABASE_URL (the host injects this). Fallback to individual parts for local dev.
DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    DATABASE_URL = (
        f"postgresql://{settings.PGUSER}:{settings.PGPASSWORD}"
        f"@{settings.PGHOST}:{settings.PGPORT}/{settings.PGDATABASE}"
    )

# Remote Postgres (not localhost) requires SSL
connect_args = {}
parsed = urlparse(DATABASE_URL)
if parsed.scheme.startswith("sqlite"):
    connect_args["check_same_thread"] = False
elif parsed.hostname not in {"localhost", "127.0.0.1", None}:
    # psycopg2 uses sslmode
    connect_args["sslmode"] = "require"

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
