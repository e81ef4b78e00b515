# api/griddo/main.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import Base, engine
from .settings import settings
from .utils.logger import configure_logging

# --- Routers ---
from .routers import auth as auth_router
from .routers import billing as billing_router
from .routers import contests as contests_router
from .routers import public as public_router

configure_logging()

# --- App init ---
app = FastAPI(title="Griddo API", version="0.1.0")

# --- CORS for the web frontend ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        settings.SITE_URL,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---
@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/health")
def api_health():
    return {"ok": True}


# --- Startup ---
@app.on_event("startup")
def startup():
    # Only auto-create tables locally; use Alembic in production
    if not settings.is_production:
        Base.metadata.create_all(bind=engine)


# --- Include routers ---
app.include_router(auth_router.router)
app.include_router(contests_router.router)
app.include_router(public_router.router)
app.include_router(billing_router.router)
