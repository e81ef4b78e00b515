import os

# must be set before the app's settings are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["STORAGE_PUBLIC_BASE_URL"] = "https://storage.griddo.test/object/public"
os.environ["STRIPE_WEBHOOK_SECRET"] = ""
os.environ["SITE_URL"] = "https://griddo.test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.griddo.constants import GRID_SIZE
from api.griddo.db import Base, get_db
from api.griddo.deps.current_user import current_user, optional_current_user
from api.griddo.main import app
from api.griddo.models import Contest, PaymentOption, Square, User
from api.griddo.services import email as email_service
from api.griddo.utils.rate_limit import reset_rate_limits


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Replaces Resend; every email the app sends lands in this list."""
    outbox = []

    def fake_send(to, subject, html):
        outbox.append({"to": to, "subject": subject, "html": html})
        return f"re_{len(outbox)}"

    monkeypatch.setattr(email_service, "send_email", fake_send)
    return outbox


def _user(db, uid, email, name):
    user = User(firebase_uid=uid, email=email, full_name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    return _user(db, "owner-uid", "olive@gmail.com", "Olive Owner")


@pytest.fixture
def other_user(db):
    return _user(db, "other-uid", "otto@gmail.com", "Otto Other")


@pytest.fixture
def make_contest(db, owner):
    """Insert a contest with its 100 squares, bypassing the plan gate."""
    counter = {"n": 0}

    def factory(user=None, **fields):
        counter["n"] += 1
        n = counter["n"]
        values = dict(
            owner_id=(user or owner).id,
            code=f"CODE{n:02d}",
            slug=f"big-game-{n}",
            name=f"Big Game {n}",
            sport_type="football",
            row_team_name="Chiefs",
            col_team_name="Eagles",
            square_price=10.0,
            payout_q1_percent=20,
            payout_q2_percent=20,
            payout_q3_percent=20,
            payout_final_percent=40,
            status="draft",
        )
        values.update(fields)
        contest = Contest(**values)
        contest.squares = [
            Square(row_index=r, col_index=c, payment_status="available")
            for r in range(GRID_SIZE)
            for c in range(GRID_SIZE)
        ]
        db.add(contest)
        db.commit()
        db.refresh(contest)
        return contest

    return factory


@pytest.fixture
def add_payment_option(db):
    def add(contest, type="venmo", handle="Olive-Owner"):
        opt = PaymentOption(contest_id=contest.id, type=type, handle_or_link=handle, sort_order=0)
        db.add(opt)
        db.commit()
        return opt

    return add


@pytest.fixture
def square_at(db):
    def find(contest, row, col):
        return (
            db.query(Square)
            .filter(Square.contest_id == contest.id, Square.row_index == row, Square.col_index == col)
            .one()
        )

    return find


@pytest.fixture
def client(db, owner):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[current_user] = lambda: owner
    app.dependency_overrides[optional_current_user] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
