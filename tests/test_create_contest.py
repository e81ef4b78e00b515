import re

from sqlalchemy.exc import IntegrityError

from api.griddo import crud
from api.griddo.constants import ContestErrors
from api.griddo.models import Square, Subscription
from api.griddo.services import contests as contest_actions
from api.griddo.services import subscriptions

PAYLOAD = {
    "name": "Lincoln High Boosters",
    "row_team_name": "Chiefs",
    "col_team_name": "Eagles",
    "square_price": 10,
}


def test_create_contest_builds_grid(db, owner):
    res = contest_actions.create_contest(db, owner, PAYLOAD)

    assert res.error is None
    data = res.data
    assert data["status"] == "draft"
    assert re.fullmatch(r"[ABCDEFGHJKLMNPQRSTUVWXYZ23456789]{6}", data["code"])
    assert re.fullmatch(r"lincoln-high-boosters-[a-z0-9]{6}", data["slug"])
    assert data["access_pin"] is None
    assert db.query(Square).filter(Square.contest_id == data["id"]).count() == 100


def test_pin_kept_only_when_required(db, owner):
    res = contest_actions.create_contest(db, owner, {**PAYLOAD, "access_pin": "ABCD", "require_pin": False})
    assert res.data["access_pin"] is None

    db.add(Subscription(id="sub_pin", user_id=owner.id, status="active"))
    db.commit()
    res = contest_actions.create_contest(db, owner, {**PAYLOAD, "access_pin": "ABCD", "require_pin": True})
    assert res.data["access_pin"] == "ABCD"
    assert res.data["requires_pin"] is True


def test_create_validation_details(db, owner):
    res = contest_actions.create_contest(db, owner, {**PAYLOAD, "name": "ab", "primary_color": "orange"})

    assert res.error.message == "Invalid contest data"
    assert "name" in res.error.details
    assert "primary_color" in res.error.details


def test_free_plan_limit(db, owner):
    assert contest_actions.create_contest(db, owner, PAYLOAD).error is None

    res = contest_actions.create_contest(db, owner, PAYLOAD)

    assert res.error.message == ContestErrors.LIMIT_REACHED
    assert res.error.details == {"limit": 1, "current_count": 1}


def test_completed_and_deleted_contests_do_not_count(db, owner, make_contest):
    make_contest(status="completed")
    deleted = make_contest()
    contest_actions.delete_contest(db, owner, deleted.id)

    limit = subscriptions.get_contest_limit(db, owner.id)

    assert limit == {"can_create": True, "limit": 1, "current_count": 0}


def test_subscriber_is_unlimited(db, owner, make_contest):
    make_contest()
    make_contest(status="open")
    db.add(Subscription(id="sub_123", user_id=owner.id, status="trialing"))
    db.commit()

    limit = subscriptions.get_contest_limit(db, owner.id)

    assert limit == {"can_create": True, "limit": None, "current_count": 2}
    assert contest_actions.create_contest(db, owner, PAYLOAD).error is None


def test_canceled_subscription_does_not_count(db, owner):
    db.add(Subscription(id="sub_old", user_id=owner.id, status="canceled"))
    db.commit()

    assert subscriptions.has_active_subscription(db, owner.id) is False
    assert subscriptions.has_active_subscription(db, None) is False


def test_contest_limit_fails_closed(db, owner, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(crud, "count_active_contests", boom)

    assert subscriptions.get_contest_limit(db, owner.id) == {
        "can_create": False,
        "limit": 1,
        "current_count": 0,
    }
    assert subscriptions.get_usage_stats(db, owner.id) == {"active_contests": 0, "total_contests": 0}


def test_usage_stats(db, owner, make_contest):
    make_contest()
    make_contest(status="completed")

    assert subscriptions.get_usage_stats(db, owner.id) == {"active_contests": 1, "total_contests": 2}


def test_code_collision_retries(db, owner, monkeypatch):
    attempts = {"n": 0}
    real_commit = db.commit

    def flaky_commit():
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise IntegrityError("INSERT", {}, Exception("duplicate key value"))
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)

    res = contest_actions.create_contest(db, owner, PAYLOAD)

    assert res.error is None
    assert attempts["n"] == 2


def test_create_endpoint_and_listing(client):
    res = client.post("/api/contests", json=PAYLOAD)
    assert res.status_code == 200
    created = res.json()["data"]

    listing = client.get("/api/contests").json()
    assert [c["id"] for c in listing["contests"]] == [created["id"]]
    assert listing["contests"][0]["square_counts"] == {"available": 100, "pending": 0, "paid": 0}
    assert listing["limit"]["can_create"] is False
