from api.griddo.deps.current_user import optional_current_user
from api.griddo.main import app
from api.griddo.services import access


def test_pin_is_case_insensitive(db, make_contest):
    make_contest(slug="private-game", access_pin="AB12", is_public=True)

    res = access.verify_pin(db, "private-game", " ab12 ")

    assert res.error is None
    assert res.data == {"success": True, "cookie_value": access.pin_hash("AB12")}


def test_wrong_pin(db, make_contest):
    make_contest(slug="private-game", access_pin="AB12")

    res = access.verify_pin(db, "private-game", "ZZZZ")

    assert res.data == {"success": False}
    assert res.error.message == "Incorrect PIN"


def test_pin_requires_slug_and_pin(db):
    assert access.verify_pin(db, "", "AB12").error.message == "Contest slug and PIN are required"
    assert access.verify_pin(db, "missing", "AB12").error.message == "Contest not found"


def test_pin_attempts_are_rate_limited(db, make_contest):
    make_contest(slug="private-game", access_pin="AB12")
    for _ in range(10):
        access.verify_pin(db, "private-game", "nope", client_key="1.2.3.4")

    res = access.verify_pin(db, "private-game", "AB12", client_key="1.2.3.4")

    assert res.error.message.startswith("Too many attempts")
    assert access.verify_pin(db, "private-game", "AB12", client_key="5.6.7.8").error is None


def test_changed_pin_invalidates_cookie():
    cookie = access.pin_hash("AB12")

    assert access.has_contest_access("g", "AB12", cookie) is True
    assert access.has_contest_access("g", "CD34", cookie) is False
    assert access.has_contest_access("g", None, None) is True


def test_public_contest_view(client, make_contest, add_payment_option, square_at, db):
    contest = make_contest(status="open", is_public=True)
    add_payment_option(contest, "venmo", "Lincoln-Boosters")
    sq = square_at(contest, 0, 0)
    sq.payment_status = "pending"
    sq.claimant_first_name = "Pat"
    sq.claimant_email = "pat@gmail.com"
    db.commit()

    body = client.get(f"/api/public/contests/{contest.slug}").json()

    assert body["requires_pin"] is False
    assert "access_pin" not in body["contest"]
    assert len(body["squares"]) == 100
    assert "claimant_email" not in body["squares"][0]
    assert body["payment_options"][0]["payment_url"] == "https://venmo.com/Lincoln-Boosters?txn=pay"


def test_unpublished_contest_hidden(client, make_contest):
    contest = make_contest(is_public=False)

    assert client.get(f"/api/public/contests/{contest.slug}").status_code == 404


def test_owner_can_preview_unpublished_contest(client, owner, make_contest):
    contest = make_contest(is_public=False, access_pin="AB12")
    app.dependency_overrides[optional_current_user] = lambda: owner

    body = client.get(f"/api/public/contests/{contest.slug}").json()

    assert body["requires_pin"] is False


def test_pin_cookie_unlocks_contest(client, make_contest):
    contest = make_contest(status="open", is_public=True, access_pin="AB12")

    locked = client.get(f"/api/public/contests/{contest.slug}").json()
    assert locked["requires_pin"] is True
    assert set(locked["contest"]) == {"name", "slug", "primary_color", "secondary_color", "org_image_url"}

    res = client.post(f"/api/public/contests/{contest.slug}/verify-pin", json={"pin": "ab12"})
    assert res.json() == {"data": {"success": True}, "error": None}
    assert res.cookies.get(access.access_cookie_name(contest.slug)) == access.pin_hash("AB12")

    unlocked = client.get(f"/api/public/contests/{contest.slug}").json()
    assert unlocked["requires_pin"] is False
    assert len(unlocked["squares"]) == 100


def test_wrong_pin_sets_no_cookie(client, make_contest):
    contest = make_contest(is_public=True, access_pin="AB12")

    res = client.post(f"/api/public/contests/{contest.slug}/verify-pin", json={"pin": "nope"})

    assert res.json()["error"]["message"] == "Incorrect PIN"
    assert access.access_cookie_name(contest.slug) not in res.cookies
