from types import SimpleNamespace

from api.griddo import crud
from api.griddo.constants import ContestErrors
from api.griddo.models import EmailLog, Square
from api.griddo.services import contests as contest_actions


def _payload(contest, square, **overrides):
    data = {
        "contest_id": contest.id,
        "square_id": square.id,
        "first_name": "Jamie",
        "last_name": "Rivera",
        "email": "Jamie.Rivera@Gmail.com",
    }
    data.update(overrides)
    return data


def test_claim_available_square(db, make_contest, add_payment_option, square_at, sent_emails):
    contest = make_contest(status="open")
    add_payment_option(contest, "venmo", "Lincoln-Boosters")
    sq = square_at(contest, 4, 2)

    res = contest_actions.claim_square(db, _payload(contest, sq))

    assert res.error is None
    assert res.data == {"square": {"id": sq.id, "row_index": 4, "col_index": 2}}
    db.refresh(sq)
    assert sq.payment_status == "pending"
    assert sq.claimant_email == "jamie.rivera@gmail.com"
    assert sq.claimed_at is not None

    assert len(sent_emails) == 1
    mail = sent_emails[0]
    assert mail["to"] == "jamie.rivera@gmail.com"
    assert mail["subject"] == f"You claimed a square in {contest.name}!"
    assert "https://venmo.com/Lincoln-Boosters?txn=pay" in mail["html"]
    assert "$10.00" in mail["html"]
    assert db.query(EmailLog).one().email_type == "square_claimed"


def test_claim_taken_square(db, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 0, 0)
    assert contest_actions.claim_square(db, _payload(contest, sq)).error is None

    res = contest_actions.claim_square(db, _payload(contest, sq, email="someone.else@gmail.com"))

    assert res.error.message == ContestErrors.SQUARE_TAKEN


def test_claim_requires_open_contest(db, make_contest, square_at):
    contest = make_contest(status="draft")

    res = contest_actions.claim_square(db, _payload(contest, square_at(contest, 0, 0)))

    assert res.error.message == ContestErrors.NOT_OPEN


def test_claim_invalid_email(db, make_contest, square_at):
    contest = make_contest(status="open")

    res = contest_actions.claim_square(db, _payload(contest, square_at(contest, 0, 0), email="not-an-email"))

    assert res.error.message == "Invalid email address format"


def test_claim_rejects_header_injection(db, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 0, 0)

    res = contest_actions.claim_square(db, _payload(contest, sq, email="a@gmail.com\r\nBcc: x@gmail.com"))

    assert res.error.message == "Invalid email address format"


def test_claim_missing_names(db, make_contest, square_at):
    contest = make_contest(status="open")

    res = contest_actions.claim_square(db, _payload(contest, square_at(contest, 0, 0), first_name="  "))

    assert res.error.message == ContestErrors.ALL_FIELDS_REQUIRED


def test_max_squares_per_person_is_case_insensitive(db, make_contest, square_at):
    contest = make_contest(status="open", max_squares_per_person=2)
    for col in (0, 1):
        res = contest_actions.claim_square(db, _payload(contest, square_at(contest, 0, col)))
        assert res.error is None

    res = contest_actions.claim_square(
        db, _payload(contest, square_at(contest, 0, 2), email="JAMIE.RIVERA@gmail.com")
    )

    assert res.error.message == "You have already claimed the maximum of 2 square(s) for this contest."


def test_claim_rate_limited_per_email(db, make_contest, square_at):
    contest = make_contest(status="open")
    for col in range(10):
        assert contest_actions.claim_square(db, _payload(contest, square_at(contest, 0, col))).error is None

    res = contest_actions.claim_square(db, _payload(contest, square_at(contest, 1, 0)))

    assert res.error.message == ContestErrors.RATE_LIMITED
    other = contest_actions.claim_square(db, _payload(contest, square_at(contest, 1, 0), email="friend@gmail.com"))
    assert other.error is None


def test_claim_lost_race(db, make_contest, square_at, monkeypatch, sent_emails):
    contest = make_contest(status="open")
    sq = square_at(contest, 6, 6)
    # someone else claims between our availability check and the update
    db.query(Square).filter(Square.id == sq.id).update({"payment_status": "pending", "claimant_email": "fast@gmail.com"})
    db.commit()
    stale = SimpleNamespace(id=sq.id, row_index=6, col_index=6, payment_status="available")
    monkeypatch.setattr(crud, "get_square", lambda db, contest_id, square_id: stale)

    res = contest_actions.claim_square(db, _payload(contest, sq))

    assert res.error.message == "This square was just claimed by someone else. Please select another."
    db.refresh(sq)
    assert sq.claimant_email == "fast@gmail.com"
    assert sent_emails == []


def test_referral_recorded_for_known_player(db, make_contest, square_at):
    contest = make_contest(
        status="open",
        enable_player_tracking=True,
        players=[{"name": "Mia Lopez", "number": 7, "slug": "mia"}],
    )
    a, b = square_at(contest, 0, 0), square_at(contest, 0, 1)

    contest_actions.claim_square(db, _payload(contest, a, referred_by_slug="mia"))
    contest_actions.claim_square(db, _payload(contest, b, referred_by_slug="unknown"))

    db.refresh(a)
    db.refresh(b)
    assert a.referred_by == "mia"
    assert b.referred_by is None
    assert crud.get_player_sales_counts(db, contest.id) == {"mia": 1}


def test_claim_endpoint(client, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 8, 1)

    res = client.post("/api/public/squares/claim", json=_payload(contest, sq))

    assert res.status_code == 200
    assert res.json()["data"]["square"]["id"] == sq.id
