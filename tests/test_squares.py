from api.griddo.models import EmailLog, Square
from api.griddo.services import contests as contest_actions


def _claim(db, square, first="Pat", email="pat@gmail.com"):
    square.payment_status = "pending"
    square.claimant_first_name = first
    square.claimant_last_name = "Lee"
    square.claimant_email = email
    db.commit()


def test_bulk_mark_paid_sets_paid_at(db, owner, make_contest, square_at):
    contest = make_contest(status="open")
    a, b = square_at(contest, 0, 0), square_at(contest, 0, 1)
    _claim(db, a)
    _claim(db, b)

    res = contest_actions.bulk_update_squares(db, owner, contest.id, [a.id, b.id], "paid")

    assert res.error is None
    assert res.data == {"updated": 2}
    for sq in (a, b):
        db.refresh(sq)
        assert sq.payment_status == "paid"
        assert sq.paid_at is not None


def test_bulk_back_to_pending_clears_paid_at(db, owner, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 3, 4)
    _claim(db, sq)
    contest_actions.bulk_update_squares(db, owner, contest.id, [sq.id], "paid")

    res = contest_actions.bulk_update_squares(db, owner, contest.id, [sq.id], "pending")

    assert res.data == {"updated": 1}
    db.refresh(sq)
    assert sq.payment_status == "pending"
    assert sq.paid_at is None


def test_bulk_empty_selection(db, owner, make_contest):
    contest = make_contest()

    res = contest_actions.bulk_update_squares(db, owner, contest.id, [], "paid")

    assert res.error.message == "No squares selected"


def test_bulk_only_touches_this_contest(db, owner, make_contest, square_at):
    mine = make_contest()
    theirs = make_contest()
    foreign = square_at(theirs, 0, 0)

    res = contest_actions.bulk_update_squares(db, owner, mine.id, [foreign.id], "paid")

    assert res.data == {"updated": 0}
    db.refresh(foreign)
    assert foreign.payment_status == "available"


def test_bulk_rejects_available(db, owner, make_contest, square_at):
    contest = make_contest()
    sq = square_at(contest, 0, 0)

    res = contest_actions.bulk_update_squares(db, owner, contest.id, [sq.id], "available")

    assert res.error is not None


def test_bulk_by_non_owner(db, other_user, make_contest, square_at):
    contest = make_contest()
    sq = square_at(contest, 0, 0)

    res = contest_actions.bulk_update_squares(db, other_user, contest.id, [sq.id], "paid")

    assert res.error.message == "You do not own this contest"


def test_release_square_clears_claimant(db, owner, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 5, 5)
    _claim(db, sq)

    res = contest_actions.update_square_status(db, owner, contest.id, sq.id, "available")

    assert res.data == {"success": True}
    db.refresh(sq)
    assert sq.payment_status == "available"
    assert sq.claimant_first_name is None
    assert sq.claimant_email is None
    assert sq.claimed_at is None


def test_mark_paid_emails_claimant(db, owner, make_contest, square_at, sent_emails):
    contest = make_contest(status="open")
    sq = square_at(contest, 2, 7)
    _claim(db, sq, first="Sam", email="sam@gmail.com")

    res = contest_actions.update_square_status(db, owner, contest.id, sq.id, "paid")

    assert res.error is None
    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == "sam@gmail.com"
    assert sent_emails[0]["subject"] == f"Payment confirmed for {contest.name}"
    assert "Row 3" in sent_emails[0]["html"]
    log = db.query(EmailLog).one()
    assert log.email_type == "payment_confirmed"
    assert log.status == "sent"


def test_email_failure_does_not_fail_action(db, owner, make_contest, square_at, monkeypatch):
    from api.griddo.services import email as email_service

    def broken(to, subject, html):
        raise RuntimeError("resend down")

    monkeypatch.setattr(email_service, "send_email", broken)
    contest = make_contest(status="open")
    sq = square_at(contest, 1, 1)
    _claim(db, sq)

    res = contest_actions.update_square_status(db, owner, contest.id, sq.id, "paid")

    assert res.error is None
    assert db.query(EmailLog).one().status == "failed"


def test_square_from_other_contest_not_found(db, owner, make_contest, square_at):
    mine = make_contest()
    theirs = make_contest()

    res = contest_actions.update_square_status(db, owner, mine.id, square_at(theirs, 0, 0).id, "paid")

    assert res.error.message == "Square not found"


def test_bulk_endpoint(client, db, make_contest, square_at):
    contest = make_contest(status="open")
    sq = square_at(contest, 9, 9)
    _claim(db, sq)

    res = client.post(
        f"/api/contests/{contest.id}/squares/bulk",
        json={"square_ids": [sq.id], "new_status": "paid"},
    )

    assert res.json() == {"data": {"updated": 1}, "error": None}
    assert db.get(Square, sq.id).payment_status == "paid"
