from api.griddo.constants import ContestErrors
from api.griddo.models import EmailLog, Score
from api.griddo.services import contests as contest_actions

DIGITS = list(range(10))
REVERSED = DIGITS[::-1]


def _claim(db, square, first="Casey", last="Nguyen", email="casey@gmail.com"):
    square.payment_status = "paid"
    square.claimant_first_name = first
    square.claimant_last_name = last
    square.claimant_email = email
    db.commit()


def test_winning_position_uses_last_digits():
    assert contest_actions.winning_position(DIGITS, REVERSED, 17, 24) == (7, 5)
    assert contest_actions.winning_position(DIGITS, REVERSED, 0, 0) == (0, 9)
    assert contest_actions.winning_position([], [], 3, 3) is None


def test_prize_amount_is_share_of_full_pot(make_contest):
    contest = make_contest()

    assert contest_actions.prize_amount(contest, "q1") == 200
    assert contest_actions.prize_amount(contest, "final") == 400
    assert contest_actions.prize_amount(contest, "game3") == 0


def test_quarters_for_sport():
    assert contest_actions.quarters_for_sport("football") == ("q1", "q2", "q3", "final")
    assert len(contest_actions.quarters_for_sport("baseball")) == 7


def test_set_numbers_manually(db, owner, make_contest):
    contest = make_contest(status="locked")

    res = contest_actions.set_contest_numbers(db, owner, contest.id, {
        "row_numbers": DIGITS, "col_numbers": REVERSED,
    })

    assert res.error is None
    db.refresh(contest)
    assert contest.row_numbers == DIGITS
    assert contest.col_numbers == REVERSED
    assert contest.numbers_auto_generated is False


def test_set_numbers_rejects_repeated_digit(db, owner, make_contest):
    contest = make_contest(status="locked")

    res = contest_actions.set_contest_numbers(db, owner, contest.id, {
        "row_numbers": [0, 0, 2, 3, 4, 5, 6, 7, 8, 9], "col_numbers": DIGITS,
    })

    assert res.error.message == ContestErrors.INVALID_NUMBERS


def test_auto_generated_numbers_are_permutations(db, owner, make_contest):
    contest = make_contest(status="locked")

    res = contest_actions.set_contest_numbers(db, owner, contest.id, {"auto_generate": True})

    assert sorted(res.data["row_numbers"]) == DIGITS
    assert sorted(res.data["col_numbers"]) == DIGITS
    db.refresh(contest)
    assert contest.numbers_auto_generated is True


def test_numbers_locked_once_scores_exist(db, owner, make_contest):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=DIGITS)
    db.add(Score(contest_id=contest.id, quarter="q1", home_score=3, away_score=0))
    db.commit()

    res = contest_actions.set_contest_numbers(db, owner, contest.id, {"auto_generate": True})

    assert res.error.message == ContestErrors.SCORES_BLOCK_NUMBERS


def test_scores_only_while_in_progress(db, owner, make_contest):
    contest = make_contest(status="locked", row_numbers=DIGITS, col_numbers=DIGITS)

    res = contest_actions.save_scores(db, owner, contest.id, {
        "scores": [{"quarter": "q1", "home_score": 7, "away_score": 0}],
    })

    assert res.error.message == ContestErrors.SCORES_ONLY_IN_PROGRESS


def test_scores_need_numbers(db, owner, make_contest):
    contest = make_contest(status="in_progress")

    res = contest_actions.save_scores(db, owner, contest.id, {
        "scores": [{"quarter": "q1", "home_score": 7, "away_score": 0}],
    })

    assert res.error.message == ContestErrors.NUMBERS_REQUIRED


def test_baseball_game_on_football_contest(db, owner, make_contest):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=DIGITS)

    res = contest_actions.save_scores(db, owner, contest.id, {
        "scores": [{"quarter": "game1", "home_score": 2, "away_score": 1}],
    })

    assert res.error.message == ContestErrors.INVALID_QUARTER


def test_save_scores_resolves_and_emails_winner(db, owner, make_contest, square_at, sent_emails):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=REVERSED)
    winner = square_at(contest, 7, 5)
    _claim(db, winner)

    res = contest_actions.save_scores(db, owner, contest.id, {
        "scores": [{"quarter": "q1", "home_score": 17, "away_score": 24}],
    })

    assert res.error is None
    [q1] = res.data["winners"]
    assert q1["winning_square_id"] == winner.id
    assert q1["winner_name"] == "Casey Nguyen"
    assert q1["winner_email"] == "casey@gmail.com"

    assert len(sent_emails) == 1
    assert sent_emails[0]["subject"] == f"You won Q1 in {contest.name}!"
    assert "$200.00" in sent_emails[0]["html"]
    assert db.query(EmailLog).one().email_type == "winner_notification"


def test_resaving_same_winner_does_not_email_again(db, owner, make_contest, square_at, sent_emails):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=REVERSED)
    _claim(db, square_at(contest, 7, 5))
    payload = {"scores": [{"quarter": "q1", "home_score": 17, "away_score": 24}]}

    contest_actions.save_scores(db, owner, contest.id, payload)
    res = contest_actions.save_scores(db, owner, contest.id, payload)

    assert res.error is None
    assert len(sent_emails) == 1
    assert db.query(Score).filter(Score.contest_id == contest.id).count() == 1


def test_corrected_score_emails_new_winner(db, owner, make_contest, square_at, sent_emails):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=DIGITS)
    _claim(db, square_at(contest, 7, 0), first="Ava", email="ava@gmail.com")
    _claim(db, square_at(contest, 3, 0), first="Ben", email="ben@gmail.com")

    contest_actions.save_scores(db, owner, contest.id, {"scores": [{"quarter": "q2", "home_score": 7, "away_score": 10}]})
    contest_actions.save_scores(db, owner, contest.id, {"scores": [{"quarter": "q2", "home_score": 3, "away_score": 10}]})

    assert [m["to"] for m in sent_emails] == ["ava@gmail.com", "ben@gmail.com"]
    assert "Halftime" in sent_emails[1]["subject"]


def test_unclaimed_winning_square(db, owner, make_contest, sent_emails):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=DIGITS)

    res = contest_actions.save_scores(db, owner, contest.id, {
        "scores": [{"quarter": "final", "home_score": 21, "away_score": 14}],
    })

    [final] = res.data["winners"]
    assert final["winning_square_id"] is not None
    assert final["winner_name"] is None
    assert sent_emails == []


def test_scores_endpoint(client, make_contest):
    contest = make_contest(status="in_progress", row_numbers=DIGITS, col_numbers=DIGITS)

    res = client.post(f"/api/contests/{contest.id}/scores", json={
        "scores": [{"quarter": "q3", "home_score": 10, "away_score": 6}],
    })

    body = res.json()
    assert body["error"] is None
    assert body["data"]["winners"][0]["quarter"] == "q3"
    detail = client.get(f"/api/contests/{contest.id}").json()
    assert [s["quarter"] for s in detail["scores"]] == ["q3"]
