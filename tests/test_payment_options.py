from api.griddo.models import PaymentOption
from api.griddo.utils.payment_urls import generate_payment_url, sanitize_handle


def _options(db, contest):
    return (
        db.query(PaymentOption)
        .filter(PaymentOption.contest_id == contest.id)
        .order_by(PaymentOption.sort_order)
        .all()
    )


def test_payment_urls():
    assert generate_payment_url("venmo", "Lincoln-Boosters") == "https://venmo.com/Lincoln-Boosters?txn=pay"
    assert generate_payment_url("paypal", "lincolnhs") == "https://paypal.me/lincolnhs"
    assert generate_payment_url("cashapp", "$lincoln") == "https://cash.app/%24lincoln"
    assert generate_payment_url("zelle", "boosters@gmail.com") is None


def test_unsafe_handles_have_no_link():
    assert sanitize_handle("  ") is None
    assert sanitize_handle("evil/../path") is None
    assert generate_payment_url("venmo", '"><script>') is None


def test_replace_is_exact(db, owner, make_contest, add_payment_option):
    from api.griddo.services.payment_options import update_payment_options

    contest = make_contest()
    add_payment_option(contest, "venmo", "Old-Handle")

    res = update_payment_options(db, owner, contest.id, [
        {"type": "paypal", "handle_or_link": "lincolnhs", "sort_order": 0},
        {"type": "zelle", "handle_or_link": "boosters@gmail.com", "account_last_4_digits": "1234", "sort_order": 1},
    ])

    assert res.error is None
    opts = _options(db, contest)
    assert [(o.type, o.handle_or_link) for o in opts] == [
        ("paypal", "lincolnhs"),
        ("zelle", "boosters@gmail.com"),
    ]
    assert opts[1].account_last_4_digits == "1234"


def test_invalid_option_keeps_previous_set(db, owner, make_contest, add_payment_option):
    from api.griddo.services.payment_options import update_payment_options

    contest = make_contest()
    add_payment_option(contest, "venmo", "Keep-Me")

    res = update_payment_options(db, owner, contest.id, [
        {"type": "paypal", "handle_or_link": "fine"},
        {"type": "bitcoin", "handle_or_link": "nope"},
    ])

    assert res.error.message == "Invalid payment options"
    assert [o.handle_or_link for o in _options(db, contest)] == ["Keep-Me"]


def test_unsafe_handle_rejected(db, owner, make_contest, add_payment_option):
    from api.griddo.services.payment_options import update_payment_options

    contest = make_contest()
    add_payment_option(contest, "venmo", "Keep-Me")

    res = update_payment_options(db, owner, contest.id, [{"type": "venmo", "handle_or_link": "a/b"}])

    assert res.error.message == "Invalid venmo handle"
    assert [o.handle_or_link for o in _options(db, contest)] == ["Keep-Me"]


def test_empty_list_clears_options(db, owner, make_contest, add_payment_option):
    from api.griddo.services.payment_options import update_payment_options

    contest = make_contest()
    add_payment_option(contest)

    res = update_payment_options(db, owner, contest.id, [])

    assert res.error is None
    assert _options(db, contest) == []


def test_owner_detail_includes_payment_urls(client, make_contest, add_payment_option):
    contest = make_contest()
    add_payment_option(contest, "cashapp", "lincoln")
    add_payment_option(contest, "zelle", "boosters@gmail.com")

    options = client.get(f"/api/contests/{contest.id}").json()["payment_options"]

    urls = {o["type"]: o["payment_url"] for o in options}
    assert urls == {"cashapp": "https://cash.app/lincoln", "zelle": None}


def test_replace_endpoint(client, db, make_contest):
    contest = make_contest()

    res = client.put(f"/api/contests/{contest.id}/payment-options", json={
        "options": [{"type": "venmo", "handle_or_link": "New-Handle"}],
    })

    assert res.json() == {"data": None, "error": None}
    assert [o.handle_or_link for o in _options(db, contest)] == ["New-Handle"]
