# api/griddo/routers/contests.py
"""
Owner dashboard: everything a signed-in contest owner can do to their own
contests. Action endpoints always answer 200 with the {data, error} envelope.
"""
from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from .. import crud
from ..db import get_db
from ..deps.current_user import current_user
from ..models import User
from ..schemas import ActionResponse
from ..services import contests as contest_actions
from ..services import subscriptions, uploads
from ..services.payment_options import update_payment_options
from ..utils.payment_urls import generate_payment_url

router = APIRouter(prefix="/api/contests", tags=["contests"])


def _owned(db: Session, contest_id: str, user: User):
    contest = crud.get_owner_contest_by_id(db, contest_id, user.id)
    if not contest or contest.deleted_at is not None:
        raise HTTPException(status_code=404, detail="Contest not found")
    return contest


def _payment_option_out(opt) -> dict:
    d = opt.as_dict()
    d["payment_url"] = generate_payment_url(opt.type, opt.handle_or_link)
    return d


# ---------- listing / creation ----------

@router.get("")
def list_contests(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return {
        "contests": crud.list_contests_for_owner(db, user.id),
        "usage": subscriptions.get_usage_stats(db, user.id),
        "limit": subscriptions.get_contest_limit(db, user.id),
    }


@router.get("/limit")
def contest_limit(
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return subscriptions.get_contest_limit(db, user.id)


@router.post("", response_model=ActionResponse)
def create_contest(
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.create_contest(db, user, payload)


# ---------- single contest ----------

@router.get("/{contest_id}")
def get_contest(
    contest_id: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    contest = _owned(db, contest_id, user)
    return {
        "contest": contest.as_owner_dict(),
        "squares": [s.as_dict(include_private=True) for s in crud.get_squares_for_contest(db, contest.id)],
        "payment_options": [_payment_option_out(o) for o in crud.get_payment_options_for_contest(db, contest.id)],
        "scores": [s.as_dict() for s in crud.get_scores_for_contest(db, contest.id)],
        "player_sales": crud.get_player_sales_counts(db, contest.id),
    }


@router.get("/{contest_id}/participants")
def get_participants(
    contest_id: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    contest = _owned(db, contest_id, user)
    return {
        "participants": [
            s.as_dict(include_private=True)
            for s in crud.get_participants_for_contest(db, contest.id)
        ]
    }


@router.get("/{contest_id}/share")
def share_link(
    contest_id: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    contest = _owned(db, contest_id, user)
    return {"url": contest_actions.contest_url(contest.slug), "code": contest.code}


@router.patch("/{contest_id}", response_model=ActionResponse)
def update_contest(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.update_contest(db, user, contest_id, payload)


@router.post("/{contest_id}/status", response_model=ActionResponse)
def update_status(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.update_contest_status(db, user, contest_id, payload.get("status"))


@router.delete("/{contest_id}", response_model=ActionResponse)
def delete_contest(
    contest_id: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.delete_contest(db, user, contest_id)


# ---------- numbers & scores ----------

@router.post("/{contest_id}/numbers", response_model=ActionResponse)
def set_numbers(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.set_contest_numbers(db, user, contest_id, payload)


@router.post("/{contest_id}/scores", response_model=ActionResponse)
def save_scores(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.save_scores(db, user, contest_id, payload)


# ---------- squares ----------

@router.post("/{contest_id}/squares/bulk", response_model=ActionResponse)
def bulk_update_squares(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.bulk_update_squares(
        db, user, contest_id,
        payload.get("square_ids") or [],
        payload.get("new_status"),
    )


@router.patch("/{contest_id}/squares/{square_id}", response_model=ActionResponse)
def update_square(
    contest_id: str,
    square_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.update_square_status(db, user, contest_id, square_id, payload.get("new_status"))


# ---------- payment options ----------

@router.put("/{contest_id}/payment-options", response_model=ActionResponse)
def replace_payment_options(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return update_payment_options(db, user, contest_id, payload.get("options") or [])


@router.post("/{contest_id}/payment-options/{payment_option_id}/qr", response_model=ActionResponse)
def upload_payment_qr(
    contest_id: str,
    payment_option_id: str,
    file: UploadFile = File(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return uploads.upload_payment_qr(db, user, contest_id, payment_option_id, file.file.read())


@router.delete("/{contest_id}/payment-options/qr", response_model=ActionResponse)
def delete_payment_qr(
    contest_id: str,
    url: str,
    user: User = Depends(current_user),
):
    return uploads.delete_payment_qr(user, url)


# ---------- branding ----------

@router.post("/{contest_id}/images", response_model=ActionResponse)
def upload_contest_image(
    contest_id: str,
    image_type: str = Form(...),
    file: UploadFile = File(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return uploads.upload_contest_image(db, user, contest_id, image_type, file.file.read())


@router.delete("/{contest_id}/images", response_model=ActionResponse)
def delete_contest_image(
    contest_id: str,
    url: str,
    user: User = Depends(current_user),
):
    return uploads.delete_contest_image(user, url)


# ---------- player tracking ----------

@router.post("/{contest_id}/players", response_model=ActionResponse)
def add_player(
    contest_id: str,
    payload: dict = Body(...),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.add_player(db, user, contest_id, payload)


@router.delete("/{contest_id}/players/{player_slug}", response_model=ActionResponse)
def remove_player(
    contest_id: str,
    player_slug: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
):
    return contest_actions.remove_player(db, user, contest_id, player_slug)
