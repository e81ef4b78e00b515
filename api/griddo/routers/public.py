# api/griddo/routers/public.py
"""
Participant-facing endpoints: no sign-in needed.

Private contests (with an access PIN) only reveal their grid once the
visitor holds the access cookie set by /verify-pin.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from .. import crud
from ..db import get_db
from ..deps.current_user import optional_current_user
from ..models import User
from ..schemas import ActionResponse
from ..services import access
from ..services.contests import claim_square
from ..settings import settings
from ..utils.payment_urls import generate_payment_url

router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/contests/{slug}")
def get_contest(
    slug: str,
    request: Request,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(optional_current_user),
):
    contest = crud.get_contest_by_slug(db, slug)
    is_owner = bool(viewer and contest and contest.owner_id == viewer.id)
    if not contest or not (contest.is_public or is_owner):
        raise HTTPException(status_code=404, detail="Contest not found")

    cookie = request.cookies.get(access.access_cookie_name(slug))
    if not is_owner and not access.has_contest_access(slug, contest.access_pin, cookie):
        # just enough to render the PIN prompt
        return {
            "requires_pin": True,
            "contest": {
                "name": contest.name,
                "slug": contest.slug,
                "primary_color": contest.primary_color,
                "secondary_color": contest.secondary_color,
                "org_image_url": contest.org_image_url,
            },
        }

    players = []
    if contest.enable_player_tracking:
        players = [{"name": p.get("name"), "slug": p.get("slug")} for p in (contest.players or [])]

    return {
        "requires_pin": False,
        "contest": contest.as_public_dict(),
        "squares": [s.as_dict() for s in crud.get_squares_for_contest(db, contest.id)],
        "payment_options": [
            {**o.as_dict(), "payment_url": generate_payment_url(o.type, o.handle_or_link)}
            for o in crud.get_payment_options_for_contest(db, contest.id)
        ],
        "scores": [s.as_dict() for s in crud.get_scores_for_contest(db, contest.id)],
        "players": players,
    }


@router.post("/contests/{slug}/verify-pin", response_model=ActionResponse)
def verify_pin(
    slug: str,
    request: Request,
    response: Response,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
):
    client = request.client.host if request.client else None
    result = access.verify_pin(db, slug, str(payload.get("pin") or ""), client_key=client)
    if result.is_error:
        return result

    response.set_cookie(
        key=access.access_cookie_name(slug),
        value=result.data.pop("cookie_value"),
        max_age=access.ACCESS_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return result


@router.post("/squares/claim", response_model=ActionResponse)
def claim(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
):
    return claim_square(db, payload)
