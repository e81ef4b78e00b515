from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import User
from ..auth_firebase import get_claims, optional_claims


def _sync_user(db: Session, claims: dict) -> User:
    uid = claims["uid"]
    email = (claims.get("email") or "").lower() or None
    name = claims.get("name")
    avatar = claims.get("picture")

    # Upsert user
    user = db.query(User).filter(User.firebase_uid == uid).first()
    if not user:
        user = User(firebase_uid=uid, email=email, full_name=name, avatar_url=avatar)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    changed = False
    if email and user.email != email:
        user.email = email; changed = True
    if name and not user.full_name:
        user.full_name = name; changed = True
    if avatar and not user.avatar_url:
        user.avatar_url = avatar; changed = True
    if changed:
        db.commit()
        db.refresh(user)
    return user


def current_user(db: Session = Depends(get_db),
                 claims: dict = Depends(get_claims)) -> User:
    return _sync_user(db, claims)


def optional_current_user(db: Session = Depends(get_db),
                          claims: Optional[dict] = Depends(optional_claims)) -> Optional[User]:
    if not claims:
        return None
    return db.query(User).filter(User.firebase_uid == claims["uid"]).first()
