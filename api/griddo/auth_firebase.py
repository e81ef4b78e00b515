# api/griddo/auth_firebase.py
"""
Firebase ID tokens for contest owners.

Owner dashboard, billing and account routes go through `get_claims` (401
without a valid token). The public contest page uses `optional_claims` so an
owner previewing an unpublished contest is recognised while participants
stay anonymous.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .services.firebase import verify_id_token

owner_token = HTTPBearer(auto_error=False)


def _decode(creds: Optional[HTTPAuthorizationCredentials]) -> Optional[dict]:
    if creds is None or creds.scheme.lower() != "bearer":
        return None
    claims = verify_id_token(creds.credentials)
    if isinstance(claims, dict) and claims.get("uid"):
        return claims
    return None


def get_claims(creds: Optional[HTTPAuthorizationCredentials] = Depends(owner_token)) -> dict:
    claims = _decode(creds)
    if claims is None:
        detail = "Missing Bearer token" if creds is None else "Invalid Firebase token"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
    return claims


def optional_claims(creds: Optional[HTTPAuthorizationCredentials] = Depends(owner_token)) -> Optional[dict]:
    return _decode(creds)
