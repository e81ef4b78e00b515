# api/griddo/services/firebase.py
import json
from typing import Optional

import firebase_admin
from firebase_admin import auth as fb_auth, credentials as fb_credentials

from ..settings import settings
from ..utils.logger import log_error

_initialized = False


def _ensure_init() -> bool:
    """
    Initialise the Firebase Admin SDK once, using either:

    - FIREBASE_SERVICE_ACCOUNT_JSON (recommended in production), or
    - default credentials (for local dev if you have them configured).
    """
    global _initialized
    if _initialized:
        return True

    if not firebase_admin._apps:
        try:
            if settings.FIREBASE_SERVICE_ACCOUNT_JSON:
                cred = fb_credentials.Certificate(json.loads(settings.FIREBASE_SERVICE_ACCOUNT_JSON))
            else:
                cred = fb_credentials.ApplicationDefault()
            firebase_admin.initialize_app(cred)
        except Exception as e:
            # Don't crash the whole API if Firebase can't init; requests just stay anonymous.
            log_error("firebase.init", e)
            return False

    _initialized = True
    return True


def verify_id_token(id_token: str) -> Optional[dict]:
    """
    Returns decoded claims or None if invalid/unavailable.
    """
    if not _ensure_init():
        return None
    try:
        return fb_auth.verify_id_token(id_token)
    except (fb_auth.InvalidIdTokenError, fb_auth.ExpiredIdTokenError, fb_auth.RevokedIdTokenError):
        return None
    except Exception as e:
        log_error("firebase.verify_id_token", e)
        return None
