# api/griddo/services/ownership.py
"""
Authorization guard shared by every owner-side action.

Actions raise one of the errors below; `with_contest_ownership` turns them
into an ActionResponse so callers only ever branch on `error`.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from ..constants import ContestErrors
from ..models import Contest, User
from ..schemas import ActionResponse
from ..utils.logger import log_error


class AuthError(Exception):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)
        self.message = message


class NotFoundError(Exception):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)
        self.message = message


class ForbiddenError(Exception):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)
        self.message = message


class ActionError(Exception):
    """A user-facing failure: the message is shown as-is."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details


EXPECTED_ERRORS = (AuthError, NotFoundError, ForbiddenError, ActionError)


def validate_input(schema: type[BaseModel], payload: Any, message: str = "Invalid input") -> Any:
    """Coerce a raw payload into `schema`, raising ActionError with per-field messages."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        details: dict[str, list[str]] = {}
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "__root__"
            details.setdefault(field, []).append(err["msg"])
        raise ActionError(message, details) from e


def require_auth(user: Optional[User]) -> User:
    if user is None:
        raise AuthError(ContestErrors.UNAUTHORIZED)
    return user


def require_contest_ownership(db: Session, user_id: str, contest_id: str) -> Contest:
    contest = db.query(Contest).filter(Contest.id == contest_id).first()
    if not contest:
        raise NotFoundError(ContestErrors.NOT_FOUND)
    if contest.owner_id != user_id:
        raise ForbiddenError(ContestErrors.NOT_OWNER)
    return contest


def to_response(context: str, fn: Callable[[], Any]) -> ActionResponse:
    """Run `fn` and map its outcome onto the {data, error} envelope."""
    try:
        return ActionResponse.ok(fn())
    except ActionError as e:
        return ActionResponse.fail(e.message, e.details)
    except (AuthError, NotFoundError, ForbiddenError) as e:
        return ActionResponse.fail(e.message)
    except Exception as e:
        log_error(context, e)
        return ActionResponse.fail(ContestErrors.UNEXPECTED)


def with_contest_ownership(
    db: Session,
    user: Optional[User],
    contest_id: str,
    action: Callable[[User, Contest], Any],
    context: str = "with_contest_ownership",
) -> ActionResponse:
    def run():
        u = require_auth(user)
        contest = require_contest_ownership(db, u.id, contest_id)
        return action(u, contest)

    result = to_response(context, run)
    if result.is_error:
        db.rollback()
    return result
