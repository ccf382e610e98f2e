from __future__ import annotations

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from wanderlust.extensions import db
from wanderlust.models import User
from wanderlust.utils.errors import fail
from wanderlust.utils.payloads import LoginPayload, SignupPayload

USERNAME_TAKEN_MESSAGE = "A user with the given username is already registered"
BAD_CREDENTIALS_MESSAGE = "Invalid username or password."


def find_user_by_username(username: str | None) -> User | None:
    name = (username or "").strip()
    if not name:
        return None
    return User.query.filter(func.lower(User.username) == name.lower()).first()


def register_user(payload: SignupPayload) -> dict:
    if find_user_by_username(payload.username) is not None:
        return fail("CONFLICT", USERNAME_TAKEN_MESSAGE)
    user = User(username=payload.username, email=str(payload.email).lower())
    user.set_password(payload.password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return fail("CONFLICT", USERNAME_TAKEN_MESSAGE)
    current_app.logger.info("user_registered id=%s", user.id)
    return {"ok": True, "user": user}


def authenticate(payload: LoginPayload) -> dict:
    user = find_user_by_username(payload.username)
    if user is None or not user.check_password(payload.password):
        current_app.logger.info("login_failed reason=bad_credentials")
        return fail("UNAUTHORIZED", BAD_CREDENTIALS_MESSAGE)
    return {"ok": True, "user": user}
