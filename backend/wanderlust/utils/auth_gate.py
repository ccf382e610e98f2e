from __future__ import annotations

from urllib.parse import urlsplit

from flask import flash, redirect, request, session, url_for
from flask_login import login_required

from wanderlust.extensions import db, login_manager

LOGIN_REQUIRED_MESSAGE = "You must be logged in to do that!"
REDIRECT_SESSION_KEY = "redirect_url"

__all__ = [
    "login_required",
    "init_auth",
    "remember_requested_url",
    "pop_redirect_url",
    "safe_local_path",
    "forbidden_redirect",
]


def safe_local_path(value: str | None) -> str | None:
    """Return ``value`` only if it is a path on this site."""
    target = (value or "").strip()
    if not target.startswith("/") or target.startswith("//") or "\\" in target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return None
    return target


def remember_requested_url() -> None:
    # Only GET targets can be replayed by a redirect.
    if request.method != "GET":
        return
    path = request.full_path if request.query_string else request.path
    target = safe_local_path(path)
    if target:
        session[REDIRECT_SESSION_KEY] = target


def pop_redirect_url(default: str) -> str:
    return safe_local_path(session.pop(REDIRECT_SESSION_KEY, None)) or default


def init_auth(app) -> None:
    login_manager.init_app(app)
    login_manager.login_view = "users_bp.login_form"
    login_manager.session_protection = "basic"

    @login_manager.user_loader
    def _load_user(user_id: str):
        from wanderlust.models import User

        if not user_id:
            return None
        try:
            return db.session.get(User, str(user_id))
        except Exception:
            db.session.rollback()
            app.logger.exception("user_load_failed user_id=%s", user_id)
            return None

    @login_manager.unauthorized_handler
    def _unauthorized():
        remember_requested_url()
        flash(LOGIN_REQUIRED_MESSAGE, "error")
        return redirect(url_for("users_bp.login_form"))


def forbidden_redirect(ctx, result: dict):
    """Owner/author failures go back to the listing page with a flash."""
    ctx.flash(result.get("message") or "Forbidden", "error")
    target = result.get("listing_id")
    if target:
        return redirect(url_for("listings_bp.show", listing_id=target))
    return redirect(url_for("listings_bp.index"))
