from __future__ import annotations

from flask import Blueprint, current_app, redirect, render_template, session, url_for
from flask_login import login_user, logout_user

from wanderlust.services.user_service import (
    BAD_CREDENTIALS_MESSAGE,
    authenticate,
    register_user,
)
from wanderlust.utils.auth_gate import pop_redirect_url
from wanderlust.utils.context import get_request_context
from wanderlust.utils.payloads import LoginPayload, SignupPayload, parse_payload

users_bp = Blueprint("users_bp", __name__)


def _start_session(user) -> None:
    session.permanent = True
    login_user(user)


@users_bp.get("/signup")
def signup_form():
    return render_template("users/signup.html")


@users_bp.post("/signup")
def signup():
    ctx = get_request_context()
    payload, error = parse_payload(SignupPayload)
    if error is not None:
        ctx.flash(error["message"], "error")
        return redirect(url_for("users_bp.signup_form"))
    result = register_user(payload)
    if not result["ok"]:
        ctx.flash(result["message"], "error")
        return redirect(url_for("users_bp.signup_form"))
    _start_session(result["user"])
    ctx.flash("Welcome to Wanderlust!", "success")
    return redirect(url_for("listings_bp.index"))


@users_bp.get("/login")
def login_form():
    return render_template("users/login.html")


@users_bp.post("/login")
def login():
    ctx = get_request_context()
    payload, error = parse_payload(LoginPayload)
    if error is not None:
        ctx.flash(BAD_CREDENTIALS_MESSAGE, "error")
        return redirect(url_for("users_bp.login_form"))
    result = authenticate(payload)
    if not result["ok"]:
        ctx.flash(result["message"], "error")
        return redirect(url_for("users_bp.login_form"))
    # Read the return target before login_user touches the session.
    target = pop_redirect_url(url_for("listings_bp.index"))
    _start_session(result["user"])
    current_app.logger.info("login_ok user_id=%s request_id=%s", result["user"].id, ctx.request_id)
    ctx.flash("Welcome back to Wanderlust!", "success")
    return redirect(target)


@users_bp.get("/logout")
def logout():
    ctx = get_request_context()
    logout_user()
    ctx.flash("You are logged out!", "success")
    return redirect(url_for("listings_bp.index"))
