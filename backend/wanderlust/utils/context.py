from __future__ import annotations

from dataclasses import dataclass

from flask import flash, g
from flask_login import current_user


@dataclass(frozen=True)
class RequestContext:
    """State for one request, handed explicitly to service functions."""

    request_id: str
    user: object | None = None

    @property
    def user_id(self) -> str | None:
        return getattr(self.user, "id", None) if self.user is not None else None

    def flash(self, message: str, category: str = "success") -> None:
        flash(message, category)


def build_request_context() -> RequestContext:
    user = current_user._get_current_object() if current_user.is_authenticated else None
    return RequestContext(request_id=getattr(g, "request_id", "") or "", user=user)


def get_request_context() -> RequestContext:
    ctx = getattr(g, "request_context", None)
    if ctx is None:
        ctx = build_request_context()
        g.request_context = ctx
    return ctx


def install_request_context(app) -> None:
    @app.before_request
    def _request_context_begin():
        g.request_context = build_request_context()
