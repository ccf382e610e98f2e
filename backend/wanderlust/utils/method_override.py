from __future__ import annotations

from urllib.parse import parse_qs


class MethodOverrideMiddleware:
    """Let HTML forms reach PUT/PATCH/DELETE routes via ``?_method=``."""

    param = "_method"
    allowed_methods = frozenset(["PUT", "PATCH", "DELETE"])

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        if (environ.get("REQUEST_METHOD") or "").upper() == "POST":
            query = parse_qs(environ.get("QUERY_STRING") or "")
            method = ((query.get(self.param) or [""])[0] or "").strip().upper()
            if method in self.allowed_methods:
                environ["REQUEST_METHOD"] = method
                environ["wanderlust.original_method"] = "POST"
        return self.app(environ, start_response)
