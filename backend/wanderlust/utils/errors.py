from __future__ import annotations

from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

DEFAULT_ERROR_STATUS = 500
DEFAULT_ERROR_MESSAGE = "Something went wrong!"

_STATUS_BY_ERROR = {
    "VALIDATION_ERROR": 400,
    "INVALID_ID": 400,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
}


class WanderlustError(HTTPException):
    """HTTP error carrying an application error code.

    Raised only at the route boundary, from a failed service result.
    """

    def __init__(self, status: int, message: str, error: str = "ERROR"):
        super().__init__(description=message)
        self.code = int(status)
        self.error = error


def fail(error: str, message: str, **extra) -> dict:
    payload = {"ok": False, "error": error, "message": message}
    payload.update(extra)
    return payload


def status_for_error(error: str | None) -> int:
    return _STATUS_BY_ERROR.get((error or "").strip().upper(), DEFAULT_ERROR_STATUS)


def raise_for_result(result: dict) -> dict:
    """Return a successful result unchanged, raise for a failed one."""
    if result.get("ok"):
        return result
    error = str(result.get("error") or "")
    message = str(result.get("message") or "").strip() or DEFAULT_ERROR_MESSAGE
    raise WanderlustError(status_for_error(error), message, error=error or "ERROR")


def error_view_args(error: Exception) -> tuple[int, str]:
    """Status code and message for the error page."""
    if isinstance(error, WanderlustError):
        return int(error.code or DEFAULT_ERROR_STATUS), error.description or DEFAULT_ERROR_MESSAGE
    if isinstance(error, HTTPException):
        # A known path with an unrouted method is still an unmatched route.
        if isinstance(error, (NotFound, MethodNotAllowed)):
            return 404, "Page Not Found"
        status = int(error.code or DEFAULT_ERROR_STATUS)
        return status, error.name or DEFAULT_ERROR_MESSAGE
    return DEFAULT_ERROR_STATUS, DEFAULT_ERROR_MESSAGE
