"""
Request payload types.

Every endpoint that accepts a body declares a pydantic model here and the
body is validated against it before any domain logic runs. HTML forms post
bracketed names (``listing[title]``, ``listing[image][url]``); those are
folded into nested dicts first so form and JSON bodies share one shape.
"""

from __future__ import annotations

import re
from functools import wraps
from typing import Optional

from flask import request
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from wanderlust.utils.errors import fail, raise_for_result

_BRACKET_RE = re.compile(r"\[([^\]]*)\]")

_MESSAGES = {
    "missing": "is required",
    "string_too_short": "is not allowed to be empty",
    "string_too_long": "is too long",
    "float_parsing": "must be a number",
    "finite_number": "must be a finite number",
    "int_parsing": "must be a number",
    "int_from_float": "must be an integer",
    "greater_than_equal": "must be greater than or equal to {ge}",
    "less_than_equal": "must be less than or equal to {le}",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
    "value_error": "must be a valid email",
}


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class ImagePayload(_Payload):
    filename: Optional[str] = None
    url: Optional[str] = None


class ListingPayload(_Payload):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    image: Optional[ImagePayload] = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    location: str = Field(..., min_length=1, max_length=200)
    country: str = Field(..., min_length=1, max_length=120)


class ReviewPayload(_Payload):
    comment: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(..., ge=1, le=5)


class ListingBody(_Payload):
    listing: ListingPayload


class ReviewBody(_Payload):
    review: ReviewPayload


class SignupPayload(_Payload):
    username: str = Field(..., min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class LoginPayload(_Payload):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


def nest_form(form) -> dict:
    """Fold ``a[b][c]=v`` style keys into ``{"a": {"b": {"c": v}}}``."""
    out: dict = {}
    for raw_key in form.keys():
        value = form.get(raw_key)
        head, _, rest = raw_key.partition("[")
        parts = [head] + (_BRACKET_RE.findall("[" + rest) if rest else [])
        parts = [p for p in parts if p != ""]
        if not parts:
            continue
        node = out
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return out


def _drop_blank_optionals(data: dict) -> dict:
    # Empty image inputs mean "no image" rather than a blank url.
    listing = data.get("listing")
    if isinstance(listing, dict):
        image = listing.get("image")
        if isinstance(image, dict) and not any(str(v or "").strip() for v in image.values()):
            listing.pop("image", None)
        elif isinstance(image, str):
            if image.strip():
                listing["image"] = {"url": image}
            else:
                listing.pop("image", None)
    return data


def request_body() -> dict:
    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    return nest_form(request.form)


def _bound_values(ctx) -> dict:
    # Float bounds come back as 0.0; show whole numbers without the fraction.
    return {
        key: int(value) if isinstance(value, float) and value.is_integer() else value
        for key, value in (ctx or {}).items()
    }


def format_validation_error(exc: ValidationError) -> str:
    messages = []
    for item in exc.errors():
        path = ".".join(str(p) for p in item.get("loc") or ()) or "value"
        template = _MESSAGES.get(item.get("type") or "")
        if template:
            try:
                text = template.format(**_bound_values(item.get("ctx")))
            except (KeyError, IndexError):
                text = template
        else:
            text = str(item.get("msg") or "is invalid")
        messages.append(f'"{path}" {text}')
    return ",".join(messages)


def parse_payload(model: type[BaseModel], data: dict | None = None) -> tuple[BaseModel | None, dict | None]:
    """Validate ``data`` (default: the current request body) against ``model``.

    Returns ``(payload, None)`` on success, ``(None, failed_result)`` otherwise.
    """
    if data is None:
        data = request_body()
    data = _drop_blank_optionals(dict(data or {}))
    try:
        return model.model_validate(data), None
    except ValidationError as exc:
        return None, fail("VALIDATION_ERROR", format_validation_error(exc))


def validate_payload(model: type[BaseModel]):
    """Reject the request with a 400 unless its body matches ``model``.

    The validated payload reaches the view as the ``payload`` keyword.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            payload, error = parse_payload(model)
            if error is not None:
                raise_for_result(error)
            return view(*args, payload=payload, **kwargs)

        return wrapper

    return decorator
