from __future__ import annotations

import re
import uuid

# Storage keys are UUID4 hex strings.
_KEY_RE = re.compile(r"^[0-9a-f]{32}$")


def new_key() -> str:
    return uuid.uuid4().hex


def normalize_key(value) -> str:
    return str(value or "").strip().lower()


def is_valid_key(value) -> bool:
    return bool(_KEY_RE.match(normalize_key(value)))
