from __future__ import annotations

import re
import secrets

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_VALID_ID = re.compile(r"^[0-9a-zA-Z]{6,24}$")


def new_share_id(length: int = 10) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_share_id(value: str) -> bool:
    return bool(_VALID_ID.match(value or ""))
