"""Credential comparison helpers.

Passwords are stored as given; this module only keeps the comparison
constant-time.
"""

from __future__ import annotations

import secrets


def verify_password(password: str, stored: str | None) -> bool:
    if stored is None:
        return False
    return secrets.compare_digest((password or "").encode("utf-8"), stored.encode("utf-8"))
