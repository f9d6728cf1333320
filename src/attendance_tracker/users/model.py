from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StaffAccount:
    """Static staff login. Only the password hash is kept in memory."""

    username: str
    password_hash: str
