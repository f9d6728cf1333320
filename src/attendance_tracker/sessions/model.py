from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping

from ..common.datetime_utils import parse_iso_timestamp, to_iso_timestamp


@dataclass(frozen=True)
class Session:
    """What we persist after login: ``{username, loginTime, expiresAt}``."""

    username: str
    login_time: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "loginTime": to_iso_timestamp(self.login_time),
            "expiresAt": to_iso_timestamp(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        """Raise KeyError/ValueError/TypeError on malformed payloads."""
        return cls(
            username=str(data["username"]),
            login_time=parse_iso_timestamp(data["loginTime"]),
            expires_at=parse_iso_timestamp(data["expiresAt"]),
        )
