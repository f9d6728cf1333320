from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Participant:
    """Registered participant (read-only reference data)."""

    participant_id: str
    name: str
    email: str = ""
    phone: str = ""
