from __future__ import annotations

from typing import Protocol, Sequence

from .model import Participant


class ParticipantRepository(Protocol):
    def list_all(self) -> Sequence[Participant]:
        raise NotImplementedError
