from __future__ import annotations

from typing import Sequence

from ..core.constants import UNKNOWN_NAME
from ..core.exceptions import RemoteApiError
from ..remote.client import TableClient
from ..remote.model import RemoteRecord
from .model import Participant
from .repository import ParticipantRepository


class AirtableParticipantRepository(ParticipantRepository):
    def __init__(self, client: TableClient, table: str):
        self._client = client
        self._table = table

    def list_all(self) -> Sequence[Participant]:
        try:
            rows = self._client.list_all(self._table)
        except RemoteApiError as e:
            raise RemoteApiError(
                "Failed to fetch participants. Please check your Airtable configuration.",
                status_code=e.status_code,
            ) from e
        return [self._to_participant(r) for r in rows]

    @staticmethod
    def _to_participant(r: RemoteRecord) -> Participant:
        return Participant(
            participant_id=r.record_id,
            name=str(r.first_of("Name", "name", default=UNKNOWN_NAME)),
            email=str(r.first_of("Email", "email", default="")),
            phone=str(r.first_of("Phone", "phone", default="")),
        )
