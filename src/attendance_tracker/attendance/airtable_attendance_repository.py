from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteApiError
from ..remote.client import TableClient
from ..remote.formula import field_equals
from ..remote.model import RemoteRecord
from .model import AttendanceRecord, NewAttendance, StatusUpdate
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

FIELD_PARTICIPANT_ID = "Participant ID"
FIELD_PARTICIPANT_ID_LEGACY = "ParticipantID"
FIELD_PARTICIPANT_NAME = "Participant Name"
FIELD_DATE = "Date"
FIELD_STATUS = "Status"
FIELD_TIMESTAMP = "Timestamp"


class AirtableAttendanceRepository(AttendanceRepository):
    def __init__(self, client: TableClient, table: str):
        self._client = client
        self._table = table

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        formula = field_equals(FIELD_DATE, format_iso_date(attendance_date))
        try:
            rows = self._client.list_filtered(self._table, formula)
        except RemoteApiError as e:
            raise RemoteApiError("Failed to fetch attendance records.", status_code=e.status_code) from e
        return [self._to_record(r) for r in rows]

    def create_many(self, items: Sequence[NewAttendance]) -> int:
        payload = [
            {
                "fields": {
                    FIELD_PARTICIPANT_ID: i.participant_id,
                    FIELD_PARTICIPANT_NAME: i.participant_name,
                    FIELD_DATE: format_iso_date(i.attendance_date),
                    FIELD_STATUS: i.status.value,
                    FIELD_TIMESTAMP: i.timestamp,
                }
            }
            for i in items
        ]
        try:
            self._client.create_batch(self._table, payload)
        except RemoteApiError as e:
            raise RemoteApiError(f"Failed to create records: {e.status_code}", status_code=e.status_code) from e
        return len(payload)

    def update_many(self, items: Sequence[StatusUpdate]) -> int:
        payload = [
            {"id": i.record_id, "fields": {FIELD_STATUS: i.status.value, FIELD_TIMESTAMP: i.timestamp}}
            for i in items
        ]
        try:
            self._client.update_batch(self._table, payload)
        except RemoteApiError as e:
            raise RemoteApiError(f"Failed to update records: {e.status_code}", status_code=e.status_code) from e
        return len(payload)

    def delete(self, record_id: str) -> None:
        try:
            self._client.delete_one(self._table, record_id)
        except RemoteApiError as e:
            raise RemoteApiError(f"Failed to delete record: {e.status_code}", status_code=e.status_code) from e

    @staticmethod
    def _to_record(r: RemoteRecord) -> AttendanceRecord:
        raw_date = r.fields.get(FIELD_DATE)
        attendance_date: Optional[date] = None
        if raw_date:
            try:
                attendance_date = parse_iso_date(str(raw_date)[:10])
            except ValueError:
                logger.warning("Attendance record %s has an unreadable date %r", r.record_id, raw_date)

        raw_status = r.fields.get(FIELD_STATUS)
        status: Optional[AttendanceStatus] = None
        if raw_status:
            try:
                status = AttendanceStatus(raw_status)
            except ValueError:
                logger.warning("Attendance record %s has an unknown status %r", r.record_id, raw_status)

        return AttendanceRecord(
            record_id=r.record_id,
            participant_id=str(r.first_of(FIELD_PARTICIPANT_ID, FIELD_PARTICIPANT_ID_LEGACY, default="")),
            participant_name=str(r.fields.get(FIELD_PARTICIPANT_NAME) or ""),
            attendance_date=attendance_date,
            status=status,
            timestamp=r.fields.get(FIELD_TIMESTAMP),
        )
