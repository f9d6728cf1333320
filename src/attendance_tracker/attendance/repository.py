from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord, NewAttendance, StatusUpdate


class AttendanceRepository(Protocol):
    """Storage interface used by the reconciliation service.

    Write methods take at most one batch worth of items and return how many
    records were written.
    """

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_many(self, items: Sequence[NewAttendance]) -> int:
        raise NotImplementedError

    def update_many(self, items: Sequence[StatusUpdate]) -> int:
        raise NotImplementedError

    def delete(self, record_id: str) -> None:
        raise NotImplementedError
