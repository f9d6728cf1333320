from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from attendance_tracker.attendance.model import AttendanceRecord, NewAttendance, StatusUpdate
from attendance_tracker.core.exceptions import RemoteApiError
from attendance_tracker.participants.model import Participant


class InMemoryAttendance:
    """Attendance repository double that records every call it receives."""

    def __init__(self, records: Optional[List[AttendanceRecord]] = None):
        self.records: List[AttendanceRecord] = list(records or [])
        self.reads: List[date] = []
        self.create_calls: List[List[NewAttendance]] = []
        self.update_calls: List[List[StatusUpdate]] = []
        self.deleted: List[str] = []
        self.fail_when: Callable[[str, Sequence], bool] = lambda kind, items: False
        self._next_id = 1

    def list_for_date(self, attendance_date: date):
        self.reads.append(attendance_date)
        return [r for r in self.records if r.attendance_date == attendance_date]

    def create_many(self, items):
        items = list(items)
        self.create_calls.append(items)
        if self.fail_when("create", items):
            raise RemoteApiError("Failed to create records: 422", status_code=422)
        for i in items:
            self.records.append(
                AttendanceRecord(
                    record_id=f"rec{self._next_id}",
                    participant_id=i.participant_id,
                    participant_name=i.participant_name,
                    attendance_date=i.attendance_date,
                    status=i.status,
                    timestamp=i.timestamp,
                )
            )
            self._next_id += 1
        return len(items)

    def update_many(self, items):
        items = list(items)
        self.update_calls.append(items)
        if self.fail_when("update", items):
            raise RemoteApiError("Failed to update records: 500", status_code=500)
        by_id = {i.record_id: i for i in items}
        self.records = [
            AttendanceRecord(
                record_id=r.record_id,
                participant_id=r.participant_id,
                participant_name=r.participant_name,
                attendance_date=r.attendance_date,
                status=by_id[r.record_id].status,
                timestamp=by_id[r.record_id].timestamp,
            )
            if r.record_id in by_id
            else r
            for r in self.records
        ]
        return len(items)

    def delete(self, record_id: str) -> None:
        self.deleted.append(record_id)
        self.records = [r for r in self.records if r.record_id != record_id]

    @property
    def write_calls(self) -> int:
        return len(self.create_calls) + len(self.update_calls)


class InMemoryParticipants:
    def __init__(self, participants: Optional[List[Participant]] = None, error: Optional[Exception] = None):
        self.participants = list(participants or [])
        self.error = error

    def list_all(self):
        if self.error:
            raise self.error
        return list(self.participants)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 12, 26, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def program_day() -> date:
    return date(2025, 12, 26)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def participants() -> List[Participant]:
    return [
        Participant(participant_id="p1", name="Alice", email="alice@example.com"),
        Participant(participant_id="p2", name="Bob", phone="555-0102"),
        Participant(participant_id="p3", name="Chidi"),
    ]


@pytest.fixture
def participants_repo(participants) -> InMemoryParticipants:
    return InMemoryParticipants(participants)


@pytest.fixture
def make_clock() -> Callable[[datetime], Callable[[], datetime]]:
    def factory(start: datetime):
        state: Dict[str, datetime] = {"now": start}

        def clock() -> datetime:
            return state["now"]

        clock.state = state  # type: ignore[attr-defined]
        return clock

    return factory
