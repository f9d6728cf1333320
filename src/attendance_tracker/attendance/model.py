from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Tuple, Union

from ..core.enums import AttendanceStatus, WriteKind


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one remote attendance row."""

    record_id: str
    participant_id: str
    participant_name: str
    attendance_date: Optional[date]
    status: Optional[AttendanceStatus]
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """One desired (participant, status) selection for a date.

    Date and status are kept loose here; the service validates them.
    """

    participant_id: str
    participant_name: str
    attendance_date: Union[date, str, None]
    status: Union[AttendanceStatus, str, None]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceEntry":
        """Build from a JSON payload (camelCase or snake_case keys)."""

        def pick(*keys: str) -> Any:
            for k in keys:
                if k in data:
                    return data[k]
            return None

        return cls(
            participant_id=str(pick("participantId", "participant_id") or ""),
            participant_name=str(pick("participantName", "participant_name") or ""),
            attendance_date=pick("date", "attendance_date"),
            status=pick("status"),
        )


@dataclass(frozen=True)
class NewAttendance:
    participant_id: str
    participant_name: str
    attendance_date: date
    status: AttendanceStatus
    timestamp: str


@dataclass(frozen=True)
class StatusUpdate:
    record_id: str
    status: AttendanceStatus
    timestamp: str


@dataclass(frozen=True)
class WriteBatch:
    kind: WriteKind
    items: Tuple[Any, ...]

    @property
    def size(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class ReconciliationPlan:
    """Creates and updates decided for one submission, before batching."""

    attendance_date: date
    creates: Tuple[NewAttendance, ...] = ()
    updates: Tuple[StatusUpdate, ...] = ()


@dataclass(frozen=True)
class BatchFailure:
    kind: WriteKind
    size: int
    message: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class BatchOutcome:
    """Aggregate result of a best-effort batch fan-out."""

    total_records: int
    saved_records: int
    failures: Tuple[BatchFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return f"{self.saved_records} of {self.total_records} saved"


@dataclass(frozen=True)
class SaveResult:
    created: int
    updated: int
    outcome: Optional[BatchOutcome] = None

    def to_dict(self) -> dict:
        return {"success": True, "created": self.created, "updated": self.updated}
