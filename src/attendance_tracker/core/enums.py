from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the remote Status column."""

    PRESENT = "Present"
    ABSENT = "Absent"


class WriteKind(str, Enum):
    """Kind of batched write issued against the attendance table."""

    CREATE = "create"
    UPDATE = "update"
