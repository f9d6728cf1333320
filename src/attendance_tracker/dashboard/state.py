"""Dashboard state and the single function that applies UI events to it.

The controller owns one :class:`DashboardState` per logged-in user and never
mutates it directly: every button press becomes a :class:`UIEvent` passed to
:func:`update`, which returns the next state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ..attendance.model import AttendanceEntry
from ..common.validators import require_program_date
from ..core.constants import UNKNOWN_NAME
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..participants.model import Participant


class UIEvent(str, Enum):
    LOADED = "loaded"
    CHANGE_DATE = "change_date"
    TOGGLE = "toggle"
    MARK_ALL = "mark_all"


@dataclass(frozen=True)
class DashboardState:
    current_date: date
    program_start: date
    participants: Tuple[Participant, ...] = ()
    selections: Mapping[str, AttendanceStatus] = field(default_factory=dict)

    def status_of(self, participant_id: str) -> Optional[AttendanceStatus]:
        return self.selections.get(participant_id)

    @property
    def can_submit(self) -> bool:
        return bool(self.participants)


@dataclass(frozen=True)
class DashboardStats:
    total: int
    present: int
    absent: int


def _on_loaded(state: DashboardState, *, participants: Sequence[Participant], statuses: Mapping[str, AttendanceStatus]) -> DashboardState:
    return replace(state, participants=tuple(participants), selections=dict(statuses))


def _on_change_date(state: DashboardState, *, new_date: date) -> DashboardState:
    require_program_date(new_date, state.program_start)
    return replace(state, current_date=new_date, selections={})


def _on_toggle(state: DashboardState, *, participant_id: str, status: AttendanceStatus) -> DashboardState:
    selections = dict(state.selections)
    if selections.get(participant_id) == status:
        # Pressing the active button clears the mark.
        del selections[participant_id]
    else:
        selections[participant_id] = status
    return replace(state, selections=selections)


def _on_mark_all(state: DashboardState, *, status: AttendanceStatus) -> DashboardState:
    return replace(state, selections={p.participant_id: status for p in state.participants})


_HANDLERS: Dict[UIEvent, Callable[..., DashboardState]] = {
    UIEvent.LOADED: _on_loaded,
    UIEvent.CHANGE_DATE: _on_change_date,
    UIEvent.TOGGLE: _on_toggle,
    UIEvent.MARK_ALL: _on_mark_all,
}


def update(state: DashboardState, event: UIEvent, **payload) -> DashboardState:
    """Apply ``event`` to ``state``.

    Raises ValidationError when the event is rejected (the old state stays
    valid in that case).
    """
    try:
        handler = _HANDLERS[UIEvent(event)]
    except (ValueError, KeyError):
        raise ValidationError(f"Unsupported dashboard event: {event}")
    return handler(state, **payload)


def stats(state: DashboardState) -> DashboardStats:
    values = list(state.selections.values())
    return DashboardStats(
        total=len(state.participants),
        present=sum(1 for s in values if s == AttendanceStatus.PRESENT),
        absent=sum(1 for s in values if s == AttendanceStatus.ABSENT),
    )


def to_entries(state: DashboardState) -> List[AttendanceEntry]:
    """Selections turned into submission entries for the current date."""
    by_id = {p.participant_id: p for p in state.participants}
    entries: List[AttendanceEntry] = []
    for participant_id, status in state.selections.items():
        participant = by_id.get(participant_id)
        if participant is None:
            continue
        entries.append(
            AttendanceEntry(
                participant_id=participant_id,
                participant_name=participant.name or UNKNOWN_NAME,
                attendance_date=state.current_date,
                status=status,
            )
        )
    return entries


class DashboardStateStore:
    """Process-local registry of dashboard states keyed by username.

    Also tracks which users have a submission in flight so a second submit
    is turned away until the first one settles.
    """

    def __init__(self):
        self._states: Dict[str, DashboardState] = {}
        self._submitting: Set[str] = set()
        self._lock = threading.Lock()

    def get(self, username: str) -> Optional[DashboardState]:
        with self._lock:
            return self._states.get(username)

    def put(self, username: str, state: DashboardState) -> None:
        with self._lock:
            self._states[username] = state

    def discard(self, username: str) -> None:
        with self._lock:
            self._states.pop(username, None)

    def begin_submit(self, username: str) -> bool:
        """Return False when ``username`` already has a submission running."""
        with self._lock:
            if username in self._submitting:
                return False
            self._submitting.add(username)
            return True

    def end_submit(self, username: str) -> None:
        with self._lock:
            self._submitting.discard(username)
