from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, MutableMapping

from .attendance.airtable_attendance_repository import AirtableAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import parse_iso_date
from .core.constants import DEFAULT_MAX_WRITE_WORKERS, DEFAULT_SESSION_HOURS, DEFAULT_SESSION_KEY
from .dashboard.state import DashboardStateStore
from .participants.airtable_participant_repository import AirtableParticipantRepository
from .participants.repository import ParticipantRepository
from .remote.client import AirtableConfig, TableClient
from .sessions.service import SessionManager
from .sessions.store import MappingStore
from .users.service import AuthService, parse_credentials


@dataclass(frozen=True)
class Container:
    participants_repo: ParticipantRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    dashboard_states: DashboardStateStore

    program_name: str
    program_start: date
    session_key: str = DEFAULT_SESSION_KEY
    session_lifetime: timedelta = timedelta(hours=DEFAULT_SESSION_HOURS)

    def session_manager(self, backing: MutableMapping[str, Any]) -> SessionManager:
        return SessionManager(MappingStore(backing), key=self.session_key, lifetime=self.session_lifetime)


def build_container(*, settings: Any) -> Container:
    client = TableClient(
        AirtableConfig(
            api_key=str(settings.AIRTABLE_API_KEY),
            base_id=str(settings.AIRTABLE_BASE_ID),
            api_url=str(getattr(settings, "AIRTABLE_API_URL", "https://api.airtable.com/v0")),
            timeout=getattr(settings, "REQUEST_TIMEOUT", None),
        )
    )

    participants_repo = AirtableParticipantRepository(client, str(settings.PARTICIPANTS_TABLE))
    attendance_repo = AirtableAttendanceRepository(client, str(settings.ATTENDANCE_TABLE))

    auth_service = AuthService(parse_credentials(str(settings.AUTH_CREDENTIALS)))
    attendance_service = AttendanceService(
        attendance_repo,
        max_workers=int(getattr(settings, "MAX_WRITE_WORKERS", DEFAULT_MAX_WRITE_WORKERS)),
    )

    return Container(
        participants_repo=participants_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        attendance_service=attendance_service,
        dashboard_states=DashboardStateStore(),
        program_name=str(settings.PROGRAM_NAME),
        program_start=parse_iso_date(str(settings.PROGRAM_START_DATE)),
        session_key=str(getattr(settings, "SESSION_KEY", DEFAULT_SESSION_KEY)),
        session_lifetime=timedelta(hours=int(getattr(settings, "SESSION_HOURS", DEFAULT_SESSION_HOURS))),
    )
