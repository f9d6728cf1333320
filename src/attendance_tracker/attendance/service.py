from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..common.batching import chunked
from ..common.datetime_utils import now_utc, to_iso_timestamp
from ..common.validators import coerce_date
from ..core.constants import BATCH_SIZE, DEFAULT_MAX_WRITE_WORKERS, UNKNOWN_NAME
from ..core.enums import AttendanceStatus, WriteKind
from ..core.exceptions import DomainError, RemoteApiError, RemoteWriteError, ValidationError
from .model import (
    AttendanceEntry,
    AttendanceRecord,
    BatchFailure,
    BatchOutcome,
    NewAttendance,
    ReconciliationPlan,
    SaveResult,
    StatusUpdate,
    WriteBatch,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: reconcile a day's selections with the remote attendance table.

    One submission costs one filtered read plus one write call per batch of
    ``batch_size`` records. Writes are not transactional: when a batch fails,
    the batches that already went through stay committed.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        batch_size: int = BATCH_SIZE,
        max_workers: int = DEFAULT_MAX_WRITE_WORKERS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._batch_size = int(batch_size)
        self._max_workers = max(1, int(max_workers))
        self._clock = clock

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(attendance_date)

    def load_statuses(self, attendance_date: date) -> Dict[str, AttendanceStatus]:
        """Participant id -> recorded status, used to pre-fill the dashboard."""
        statuses: Dict[str, AttendanceStatus] = {}
        for r in self._attendance.list_for_date(attendance_date):
            if r.participant_id and r.status:
                statuses[r.participant_id] = r.status
        return statuses

    def delete_record(self, record_id: str) -> None:
        if not record_id:
            raise ValidationError("Record id is required")
        self._attendance.delete(record_id)

    def validate(self, entries: Sequence[AttendanceEntry]) -> date:
        """Return the common date of ``entries`` or raise ValidationError."""
        if not entries:
            raise ValidationError("Please mark attendance for at least one participant")

        target: Optional[date] = None
        for e in entries:
            d = coerce_date(e.attendance_date)
            if target is None:
                target = d
            elif d != target:
                raise ValidationError("All attendance entries must share the same date")
            if not e.participant_id:
                raise ValidationError("Participant id is required for attendance")
            self._coerce_status(e.status)
        return target

    @staticmethod
    def _coerce_status(value) -> AttendanceStatus:
        try:
            return AttendanceStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid attendance status: {value!r}")

    def plan(
        self,
        entries: Sequence[AttendanceEntry],
        existing: Sequence[AttendanceRecord],
        *,
        now: Optional[datetime] = None,
    ) -> ReconciliationPlan:
        attendance_date = self.validate(entries)
        timestamp = to_iso_timestamp(now or self._clock())

        # Later entries for the same participant overwrite earlier ones.
        desired: Dict[str, AttendanceEntry] = {}
        for e in entries:
            desired[e.participant_id] = e

        existing_ids: Dict[str, str] = {}
        for r in existing:
            if not r.participant_id:
                continue
            previous = existing_ids.get(r.participant_id)
            if previous and previous != r.record_id:
                logger.warning(
                    "Participant %s has several attendance records on %s (%s, %s)",
                    r.participant_id,
                    attendance_date,
                    previous,
                    r.record_id,
                )
            existing_ids[r.participant_id] = r.record_id

        creates: List[NewAttendance] = []
        updates: List[StatusUpdate] = []
        for participant_id, e in desired.items():
            status = self._coerce_status(e.status)
            record_id = existing_ids.get(participant_id)
            if record_id:
                updates.append(StatusUpdate(record_id=record_id, status=status, timestamp=timestamp))
            else:
                creates.append(
                    NewAttendance(
                        participant_id=participant_id,
                        participant_name=e.participant_name or UNKNOWN_NAME,
                        attendance_date=attendance_date,
                        status=status,
                        timestamp=timestamp,
                    )
                )

        return ReconciliationPlan(attendance_date=attendance_date, creates=tuple(creates), updates=tuple(updates))

    def batches(self, plan: ReconciliationPlan) -> List[WriteBatch]:
        out = [WriteBatch(WriteKind.UPDATE, tuple(b)) for b in chunked(plan.updates, self._batch_size)]
        out += [WriteBatch(WriteKind.CREATE, tuple(b)) for b in chunked(plan.creates, self._batch_size)]
        return out

    def save_attendance(self, entries: Sequence[AttendanceEntry], *, now: Optional[datetime] = None) -> SaveResult:
        attendance_date = self.validate(entries)

        existing = self._attendance.list_for_date(attendance_date)
        plan = self.plan(entries, existing, now=now)
        outcome = self._fan_out(self.batches(plan))

        if not outcome.ok:
            logger.error(
                "Attendance for %s partially saved (%s); %d batch(es) failed",
                attendance_date,
                outcome.summary(),
                len(outcome.failures),
            )
            raise RemoteWriteError(
                f"Failed to save attendance. Please try again. ({outcome.summary()})",
                outcome,
            )

        logger.info(
            "Attendance for %s saved: %d created, %d updated",
            attendance_date,
            len(plan.creates),
            len(plan.updates),
        )
        return SaveResult(created=len(plan.creates), updated=len(plan.updates), outcome=outcome)

    def _write(self, batch: WriteBatch) -> int:
        if batch.kind == WriteKind.UPDATE:
            return self._attendance.update_many(batch.items)
        return self._attendance.create_many(batch.items)

    def _fan_out(self, batches: Sequence[WriteBatch]) -> BatchOutcome:
        """Run every batch concurrently and wait for all of them to settle."""
        total = sum(b.size for b in batches)
        if not batches:
            return BatchOutcome(total_records=0, saved_records=0)

        saved = 0
        failures: List[BatchFailure] = []
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(batches))) as pool:
            futures = [(b, pool.submit(self._write, b)) for b in batches]
            for batch, future in futures:
                try:
                    future.result()
                    saved += batch.size
                except DomainError as e:
                    status_code = e.status_code if isinstance(e, RemoteApiError) else None
                    failures.append(BatchFailure(batch.kind, batch.size, str(e), status_code))
                except Exception as e:
                    logger.exception("Unexpected error writing %d %s record(s)", batch.size, batch.kind.value)
                    failures.append(BatchFailure(batch.kind, batch.size, str(e), None))

        return BatchOutcome(total_records=total, saved_records=saved, failures=tuple(failures))
