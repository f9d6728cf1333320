from __future__ import annotations

import logging
from datetime import date

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.datetime_utils import format_iso_date, today_local
from ..common.validators import coerce_date
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteApiError, RemoteWriteError, ValidationError
from ..dashboard.state import DashboardState, UIEvent, stats, to_entries, update
from ..users.controller import login_required_for
from .model import AttendanceEntry

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    login_required = login_required_for(container)
    states = container.dashboard_states

    def _username() -> str:
        current = container.session_manager(session).current()
        return current.username if current else ""

    def _initial_state() -> DashboardState:
        today = today_local()
        start = container.program_start
        return DashboardState(current_date=today if today >= start else start, program_start=start)

    def _load_statuses(attendance_date: date) -> dict:
        # Marking attendance must stay possible when previous records can't be read.
        try:
            return container.attendance_service.load_statuses(attendance_date)
        except RemoteApiError as e:
            logger.error("Error loading attendance for %s: %s", attendance_date, e)
            return {}

    def _reload(state: DashboardState) -> DashboardState:
        try:
            participants = container.participants_repo.list_all()
        except RemoteApiError as e:
            flash(str(e), "danger")
            return update(state, UIEvent.LOADED, participants=[], statuses={})

        if not participants:
            flash("No participants found. Please add participants to your Airtable.", "warning")
            return update(state, UIEvent.LOADED, participants=[], statuses={})

        return update(state, UIEvent.LOADED, participants=participants, statuses=_load_statuses(state.current_date))

    def _render(state: DashboardState):
        return render_template(
            "dashboard.html",
            state=state,
            stats=stats(state),
            statuses=list(AttendanceStatus),
            program_name=container.program_name,
            min_date=format_iso_date(state.program_start),
            current_date=format_iso_date(state.current_date),
            username=_username(),
        )

    def _current_state() -> DashboardState:
        state = states.get(_username())
        if state is None:
            state = _reload(_initial_state())
            states.put(_username(), state)
        return state

    def _parse_status(value: str) -> AttendanceStatus:
        try:
            return AttendanceStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid attendance status: {value!r}")

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        base = states.get(_username()) or _initial_state()
        state = _reload(DashboardState(current_date=base.current_date, program_start=base.program_start))
        states.put(_username(), state)
        return _render(state)

    @app.route("/dashboard/date", methods=["POST"], endpoint="dashboard_date")
    @login_required
    def dashboard_date():
        state = _current_state()
        try:
            new_date = coerce_date(request.form.get("date"))
            state = update(state, UIEvent.CHANGE_DATE, new_date=new_date)
        except ValidationError as e:
            flash(str(e), "warning")
            return _render(state)

        state = update(state, UIEvent.LOADED, participants=state.participants, statuses=_load_statuses(new_date))
        states.put(_username(), state)
        return _render(state)

    @app.route("/dashboard/toggle", methods=["POST"], endpoint="dashboard_toggle")
    @login_required
    def dashboard_toggle():
        state = _current_state()
        try:
            status = _parse_status(request.form.get("status", ""))
            state = update(
                state,
                UIEvent.TOGGLE,
                participant_id=request.form.get("participant_id", ""),
                status=status,
            )
            states.put(_username(), state)
        except ValidationError as e:
            flash(str(e), "warning")
        return _render(state)

    @app.route("/dashboard/mark-all", methods=["POST"], endpoint="dashboard_mark_all")
    @login_required
    def dashboard_mark_all():
        state = _current_state()
        try:
            state = update(state, UIEvent.MARK_ALL, status=_parse_status(request.form.get("status", "")))
            states.put(_username(), state)
        except ValidationError as e:
            flash(str(e), "warning")
        return _render(state)

    @app.route("/dashboard/submit", methods=["POST"], endpoint="dashboard_submit")
    @login_required
    def dashboard_submit():
        state = _current_state()
        entries = to_entries(state)
        if not entries:
            flash("Please mark attendance for at least one participant", "warning")
            return _render(state)

        username = _username()
        if not states.begin_submit(username):
            logger.warning("Ignoring duplicate submit from %s", username)
            flash("A submission is already in progress. Please wait.", "warning")
            return _render(state)

        try:
            result = container.attendance_service.save_attendance(entries)
        except (ValidationError, RemoteWriteError, RemoteApiError) as e:
            flash(str(e), "danger")
            return _render(state)
        except Exception as e:
            logger.exception("Error submitting attendance")
            if bool(app.config.get("DEBUG", False)):
                flash(f"Unexpected error while saving attendance: {e}", "danger")
            else:
                flash("Unexpected error while saving attendance", "danger")
            return _render(state)
        finally:
            states.end_submit(username)

        session["last_submission"] = {
            "date": format_iso_date(state.current_date),
            "total": len(entries),
            "present": sum(1 for e in entries if e.status == AttendanceStatus.PRESENT),
            "absent": sum(1 for e in entries if e.status == AttendanceStatus.ABSENT),
            "created": result.created,
            "updated": result.updated,
        }
        return redirect(url_for("confirmation"))

    @app.route("/confirmation", endpoint="confirmation")
    @login_required
    def confirmation():
        summary = session.get("last_submission")
        if not summary:
            return redirect(url_for("dashboard"))
        return render_template(
            "confirmation.html",
            summary=summary,
            submitted_date=coerce_date(summary.get("date")),
            program_name=container.program_name,
        )

    @app.route("/api/participants", endpoint="api_participants")
    @login_required
    def api_participants():
        try:
            participants = container.participants_repo.list_all()
        except RemoteApiError as e:
            return jsonify({"success": False, "message": str(e), "status_code": e.status_code}), 502
        return jsonify(
            {
                "success": True,
                "participants": [
                    {"id": p.participant_id, "name": p.name, "email": p.email, "phone": p.phone}
                    for p in participants
                ],
            }
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    @login_required
    def api_attendance_list():
        try:
            attendance_date = coerce_date(request.args.get("date"))
            records = container.attendance_service.list_for_date(attendance_date)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RemoteApiError as e:
            return jsonify({"success": False, "message": str(e), "status_code": e.status_code}), 502

        return jsonify(
            {
                "success": True,
                "date": format_iso_date(attendance_date),
                "records": [
                    {
                        "id": r.record_id,
                        "participantId": r.participant_id,
                        "participantName": r.participant_name,
                        "date": format_iso_date(r.attendance_date) if r.attendance_date else None,
                        "status": r.status.value if r.status else None,
                        "timestamp": r.timestamp,
                    }
                    for r in records
                ],
            }
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_save")
    @login_required
    def api_attendance_save():
        data = request.get_json(silent=True) or {}
        items = data.get("entries", data) if isinstance(data, dict) else data
        if not isinstance(items, list):
            return jsonify({"success": False, "message": "Expected a list of attendance entries"}), 400

        if not all(isinstance(i, dict) for i in items):
            return jsonify({"success": False, "message": "Every attendance entry must be a JSON object"}), 400

        try:
            entries = [AttendanceEntry.from_dict(i) for i in items]
            result = container.attendance_service.save_attendance(entries)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RemoteWriteError as e:
            return (
                jsonify(
                    {
                        "success": False,
                        "message": str(e),
                        "saved": e.outcome.saved_records,
                        "total": e.outcome.total_records,
                    }
                ),
                502,
            )
        except RemoteApiError as e:
            return jsonify({"success": False, "message": str(e), "status_code": e.status_code}), 502

        return jsonify(result.to_dict())

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    @login_required
    def api_attendance_delete(record_id: str):
        try:
            container.attendance_service.delete_record(record_id)
        except RemoteApiError as e:
            return jsonify({"success": False, "message": str(e), "status_code": e.status_code}), 502
        return jsonify({"success": True, "id": record_id})
