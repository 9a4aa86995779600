from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, jsonify, request, session

from ..common.auth import admin_required, login_required, roles_required
from ..common.http import date_arg, error_response, json_body, optional_int_arg
from ..common.validators import require_period, require_person_type
from ..core.enums import MarkedBy, PersonType, Role
from ..core.exceptions import DomainError
from .model import AttendanceFilters


def register(app: Flask, container) -> None:
    def _marked_by() -> MarkedBy:
        return MarkedBy.ADMIN if session.get("role") == Role.ADMIN.value else MarkedBy.TEACHER

    @app.route("/classes/<int:class_id>/sessions", methods=["GET"], endpoint="class_sessions")
    @login_required
    def class_sessions(class_id: int):
        try:
            start = date_arg("start", date.today())
            end = date_arg("end", start + timedelta(days=6))
            sessions = container.schedule_service.resolve_sessions(class_id, start, end)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            [
                {
                    "date": s.session_date.isoformat(),
                    "period": s.period.value,
                    "label": s.period.label,
                    "start_time": s.start_time.strftime("%H:%M") if s.start_time else None,
                }
                for s in sessions
            ]
        )

    @app.route("/classes/<int:class_id>/schedule", methods=["GET"], endpoint="class_weekly_schedule")
    @login_required
    def class_weekly_schedule(class_id: int):
        try:
            return jsonify(container.schedule_service.weekly_overview(class_id))
        except DomainError as e:
            return error_response(e)

    @app.route("/classes/<int:class_id>/attendance", methods=["GET"], endpoint="class_attendance_page")
    @login_required
    def class_attendance_page(class_id: int):
        try:
            data = container.attendance_page.assemble(class_id, date_arg("date", date.today()))
        except DomainError as e:
            return error_response(e)
        return jsonify(data.as_dict())

    @app.route("/classes/<int:class_id>/attendance", methods=["POST"], endpoint="class_attendance_mark")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def class_attendance_mark(class_id: int):
        try:
            body = json_body()
            result = container.attendance_ledger.upsert_attendance(
                class_id,
                date_arg("date", source=body),
                body.get("period"),
                body.get("person_id"),
                body.get("person_type", PersonType.STUDENT.value),
                body.get("present"),
                marked_by=_marked_by(),
                note=body.get("note"),
            )
        except DomainError as e:
            return error_response(e)

        return jsonify({"record": result.record.as_dict(), "warnings": [w.as_dict() for w in result.warnings]})

    @app.route("/classes/<int:class_id>/attendance/bulk", methods=["POST"], endpoint="class_attendance_bulk")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def class_attendance_bulk(class_id: int):
        try:
            body = json_body()
            entries = [(e.get("person_id"), e.get("present")) for e in body.get("entries") or []]
            results = container.attendance_ledger.bulk_upsert(
                class_id,
                date_arg("date", source=body),
                body.get("period"),
                entries,
                person_type=body.get("person_type", PersonType.STUDENT.value),
                marked_by=_marked_by(),
            )
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "saved": len(results),
                "warnings": [w.as_dict() for r in results for w in r.warnings],
            }
        )

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance_range")
    @admin_required
    def admin_attendance_range():
        try:
            end = date_arg("end", date.today())
            start = date_arg("start", end - timedelta(days=30))
            person_type = request.args.get("person_type")
            period = request.args.get("period")
            filters = AttendanceFilters(
                class_id=optional_int_arg("class_id"),
                person_id=optional_int_arg("person_id"),
                person_type=require_person_type(person_type) if person_type else None,
                period=require_period(period) if period else None,
            )
            rows = container.attendance_ledger.list_by_date_range(start, end, filters)
        except DomainError as e:
            return error_response(e)

        return jsonify([r.as_dict() for r in rows])
