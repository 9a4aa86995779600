from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.http import date_arg, error_response, int_arg, json_body
from ..common.validators import require_person_type
from ..core.enums import EnrollmentStatus, PersonType
from ..core.exceptions import DomainError


def _enrollment_dict(e) -> dict:
    return {
        "enrollment_id": e.enrollment_id,
        "person_id": e.person_id,
        "person_type": e.person_type.value,
        "class_id": e.class_id,
        "status": e.status.value,
        "start_date": e.start_date.isoformat(),
        "end_date": e.end_date.isoformat() if e.end_date else None,
        "leave_reason": e.leave_reason,
    }


def register(app: Flask, container) -> None:
    @app.route("/admin/enrollments", methods=["POST"], endpoint="admin_enroll")
    @admin_required
    def admin_enroll():
        try:
            body = json_body()
            enrollment = container.enrollment_registry.enroll(
                person_id=int_arg("person_id", source=body),
                class_id=int_arg("class_id", source=body),
                start_date=date_arg("start_date", date.today(), source=body),
                status=body.get("status", EnrollmentStatus.ACTIVE.value),
                person_type=body.get("person_type", PersonType.STUDENT.value),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(_enrollment_dict(enrollment)), 201

    @app.route("/admin/enrollments/<int:enrollment_id>/status", methods=["POST"], endpoint="admin_enrollment_status")
    @admin_required
    def admin_enrollment_status(enrollment_id: int):
        try:
            body = json_body()
            enrollment = container.enrollment_registry.transition(
                enrollment_id,
                body.get("status"),
                on_date=date_arg("date", date.today(), source=body),
                leave_reason=body.get("leave_reason"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(_enrollment_dict(enrollment))

    @app.route("/admin/audit/unenrolled", methods=["GET"], endpoint="admin_audit_unenrolled")
    @admin_required
    def admin_audit_unenrolled():
        try:
            person_type = require_person_type(request.args.get("person_type") or PersonType.STUDENT.value)
            rows = container.enrollment_registry.audit_unenrolled(date_arg("as_of", date.today()), person_type=person_type)
        except DomainError as e:
            return error_response(e)
        return jsonify({"count": len(rows), "people": rows})

    @app.route("/admin/audit/fees", methods=["GET"], endpoint="admin_audit_fees")
    @admin_required
    def admin_audit_fees():
        findings = container.fee_engine.audit_fee_schedule(container.fee_schedule_repo.current())
        return jsonify({"count": len(findings), "findings": [f.as_dict() for f in findings]})
