from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.datetime_utils import parse_iso_datetime
from ..common.http import error_response, int_arg, json_body, optional_int_arg
from ..core.exceptions import DomainError, ValidationError
from .model import PaymentUpdate, TuitionSummary


def _paid_at(body: dict):
    raw = body.get("paid_at")
    return parse_iso_datetime(str(raw)) if raw else None


def _is_paid(body: dict):
    value = body.get("is_paid")
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError(f"is_paid không hợp lệ: {value!r}")


def register(app: Flask, container) -> None:
    @app.route("/admin/tuition", methods=["GET"], endpoint="admin_tuition_list")
    @admin_required
    def admin_tuition_list():
        today = date.today()
        try:
            items = container.payment_service.tuition_items(
                int_arg("month", today.month),
                int_arg("year", today.year),
                fee_schedule=container.fee_schedule_repo.current(),
                class_id=optional_int_arg("class_id"),
                state=request.args.get("state") or None,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"items": [i.as_dict() for i in items], "summary": TuitionSummary.from_items(items).as_dict()})

    @app.route("/admin/tuition/payments", methods=["POST"], endpoint="admin_payment_create")
    @admin_required
    def admin_payment_create():
        try:
            body = json_body()
            payment = container.payment_service.create_payment(
                person_id=int_arg("person_id", source=body),
                class_id=int_arg("class_id", source=body),
                month=int_arg("month", source=body),
                year=int_arg("year", source=body),
                is_paid=bool(_is_paid(body)),
                amount=body.get("amount"),
                paid_at=_paid_at(body),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(payment.as_dict()), 201

    @app.route("/admin/tuition/payments/<int:payment_id>", methods=["POST"], endpoint="admin_payment_update")
    @admin_required
    def admin_payment_update(payment_id: int):
        try:
            body = json_body()
            payment = container.payment_service.update_payment(
                payment_id, is_paid=_is_paid(body), amount=body.get("amount"), paid_at=_paid_at(body)
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(payment.as_dict())

    @app.route("/admin/tuition/payments/bulk", methods=["POST"], endpoint="admin_payment_bulk")
    @admin_required
    def admin_payment_bulk():
        try:
            entries = json_body().get("updates")
            if not isinstance(entries, list):
                raise ValidationError("Danh sách cập nhật không hợp lệ")
            updates = []
            for entry in entries:
                if not isinstance(entry, dict):
                    raise ValidationError("Danh sách cập nhật không hợp lệ")
                updates.append(
                    PaymentUpdate(
                        payment_id=int_arg("payment_id", source=entry),
                        is_paid=_is_paid(entry),
                        amount=entry.get("amount"),
                        paid_at=_paid_at(entry),
                    )
                )
            payments = container.payment_service.bulk_update(updates)
        except DomainError as e:
            return error_response(e)
        return jsonify({"updated": len(payments), "payments": [p.as_dict() for p in payments]})

    @app.route("/admin/tuition/payments/toggle", methods=["POST"], endpoint="admin_payment_toggle")
    @admin_required
    def admin_payment_toggle():
        try:
            body = json_body()
            payment = container.payment_service.toggle_payment(
                person_id=int_arg("person_id", source=body),
                class_id=int_arg("class_id", source=body),
                month=int_arg("month", source=body),
                year=int_arg("year", source=body),
                fee_schedule=container.fee_schedule_repo.current(),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(payment.as_dict())
