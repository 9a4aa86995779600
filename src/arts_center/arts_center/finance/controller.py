from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request, send_file

from ..common.auth import admin_required
from ..common.http import error_response, int_arg
from ..core.exceptions import DomainError
from ..reports.export import XLSX_MIMETYPE, build_finance_workbook
from .service import summarize


def register(app: Flask, container) -> None:
    @app.route("/admin/reports/monthly", methods=["GET"], endpoint="admin_reports_monthly")
    @admin_required
    def admin_reports_monthly():
        try:
            year = int_arg("year", date.today().year)
            series = container.financial_aggregator.build_monthly_series(
                year, fee_schedule=container.fee_schedule_repo.current()
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"year": year, "months": [m.as_dict() for m in series], "total": summarize(series)})

    @app.route("/admin/reports/classes", methods=["GET"], endpoint="admin_reports_classes")
    @admin_required
    def admin_reports_classes():
        today = date.today()
        try:
            items = container.financial_aggregator.class_revenue(
                int_arg("month", today.month),
                int_arg("year", today.year),
                fee_schedule=container.fee_schedule_repo.current(),
                subject=request.args.get("subject") or None,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify([i.as_dict() for i in items])

    @app.route("/admin/reports/monthly.xlsx", methods=["GET"], endpoint="admin_reports_monthly_xlsx")
    @admin_required
    def admin_reports_monthly_xlsx():
        today = date.today()
        try:
            year = int_arg("year", today.year)
            fee_schedule = container.fee_schedule_repo.current()
            series = container.financial_aggregator.build_monthly_series(year, fee_schedule=fee_schedule)
            month = int_arg("month", today.month if year == today.year else 12)
            classes = container.financial_aggregator.class_revenue(month, year, fee_schedule=fee_schedule)
        except DomainError as e:
            return error_response(e)

        return send_file(
            build_finance_workbook(series, classes),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"bao_cao_tai_chinh_{year}.xlsx",
        )

    @app.route("/admin/tuition/quote", methods=["GET"], endpoint="admin_tuition_quote")
    @admin_required
    def admin_tuition_quote():
        today = date.today()
        try:
            quote = container.fee_engine.quote(
                int_arg("person_id"),
                int_arg("class_id"),
                int_arg("month", today.month),
                int_arg("year", today.year),
                fee_schedule=container.fee_schedule_repo.current(),
            )
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "person_id": quote.person_id,
                "class_id": quote.class_id,
                "subject": quote.subject,
                "month": quote.month,
                "year": quote.year,
                "monthly_fee": quote.monthly_fee,
                "amount": quote.amount,
                "warnings": [w.as_dict() for w in quote.warnings],
            }
        )

    @app.route("/admin/salaries", methods=["GET"], endpoint="admin_salaries")
    @admin_required
    def admin_salaries():
        today = date.today()
        try:
            rows = container.salary_service.all_teachers(int_arg("month", today.month), int_arg("year", today.year))
        except DomainError as e:
            return error_response(e)
        return jsonify(rows)

    @app.route("/admin/salaries/sync", methods=["POST"], endpoint="admin_salaries_sync")
    @admin_required
    def admin_salaries_sync():
        today = date.today()
        try:
            expense_id = container.salary_service.sync_salary_expense(
                int_arg("month", today.month), int_arg("year", today.year)
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"expense_id": expense_id})
