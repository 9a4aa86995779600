from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from ..finance.model import ClassRevenueItem, MonthlyFinance

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def monthly_series_frame(series: Sequence[MonthlyFinance]) -> pd.DataFrame:
    df = pd.DataFrame(
        [m.as_dict() for m in series],
        columns=["label", "revenue", "salary_expenses", "other_expenses", "expenses", "profit"],
    )
    return df.rename(
        columns={
            "label": "Tháng",
            "revenue": "Doanh thu",
            "salary_expenses": "Lương giáo viên",
            "other_expenses": "Chi phí khác",
            "expenses": "Tổng chi",
            "profit": "Lợi nhuận",
        }
    )


def class_revenue_frame(items: Sequence[ClassRevenueItem]) -> pd.DataFrame:
    df = pd.DataFrame(
        [i.as_dict() for i in items],
        columns=[
            "class_name",
            "subject",
            "total_students",
            "expected_revenue",
            "paid_count",
            "unpaid_count",
            "paid_revenue",
        ],
    )
    return df.rename(
        columns={
            "class_name": "Lớp",
            "subject": "Môn",
            "total_students": "Số học viên",
            "expected_revenue": "Học phí dự kiến",
            "paid_count": "Đã đóng",
            "unpaid_count": "Chưa đóng",
            "paid_revenue": "Đã thu",
        }
    )


def build_finance_workbook(
    series: Sequence[MonthlyFinance],
    class_revenue: Sequence[ClassRevenueItem] = (),
) -> io.BytesIO:
    """Excel workbook: one sheet per report, ready for `send_file`."""

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        monthly_series_frame(series).to_excel(writer, index=False, sheet_name="Theo tháng")
        if class_revenue:
            class_revenue_frame(class_revenue).to_excel(writer, index=False, sheet_name="Theo lớp")
    out.seek(0)
    return out
