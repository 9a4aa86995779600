"""Ví dụ: dùng service layer trực tiếp (không qua Flask).

In báo cáo tài chính năm hiện tại và học phí tháng này của một học viên.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from config import get_settings_module

from src.arts_center.arts_center.container import build_container
from src.arts_center.arts_center.finance.service import summarize


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    fees = container.fee_schedule_repo.current()
    today = date.today()

    series = container.financial_aggregator.build_monthly_series(today.year, fee_schedule=fees)
    for m in series:
        print(f"{m.label:>8}  doanh thu={m.revenue:>12,}  chi={m.expenses:>12,}  lãi={m.profit:>12,}")
    print("Tổng:", summarize(series))

    print("Học phí HV#1 lớp #1:", container.fee_engine.compute_monthly_fee(1, 1, today.month, today.year, fee_schedule=fees))


if __name__ == "__main__":
    main()
