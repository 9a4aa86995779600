"""Kiểm tra chất lượng dữ liệu: môn chưa có học phí, học viên chưa xếp lớp.

Chạy: python scripts/audit_data_quality.py [YYYY-MM-DD]
Thoát với mã 1 nếu có phát hiện.
"""

from __future__ import annotations

import importlib
import logging
import sys
import warnings
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.arts_center.arts_center.common.datetime_utils import now_local, parse_iso_date
from src.arts_center.arts_center.container import build_container
from src.arts_center.arts_center.core.enums import PersonType
from src.arts_center.arts_center.core.exceptions import DataQualityWarning


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    # Findings are printed below; the warning copies would only duplicate them.
    warnings.simplefilter("ignore", DataQualityWarning)

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        proration_policy=getattr(settings, "PRORATION_POLICY", "cutoff_day"),
        proration_cutoff_day=int(getattr(settings, "PRORATION_CUTOFF_DAY", 15)),
    )
    as_of = parse_iso_date(argv[0]) if argv else now_local().date()

    fee_findings = container.fee_engine.audit_fee_schedule(container.fee_schedule_repo.current())
    unenrolled = container.enrollment_registry.audit_unenrolled(as_of, person_type=PersonType.STUDENT)

    print(f"== Học phí ({len(fee_findings)} môn thiếu) ==")
    for f in fee_findings:
        print(f"- {f.message}")

    print(f"== Học viên chưa xếp lớp tại {as_of.isoformat()} ({len(unenrolled)}) ==")
    for p in unenrolled:
        print(f"- #{p['person_id']} {p['full_name']} {p['phone'] or ''}".rstrip())

    return 1 if fee_findings or unenrolled else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
