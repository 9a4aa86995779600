from __future__ import annotations

import logging

from ..core.enums import FindingCode
from ..core.quality import DataQualityFinding, report_finding
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import FeeSchedule
from .repository import FeeScheduleRepository

logger = logging.getLogger(__name__)


class MySQLFeeScheduleRepository(FeeScheduleRepository):
    """Fee table derived from the `monthly_fee` of active classes, per subject."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def current(self) -> FeeSchedule:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject, MAX(COALESCE(monthly_fee, 0)) AS fee, COUNT(DISTINCT monthly_fee) AS variants
                FROM classes
                WHERE is_active=1
                GROUP BY subject
                """
            )
            rows = fetchall(cur)

        for r in rows:
            if int(r.get("variants") or 0) > 1:
                report_finding(
                    DataQualityFinding(
                        code=FindingCode.CONFLICTING_FEE,
                        message=f"Môn {r['subject']} có nhiều mức học phí khác nhau, dùng mức cao nhất",
                        context={"subject": r["subject"], "fee": int(r["fee"] or 0)},
                    ),
                    logger=logger,
                )
        return FeeSchedule({r["subject"]: int(r["fee"] or 0) for r in rows if r.get("subject")})
