from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import SUBJECTS
from ..core.enums import EnrollmentStatus, MarkedBy, PaymentState, PersonType, TimePeriod
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_period(value) -> TimePeriod:
    if isinstance(value, TimePeriod):
        return value
    try:
        return TimePeriod(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Buổi học không hợp lệ: {value!r}")


def require_person_type(value) -> PersonType:
    if isinstance(value, PersonType):
        return value
    try:
        return PersonType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Loại người dùng không hợp lệ: {value!r}")


def require_enrollment_status(value) -> EnrollmentStatus:
    if isinstance(value, EnrollmentStatus):
        return value
    try:
        return EnrollmentStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Trạng thái ghi danh không hợp lệ: {value!r}")


def require_month(month: int, year: int) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Tháng/năm không hợp lệ")
    if not 1 <= month <= 12:
        raise ValidationError(f"Tháng không hợp lệ: {month}")
    if not 1900 <= year <= 9999:
        raise ValidationError(f"Năm không hợp lệ: {year}")
    return month, year


def require_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Ngày không hợp lệ: {value!r}")


def require_range(start: date, end: date) -> tuple[date, date]:
    start, end = require_date(start), require_date(end)
    if end < start:
        raise ValidationError("Ngày kết thúc phải sau ngày bắt đầu")
    return start, end


def normalize_note(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_marked_by(value) -> MarkedBy:
    if isinstance(value, MarkedBy):
        return value
    try:
        return MarkedBy(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Người điểm danh không hợp lệ: {value!r}")


def require_subject(value: str, *, known=SUBJECTS) -> str:
    """Return the canonical subject name (case-insensitive match)."""

    name = require_non_empty(value, "Môn học")
    for subject in known:
        if subject.casefold() == name.casefold():
            return subject
    raise ValidationError(f"Môn học không hợp lệ: {value!r}")


def require_amount(value) -> Optional[int]:
    """Số tiền VND: None (giữ mặc định) hoặc số nguyên không âm."""

    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Số tiền không hợp lệ: {value!r}")
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Số tiền không hợp lệ: {value!r}")
    if amount < 0:
        raise ValidationError("Số tiền không được âm")
    return amount


def require_payment_state(value) -> PaymentState:
    if isinstance(value, PaymentState):
        return value
    try:
        return PaymentState(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Trạng thái học phí không hợp lệ: {value!r}")
