from __future__ import annotations

from datetime import date
from typing import Optional

from flask import jsonify, request

from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date


def error_response(exc: DomainError):
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, AuthorizationError):
        status = 403
    elif isinstance(exc, ValidationError):
        status = 400
    else:
        status = 422
    return jsonify({"error": str(exc)}), status


def int_arg(name: str, default: Optional[int] = None, *, source=None) -> Optional[int]:
    source = source if source is not None else request.args
    raw = source.get(name)
    if raw is None or str(raw).strip() == "":
        if default is None:
            raise ValidationError(f"Thiếu tham số {name}")
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Tham số {name} không hợp lệ")


def optional_int_arg(name: str, *, source=None) -> Optional[int]:
    source = source if source is not None else request.args
    if not str(source.get(name) or "").strip():
        return None
    return int_arg(name, source=source)


def date_arg(name: str, default: Optional[date] = None, *, source=None) -> date:
    source = source if source is not None else request.args
    raw = source.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Thiếu tham số {name}")
        return default
    return parse_iso_date(str(raw))


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Dữ liệu gửi lên không hợp lệ")
    return data
