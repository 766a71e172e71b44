import re

from flask import jsonify

from services.errors import (
    DuplicateHolidayError,
    HolidayEngineError,
    HolidaySeedError,
    NotFoundError,
)

# ── 유효성 검사 ──
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def validate_month(month: str) -> bool:
    """YYYY-MM 형식 월 유효성 검사"""
    if not MONTH_PATTERN.fullmatch(month or ""):
        return False
    year, mon = month.split("-")
    return int(year) >= 2000 and 1 <= int(mon) <= 12


def parse_bool(value):
    """쿼리스트링 'true'/'false' → bool, 그 외(없음 포함)는 None"""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    return None


def engine_error_response(exc: HolidayEngineError):
    """도메인 예외 종류 → JSON 오류 응답"""
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, DuplicateHolidayError):
        status = 409
    elif isinstance(exc, HolidaySeedError):
        return jsonify({"error": str(exc), "report": exc.report.to_dict()}), 500
    else:
        status = 400
    return jsonify({"error": str(exc)}), status
