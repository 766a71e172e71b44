"""직원별 월 연장근로(은행시간) 조회 블루프린트."""
import math

from flask import Blueprint, jsonify, request

from services.bank_hours_service import BankHoursService
from services.errors import HolidayEngineError
from routes.utils import engine_error_response, validate_month

bank_hours_bp = Blueprint("bank_hours", __name__)


@bank_hours_bp.errorhandler(HolidayEngineError)
def handle_engine_error(exc):
    return engine_error_response(exc)


def _month_arg():
    month = request.args.get("month", "")
    if not validate_month(month):
        return None
    year, mon = map(int, month.split("-"))
    return year, mon


def _float_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"{name} 값이 유한한 숫자가 아닙니다: {raw!r}")
    return value


@bank_hours_bp.route("/api/bank-hours/<int:employee_id>")
def monthly_overtime(employee_id):
    parsed = _month_arg()
    if not parsed:
        return jsonify({"error": "month 파라미터는 YYYY-MM 형식이어야 합니다."}), 400
    year, month = parsed

    try:
        compensation = {
            "base_salary": _float_arg("base_salary"),
            "danger_pay": _float_arg("danger_pay"),
            "unhealthy_pay": _float_arg("unhealthy_pay"),
        }
    except ValueError:
        return jsonify({"error": "급여 값은 숫자여야 합니다."}), 400

    summary = BankHoursService().calculate_for_month(employee_id, year, month, **compensation)
    return jsonify({"success": True, "summary": summary.to_dict()})


@bank_hours_bp.route("/api/bank-hours/<int:employee_id>/detailed")
def monthly_overtime_detailed(employee_id):
    parsed = _month_arg()
    if not parsed:
        return jsonify({"error": "month 파라미터는 YYYY-MM 형식이어야 합니다."}), 400
    year, month = parsed

    days = BankHoursService().calculate_detailed(employee_id, year, month)
    return jsonify({
        "success": True,
        "employee_id": employee_id,
        "days": [d.to_dict() for d in days],
    })
