"""공휴일 관리/조회 JSON API 블루프린트."""

import logging

from flask import Blueprint, jsonify, request

from extensions import limiter
from services.errors import HolidayEngineError, InvalidDateError
from services.holiday_service import HolidayFilter, HolidayService, StateScope
from routes.utils import engine_error_response, parse_bool

logger = logging.getLogger(__name__)

holiday_bp = Blueprint("holiday", __name__)


@holiday_bp.errorhandler(HolidayEngineError)
def handle_engine_error(exc):
    return engine_error_response(exc)


def _int_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidDateError(f"{name} 값이 올바르지 않습니다: {raw!r}") from exc


def _state_scope_arg():
    # state 없음 → 전체, state= (빈 값) → 전국만, state=DF → 전국 + DF
    if "state" not in request.args:
        return StateScope.ANY
    return StateScope.of(request.args.get("state"))


@holiday_bp.route("/api/holidays", methods=["POST"])
def create_holiday():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "JSON body required"}), 400

    if not data.get("name") or not data.get("date"):
        return jsonify({"error": "이름과 날짜는 필수입니다."}), 400

    holiday = HolidayService().create(
        name=data["name"],
        holiday_date=data["date"],
        holiday_type=data.get("type") or "NATIONAL",
        is_recurring=data.get("is_recurring", False),
        state=data.get("state"),
        city=data.get("city"),
        is_active=data.get("is_active", True),
        description=data.get("description"),
        created_by=data.get("created_by"),
    )
    return jsonify({"success": True, "holiday": holiday.to_dict()}), 201


@holiday_bp.route("/api/holidays")
def list_holidays():
    holiday_filter = HolidayFilter(
        year=_int_arg("year"),
        month=_int_arg("month"),
        type=request.args.get("type") or None,
        city=request.args.get("city") or None,
        state=_state_scope_arg(),
        is_active=parse_bool(request.args.get("is_active")),
        is_recurring=parse_bool(request.args.get("is_recurring")),
    )
    holidays = HolidayService().get_holidays(holiday_filter)
    return jsonify({
        "success": True,
        "holidays": [h.to_dict() for h in holidays],
        "count": len(holidays),
    })


@holiday_bp.route("/api/holidays/<int:holiday_id>")
def get_holiday(holiday_id):
    holiday = HolidayService().get_holiday_by_id(holiday_id)
    if not holiday:
        return jsonify({"error": "공휴일을 찾을 수 없습니다."}), 404
    return jsonify({"success": True, "holiday": holiday.to_dict()})


@holiday_bp.route("/api/holidays/<int:holiday_id>", methods=["PUT"])
def update_holiday(holiday_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "JSON body required"}), 400

    holiday = HolidayService().update(holiday_id, **data)
    return jsonify({"success": True, "holiday": holiday.to_dict()})


@holiday_bp.route("/api/holidays/<int:holiday_id>", methods=["DELETE"])
def delete_holiday(holiday_id):
    HolidayService().delete(holiday_id)
    return jsonify({"success": True})


@holiday_bp.route("/api/holidays/check")
def check_holiday():
    value = request.args.get("date")
    if not value:
        return jsonify({"error": "date 파라미터가 필요합니다."}), 400

    holiday = HolidayService().get_holiday_by_date(value, request.args.get("state"))
    return jsonify({
        "success": True,
        "date": value,
        "is_holiday": holiday is not None,
        "holiday": holiday.to_dict() if holiday else None,
    })


@holiday_bp.route("/api/holidays/period")
def holidays_by_period():
    start, end = request.args.get("start"), request.args.get("end")
    if not start or not end:
        return jsonify({"error": "start, end 파라미터가 필요합니다."}), 400

    occurrences = HolidayService().get_holidays_by_period(start, end, request.args.get("state"))
    return jsonify({
        "success": True,
        "holidays": [o.to_dict() for o in occurrences],
        "count": len(occurrences),
    })


@holiday_bp.route("/api/holidays/working-days")
def working_days():
    start, end = request.args.get("start"), request.args.get("end")
    if not start or not end:
        return jsonify({"error": "start, end 파라미터가 필요합니다."}), 400

    count = HolidayService().count_working_days(start, end, request.args.get("state"))
    return jsonify({"success": True, "start": start, "end": end, "working_days": count})


@holiday_bp.route("/api/holidays/import/<int:year>", methods=["POST"])
@limiter.limit("10 per minute")
def import_national_holidays(year):
    data = request.get_json(silent=True) or {}
    report = HolidayService().import_national_holidays(year, created_by=data.get("created_by"))
    return jsonify({"success": True, "report": report.to_dict()}), 201


@holiday_bp.route("/api/holidays/generate-recurring/<int:year>", methods=["POST"])
@limiter.limit("10 per minute")
def generate_recurring_holidays(year):
    data = request.get_json(silent=True) or {}
    report = HolidayService().generate_recurring_holidays(year, created_by=data.get("created_by"))
    return jsonify({"success": True, "report": report.to_dict()}), 201
