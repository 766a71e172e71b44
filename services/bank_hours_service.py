"""월별 연장근로(은행시간) 집계 서비스.

시급 = (기본급 + 위험수당 + 유해수당) / 220
50% 연장 = 원시 시간 × 1.5, 100% 연장 = 원시 시간 × 2.0 (집계 시 한 번만 환산)
금액/시간 반올림은 최종 출력 시점에만 적용한다.
"""
import calendar as _cal
import logging
import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Optional

from flask import current_app, has_app_context

from config import Config
from models import Employee, db
from services.calendar_clock import get_clock
from services.errors import InvalidDateError, NotFoundError
from services.holiday_service import HolidayService, validate_year
from services.overtime_policy import OvertimePolicy
from services.time_record_service import interval_minutes, load_month_events, pair_intervals
from services.working_days import day_of_week

logger = logging.getLogger(__name__)


def _fold(text):
    decomposed = unicodedata.normalize("NFKD", str(text))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip().upper()


def resolve_state(work_hub, hub_states=None):
    """근무 거점명 → 주(UF) 코드. 매핑이 없으면 None (전국 공휴일만 적용)."""
    if not work_hub or not str(work_hub).strip():
        return None
    hub_states = Config.WORK_HUB_STATES if hub_states is None else hub_states
    folded = _fold(work_hub)
    for hub, state in hub_states.items():
        if _fold(hub) in folded:
            return state
    return None


def hourly_rate(base_salary, danger_pay, unhealthy_pay, monthly_hours=Config.MONTHLY_STANDARD_HOURS):
    total = (base_salary or 0) + (danger_pay or 0) + (unhealthy_pay or 0)
    return total / monthly_hours


@dataclass
class MonthlyOvertimeSummary:
    employee_id: int
    year: int
    month: int
    state: Optional[str]
    worked_days: int
    hourly_rate: float
    he50_hours: float
    he50_value: float
    he100_hours: float
    he100_value: float

    def to_dict(self):
        return {
            "employee_id": self.employee_id,
            "month": f"{self.year:04d}-{self.month:02d}",
            "state": self.state,
            "worked_days": self.worked_days,
            "hourly_rate": self.hourly_rate,
            "he50_hours": self.he50_hours,
            "he50_value": self.he50_value,
            "he100_hours": self.he100_hours,
            "he100_value": self.he100_value,
        }


@dataclass
class DayOvertimeDetail:
    date: date
    day_of_week: int
    total_hours: float
    overtime50_raw: float
    overtime100_raw: float
    he50_hours: float
    he100_hours: float
    is_weekend: bool
    is_holiday: bool

    def to_dict(self):
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "day_of_week": self.day_of_week,
            "total_hours": self.total_hours,
            "overtime50_raw": self.overtime50_raw,
            "overtime100_raw": self.overtime100_raw,
            "he50_hours": self.he50_hours,
            "he100_hours": self.he100_hours,
            "is_weekend": self.is_weekend,
            "is_holiday": self.is_holiday,
        }


class BankHoursService:
    def __init__(self, clock=None, policy=None, holiday_service=None):
        config = current_app.config if has_app_context() else {}
        self.clock = clock or get_clock()
        self.policy = policy or OvertimePolicy.from_config(config)
        self.holidays = holiday_service or HolidayService(self.clock)
        self.hub_states = config.get("WORK_HUB_STATES", Config.WORK_HUB_STATES)
        self.monthly_hours = config.get("MONTHLY_STANDARD_HOURS", Config.MONTHLY_STANDARD_HOURS)

    def _get_employee(self, employee_id):
        employee = db.session.get(Employee, employee_id)
        if not employee:
            raise NotFoundError(f"직원을 찾을 수 없습니다: id={employee_id}")
        return employee

    def classify_month(self, employee, year, month):
        """(주 코드, 근무일별 분류 목록). 근무시간 0인 날은 제외."""
        validate_year(year)
        if not isinstance(month, int) or not 1 <= month <= 12:
            raise InvalidDateError(f"잘못된 연/월: {year}-{month}")

        state = resolve_state(employee.work_hub, self.hub_states)
        first = date(year, month, 1)
        last = date(year, month, _cal.monthrange(year, month)[1])

        # 기간 조회의 날짜 집합은 날짜별 is_holiday(date, state) 결과와 같다
        holiday_dates = {
            o.date for o in self.holidays.get_holidays_by_period(first, last, state)
        }
        events_by_day = load_month_events(employee.id, year, month, self.clock)

        days = []
        for day in self.clock.iter_days(first, last):
            intervals = pair_intervals(events_by_day.get(day, []), self.clock)
            worked_hours = max(0.0, interval_minutes(intervals) / 60)
            if worked_hours <= 0:
                continue
            days.append(self.policy.classify_day(
                day, day_of_week(day), day in holiday_dates, worked_hours, intervals,
            ))
        return state, days

    def calculate_for_month(self, employee_id, year, month,
                            base_salary=None, danger_pay=None, unhealthy_pay=None):
        """월 연장근로 시간/금액. 보수 인자를 생략하면 직원 정보의 값을 쓴다."""
        employee = self._get_employee(employee_id)
        rate = hourly_rate(
            employee.base_salary if base_salary is None else base_salary,
            employee.danger_pay if danger_pay is None else danger_pay,
            employee.unhealthy_pay if unhealthy_pay is None else unhealthy_pay,
            self.monthly_hours,
        )

        state, days = self.classify_month(employee, year, month)
        total_ot50 = sum(d.overtime50_hours for d in days)
        total_ot100 = sum(d.overtime100_hours for d in days)

        he50_hours = total_ot50 * self.policy.overtime50_factor
        he100_hours = total_ot100 * self.policy.overtime100_factor

        logger.info("연장근로 집계: employee=%s, %04d-%02d, state=%s, 근무일 %d, HE50 %.2f, HE100 %.2f",
                    employee_id, year, month, state, len(days), he50_hours, he100_hours)

        return MonthlyOvertimeSummary(
            employee_id=employee_id,
            year=year,
            month=month,
            state=state,
            worked_days=len(days),
            hourly_rate=round(rate, 2),
            he50_hours=round(he50_hours, 2),
            he50_value=round(he50_hours * rate, 2),
            he100_hours=round(he100_hours, 2),
            he100_value=round(he100_hours * rate, 2),
        )

    def calculate_detailed(self, employee_id, year, month):
        """일자별 연장근로 내역 (반올림 없음)."""
        employee = self._get_employee(employee_id)
        _state, days = self.classify_month(employee, year, month)
        return [
            DayOvertimeDetail(
                date=d.date,
                day_of_week=d.day_of_week,
                total_hours=d.total_worked_hours,
                overtime50_raw=d.overtime50_hours,
                overtime100_raw=d.overtime100_hours,
                he50_hours=d.overtime50_hours * self.policy.overtime50_factor,
                he100_hours=d.overtime100_hours * self.policy.overtime100_factor,
                is_weekend=d.is_weekend,
                is_holiday=d.is_holiday,
            )
            for d in days
        ]
