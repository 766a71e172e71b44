"""연장근로 분류 정책 (50% 가산 / 100% 가산).

분류 함수는 가산 전 원시 시간만 다룬다. 1.5배/2.0배 환산은
집계 단계(bank_hours_service)에서 한 번만 적용한다.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict

from config import Config
from services.working_days import WEEKEND_DAYS

SUNDAY = 0


@dataclass
class DayClassification:
    date: date
    day_of_week: int
    is_weekend: bool
    is_holiday: bool
    total_worked_hours: float
    regular_hours: float
    overtime50_hours: float
    overtime100_hours: float

    def to_dict(self):
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "day_of_week": self.day_of_week,
            "is_weekend": self.is_weekend,
            "is_holiday": self.is_holiday,
            "total_worked_hours": self.total_worked_hours,
            "regular_hours": self.regular_hours,
            "overtime50_hours": self.overtime50_hours,
            "overtime100_hours": self.overtime100_hours,
        }


@dataclass
class OvertimePolicy:
    # 요일(1=월 ... 6=토)별 기본 근무시간. 일요일은 전부 100% 가산이라 기준 없음
    expected_hours: Dict[int, float] = field(
        default_factory=lambda: dict(Config.EXPECTED_DAILY_HOURS)
    )
    late_night_start_hour: int = Config.LATE_NIGHT_START_HOUR
    overtime50_factor: float = Config.OVERTIME_50_FACTOR
    overtime100_factor: float = Config.OVERTIME_100_FACTOR

    @classmethod
    def from_config(cls, config):
        return cls(
            expected_hours={
                int(k): float(v)
                for k, v in config.get("EXPECTED_DAILY_HOURS", Config.EXPECTED_DAILY_HOURS).items()
            },
            late_night_start_hour=config.get("LATE_NIGHT_START_HOUR", Config.LATE_NIGHT_START_HOUR),
            overtime50_factor=config.get("OVERTIME_50_FACTOR", Config.OVERTIME_50_FACTOR),
            overtime100_factor=config.get("OVERTIME_100_FACTOR", Config.OVERTIME_100_FACTOR),
        )

    def compute_overtime50(self, worked_hours, day_of_week, is_holiday):
        if day_of_week == SUNDAY or is_holiday:
            return 0.0
        expected = self.expected_hours.get(day_of_week, 0.0)
        return max(0.0, worked_hours - expected)

    def compute_overtime100(self, worked_hours, day_of_week, is_holiday, intervals):
        if day_of_week == SUNDAY or is_holiday:
            return worked_hours
        return self.late_night_hours(intervals)

    def late_night_hours(self, intervals):
        """각 근무 구간 중 22시 이후 부분의 합 (시간 단위)."""
        minutes = 0.0
        for start, end in intervals:
            boundary = start.replace(
                hour=self.late_night_start_hour, minute=0, second=0, microsecond=0
            )
            if end <= boundary:
                continue
            minutes += (end - max(start, boundary)).total_seconds() / 60
        return minutes / 60

    def classify_day(self, day, day_of_week, is_holiday, worked_hours, intervals):
        ot50 = self.compute_overtime50(worked_hours, day_of_week, is_holiday)
        ot100 = self.compute_overtime100(worked_hours, day_of_week, is_holiday, intervals)
        return DayClassification(
            date=day,
            day_of_week=day_of_week,
            is_weekend=day_of_week in WEEKEND_DAYS,
            is_holiday=is_holiday,
            total_worked_hours=worked_hours,
            regular_hours=max(0.0, worked_hours - ot50 - ot100),
            overtime50_hours=ot50,
            overtime100_hours=ot100,
        )
