"""영업일 계산: 미리 해석된 공휴일 집합만 사용하는 순수 함수."""
from datetime import timedelta

from services.errors import InvalidRangeError

WEEKEND_DAYS = {0, 6}  # 0=일요일, 6=토요일


def day_of_week(value):
    """0=일요일 ... 6=토요일"""
    return value.isoweekday() % 7


def is_weekend(value):
    return day_of_week(value) in WEEKEND_DAYS


def count_working_days(start, end, holiday_dates):
    """start~end (양끝 포함) 중 주말도 공휴일도 아닌 날의 수.

    Args:
        start, end: datetime.date
        holiday_dates: 공휴일 날짜(datetime.date) 모음
    """
    if end < start:
        raise InvalidRangeError(f"종료일({end})이 시작일({start})보다 앞섭니다.")

    holidays = set(holiday_dates)
    count = 0
    current = start
    while current <= end:
        if not is_weekend(current) and current not in holidays:
            count += 1
        current += timedelta(days=1)
    return count
