"""출퇴근 기록 → 근무 구간/근무시간 계산.

시작 이벤트(ENTRY, LUNCH_END, BREAK_END)가 열린 구간을 만들고(덮어쓰기),
종료 이벤트(EXIT, LUNCH_START, BREAK_START)가 열린 구간을 닫는다.
짝이 없는 종료 이벤트와 하루 끝까지 열린 구간은 0시간으로 본다.
"""
import calendar as _cal
from collections import defaultdict
from datetime import date
from typing import NamedTuple

from models import TimeRecord, TimeRecordType
from services.calendar_clock import get_clock

OPENING_TYPES = {
    TimeRecordType.ENTRY.value,
    TimeRecordType.LUNCH_END.value,
    TimeRecordType.BREAK_END.value,
}
CLOSING_TYPES = {
    TimeRecordType.EXIT.value,
    TimeRecordType.LUNCH_START.value,
    TimeRecordType.BREAK_START.value,
}


class PunchEvent(NamedTuple):
    timestamp: object  # datetime (aware 또는 기준 시간대 naive)
    type: str
    is_valid: bool = True


def _type_value(event_type):
    return getattr(event_type, "value", event_type)


def pair_intervals(events, clock=None):
    """유효 이벤트를 시각순으로 정렬해 (시작, 종료) 근무 구간 목록을 만든다."""
    clock = clock or get_clock()
    valid = sorted(
        ((clock.to_local(e.timestamp), _type_value(e.type)) for e in events if e.is_valid),
        key=lambda item: item[0],
    )

    intervals = []
    open_at = None
    for timestamp, event_type in valid:
        if event_type in OPENING_TYPES:
            open_at = timestamp
        elif event_type in CLOSING_TYPES and open_at is not None:
            intervals.append((open_at, timestamp))
            open_at = None
    return intervals


def interval_minutes(intervals):
    return sum((end - start).total_seconds() / 60 for start, end in intervals)


def compute_worked_hours(events, clock=None):
    """하루치 이벤트의 총 근무시간(시간 단위, 0 이상)."""
    minutes = interval_minutes(pair_intervals(events, clock))
    return max(0.0, minutes / 60)


def _to_event(record, clock):
    return PunchEvent(clock.from_utc(record.timestamp), record.type, record.is_valid)


def _valid_records_between(employee_id, start, end, clock):
    return (
        TimeRecord.query.filter(
            TimeRecord.employee_id == employee_id,
            TimeRecord.is_valid.is_(True),
            TimeRecord.timestamp >= clock.to_utc(start),
            TimeRecord.timestamp < clock.to_utc(end),
        )
        .order_by(TimeRecord.timestamp, TimeRecord.id)
        .all()
    )


def load_day_events(employee_id, day, clock=None):
    """기준 시간대 하루 동안의 유효 기록."""
    clock = clock or get_clock()
    start, end = clock.day_bounds(day)
    records = _valid_records_between(employee_id, start, end, clock)
    return [_to_event(r, clock) for r in records]


def load_month_events(employee_id, year, month, clock=None):
    """한 달치 유효 기록을 기준 시간대 날짜별로 묶어 반환한다.

    Returns:
        dict: {date: [PunchEvent, ...]}
    """
    clock = clock or get_clock()
    first = date(year, month, 1)
    last = date(year, month, _cal.monthrange(year, month)[1])
    start, _ = clock.day_bounds(first)
    _, end = clock.day_bounds(last)

    grouped = defaultdict(list)
    for record in _valid_records_between(employee_id, start, end, clock):
        event = _to_event(record, clock)
        grouped[event.timestamp.date()].append(event)
    return dict(grouped)
