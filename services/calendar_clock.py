"""기준 시간대 고정 날짜 정규화.

'하루'의 경계는 항상 설정된 기준 시간대(REFERENCE_TIMEZONE) 기준으로 계산한다.
서버 로컬 시간대나 UTC 를 직접 쓰지 않도록 공휴일/근무시간 로직은
반드시 CalendarClock 을 주입받아 사용한다.
"""
import re
from datetime import date, datetime, time, timedelta

from dateutil import parser as date_parser
from dateutil import tz
from flask import current_app, has_app_context

from config import Config
from services.errors import InvalidDateError

DATE_ONLY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\S+$")


class CalendarClock:
    def __init__(self, timezone_name=None):
        self.timezone_name = timezone_name or Config.REFERENCE_TIMEZONE
        self.tz = tz.gettz(self.timezone_name)
        if self.tz is None:
            raise ValueError(f"알 수 없는 시간대: {self.timezone_name}")

    @classmethod
    def from_config(cls, config):
        return cls(config.get("REFERENCE_TIMEZONE", Config.REFERENCE_TIMEZONE))

    def __repr__(self):
        return f"<CalendarClock {self.timezone_name}>"

    # ── 변환 ──

    def to_local(self, value):
        """입력값을 기준 시간대의 시각(aware datetime)으로 변환한다.

        - 'YYYY-MM-DD' 문자열: 그 날짜의 기준 시간대 자정
        - ISO 8601 타임스탬프: 오프셋이 있으면 변환, 없으면 기준 시간대 벽시계 시각
        - datetime: aware 면 변환, naive 면 기준 시간대 벽시계 시각
        - date: 그 날짜의 자정
        """
        if isinstance(value, str):
            return self._parse_text(value.strip())
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=self.tz)
            return value.astimezone(self.tz)
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=self.tz)
        raise InvalidDateError(f"날짜로 해석할 수 없는 값: {value!r}")

    def _parse_text(self, text):
        match = DATE_ONLY_PATTERN.fullmatch(text)
        if match:
            # 범용 파서를 거치지 않고 벽시계 날짜로 직접 생성 (UTC 밀림 방지)
            year, month, day = map(int, match.groups())
            try:
                return datetime(year, month, day, tzinfo=self.tz)
            except ValueError as exc:
                raise InvalidDateError(f"존재하지 않는 날짜: {text}") from exc

        if not TIMESTAMP_PATTERN.fullmatch(text):
            raise InvalidDateError(f"날짜 형식이 올바르지 않습니다: {text!r}")
        try:
            parsed = date_parser.isoparse(text.replace(" ", "T", 1))
        except (ValueError, OverflowError) as exc:
            raise InvalidDateError(f"날짜 형식이 올바르지 않습니다: {text!r}") from exc
        return self.to_local(parsed)

    def normalize_to_local_midnight(self, value):
        """기준 시간대 자정(aware datetime)으로 정규화한다. 멱등."""
        local = self.to_local(value)
        return datetime(local.year, local.month, local.day, tzinfo=self.tz)

    def local_date(self, value):
        return self.to_local(value).date()

    def from_utc(self, value):
        """저장소의 naive UTC 시각 → 기준 시간대 시각."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz.UTC)
        return value.astimezone(self.tz)

    def to_utc(self, value):
        """기준 시간대 해석 후 저장소용 naive UTC 시각으로 변환."""
        return self.to_local(value).astimezone(tz.UTC).replace(tzinfo=None)

    # ── 날짜 계산 ──

    def day_bounds(self, value):
        """(그날 자정, 다음날 자정) 반열린 구간."""
        start = self.normalize_to_local_midnight(value)
        next_day = start.date() + timedelta(days=1)
        return start, datetime.combine(next_day, time.min, tzinfo=self.tz)

    def iter_days(self, start, end):
        current = self.local_date(start)
        last = self.local_date(end)
        while current <= last:
            yield current
            current += timedelta(days=1)


def get_clock():
    """현재 앱 설정 기준 CalendarClock (앱 컨텍스트 밖에서는 기본 설정)."""
    if has_app_context():
        return CalendarClock.from_config(current_app.config)
    return CalendarClock()
