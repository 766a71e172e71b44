"""공휴일 달력 서비스.

- 고정일/주(state) 한정/반복 공휴일 조회
- 부활절 기반 이동 공휴일 계산 (Meeus/Jones/Butcher)
- 연도별 전국 공휴일 일괄 등록, 반복 공휴일의 연도별 전개

주(state) 범위 규칙: 주를 지정하면 전국(state=null) + 해당 주 공휴일,
지정하지 않으면 전국 공휴일만 매칭한다.
"""
import calendar as _cal
import enum
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import extract, or_
from sqlalchemy.exc import IntegrityError

from models import Holiday, HolidayType, db
from services import working_days
from services.calendar_clock import get_clock
from services.errors import (
    DuplicateHolidayError,
    HolidaySeedError,
    InvalidDateError,
    InvalidHolidayDataError,
    InvalidRangeError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

MIN_GREGORIAN_YEAR = 1583
UPDATABLE_FIELDS = (
    "name", "date", "type", "is_recurring", "state", "city", "description", "is_active",
)


def normalize_state(value):
    """'df' → 'DF', 빈 값 → None. 두 글자 알파벳이 아니면 오류."""
    if value is None:
        return None
    code = str(value).strip().upper()
    if not code:
        return None
    if len(code) != 2 or not code.isalpha():
        raise InvalidHolidayDataError(f"주(state) 코드는 두 글자여야 합니다: {value!r}")
    return code


def _coerce_type(value):
    if isinstance(value, HolidayType):
        return value
    try:
        return HolidayType(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidHolidayDataError(f"알 수 없는 공휴일 유형: {value!r}") from exc


TRUE_FLAGS = ("true", "1", "yes")
FALSE_FLAGS = ("false", "0", "no")


def coerce_flag(value, field_name):
    """JSON/폼 값 → bool. 'false' 같은 문자열도 거짓으로 해석, 그 외 값은 오류."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_FLAGS:
            return True
        if lowered in FALSE_FLAGS:
            return False
    raise InvalidHolidayDataError(f"{field_name} 값은 true/false 여야 합니다: {value!r}")


def validate_year(year):
    if not isinstance(year, int) or not MIN_GREGORIAN_YEAR <= year <= 9999:
        raise InvalidDateError(f"지원하지 않는 연도: {year!r}")
    return year


@dataclass(frozen=True)
class StateScope:
    """공휴일 조회의 주(state) 범위.

    - any: 범위 필터 없음 (모든 주 + 전국)
    - nationwide: 전국 공휴일만
    - state: 전국 + 지정 주
    """

    mode: str = "any"
    code: Optional[str] = None

    @classmethod
    def of(cls, state):
        """주 코드가 있으면 해당 주 범위, 없으면 전국 범위."""
        code = normalize_state(state)
        if code is None:
            return cls("nationwide")
        return cls("state", code)

    def apply(self, query):
        if self.mode == "nationwide":
            return query.filter(Holiday.state.is_(None))
        if self.mode == "state":
            return query.filter(or_(Holiday.state.is_(None), Holiday.state == self.code))
        return query


StateScope.ANY = StateScope("any")
StateScope.NATIONWIDE = StateScope("nationwide")


@dataclass
class HolidayFilter:
    year: Optional[int] = None
    month: Optional[int] = None
    type: Optional[HolidayType] = None
    city: Optional[str] = None
    state: StateScope = StateScope.ANY
    is_active: Optional[bool] = None
    is_recurring: Optional[bool] = None


@dataclass
class HolidayOccurrence:
    """기간 조회 결과 한 건. projected=True 면 반복 공휴일을 해당 연도로 전개한 것."""

    date: date
    name: str
    type: str
    state: Optional[str]
    city: Optional[str]
    description: Optional[str]
    holiday_id: int
    is_recurring: bool
    projected: bool = False

    @classmethod
    def from_holiday(cls, holiday, on=None):
        return cls(
            date=on or holiday.date,
            name=holiday.name,
            type=holiday.type,
            state=holiday.state,
            city=holiday.city,
            description=holiday.description,
            holiday_id=holiday.id,
            is_recurring=holiday.is_recurring,
            projected=on is not None,
        )

    def to_dict(self):
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "name": self.name,
            "type": self.type,
            "state": self.state,
            "city": self.city,
            "description": self.description or "",
            "holiday_id": self.holiday_id,
            "is_recurring": self.is_recurring,
            "projected": self.projected,
        }


class SeedStatus(str, enum.Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class SeedItem:
    name: str
    date: date
    status: SeedStatus
    holiday_id: Optional[int] = None
    reason: Optional[str] = None

    def to_dict(self):
        return {
            "name": self.name,
            "date": self.date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "holiday_id": self.holiday_id,
            "reason": self.reason,
        }


@dataclass
class SeedReport:
    year: int
    items: List[SeedItem] = field(default_factory=list)

    @property
    def created(self):
        return [i for i in self.items if i.status == SeedStatus.CREATED]

    @property
    def already_existing(self):
        return [i for i in self.items if i.status == SeedStatus.ALREADY_EXISTS]

    def to_dict(self):
        return {
            "year": self.year,
            "created": len(self.created),
            "already_exists": len(self.already_existing),
            "items": [i.to_dict() for i in self.items],
        }


# ────────────────────────────────────────────
# 부활절 / 이동 공휴일
# ────────────────────────────────────────────

def easter_sunday(year):
    """그레고리력 부활절 (Meeus/Jones/Butcher)."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)


def national_holiday_definitions(year, clock=None):
    """해당 연도 브라질 전국 공휴일 12건 (고정 9 + 부활절 기준 3)."""
    clock = clock or get_clock()
    # 날짜 오프셋은 기준 시간대 자정으로 정규화한 뒤 벽시계 일 단위로 적용
    easter = clock.normalize_to_local_midnight(easter_sunday(year)).date()

    def fixed(name, month, day, description, holiday_type=HolidayType.NATIONAL):
        return {
            "name": name,
            "holiday_date": date(year, month, day),
            "holiday_type": holiday_type,
            "is_recurring": True,
            "description": description,
        }

    def movable(name, offset_days, description, holiday_type):
        return {
            "name": name,
            "holiday_date": easter + timedelta(days=offset_days),
            "holiday_type": holiday_type,
            "is_recurring": False,
            "description": description,
        }

    return [
        fixed("Confraternização Universal", 1, 1, "Dia 1º de Janeiro"),
        movable("Carnaval", -47, "Data variável (47 dias antes da Páscoa)", HolidayType.OPTIONAL),
        movable("Sexta-feira Santa", -2, "Data variável (2 dias antes da Páscoa)", HolidayType.NATIONAL),
        fixed("Tiradentes", 4, 21, "Dia 21 de Abril"),
        fixed("Dia do Trabalho", 5, 1, "Dia 1º de Maio"),
        movable("Corpus Christi", 60, "Data variável (60 dias após a Páscoa)", HolidayType.OPTIONAL),
        fixed("Independência do Brasil", 9, 7, "Dia 7 de Setembro"),
        fixed("Nossa Senhora Aparecida", 10, 12, "Dia 12 de Outubro"),
        fixed("Finados", 11, 2, "Dia 2 de Novembro"),
        fixed("Proclamação da República", 11, 15, "Dia 15 de Novembro"),
        fixed(
            "Dia Nacional de Zumbi e da Consciência Negra", 11, 20,
            "Dia 20 de Novembro (Ponto facultativo em alguns estados)",
            HolidayType.OPTIONAL,
        ),
        fixed("Natal", 12, 25, "Dia 25 de Dezembro"),
    ]


# ────────────────────────────────────────────
# 서비스
# ────────────────────────────────────────────

class HolidayService:
    def __init__(self, clock=None):
        self.clock = clock or get_clock()

    # ── 등록/수정/삭제 ──

    def create(self, name, holiday_date, holiday_type=HolidayType.NATIONAL,
               is_recurring=False, state=None, city=None, is_active=True,
               description=None, created_by=None):
        """공휴일을 등록한다. (date, name) 중복이면 DuplicateHolidayError."""
        name = (name or "").strip()
        if not name:
            raise InvalidHolidayDataError("공휴일 이름을 입력해주세요.")
        holiday_type = _coerce_type(holiday_type)
        normalized = self.clock.local_date(holiday_date)
        state = normalize_state(state)

        if Holiday.query.filter_by(date=normalized, name=name).first():
            raise DuplicateHolidayError(name, normalized)

        holiday = Holiday(
            name=name,
            date=normalized,
            type=holiday_type.value,
            is_recurring=coerce_flag(is_recurring, "is_recurring"),
            state=state,
            city=(city or "").strip() or None,
            description=description,
            is_active=coerce_flag(is_active, "is_active"),
            created_by=created_by,
        )
        db.session.add(holiday)
        try:
            db.session.commit()
        except IntegrityError as exc:
            # 동시 등록 경쟁: 조회 후 삽입 사이에 같은 행이 들어온 경우
            db.session.rollback()
            raise DuplicateHolidayError(name, normalized) from exc

        logger.info("공휴일 등록: id=%s, %s (%s), state=%s, recurring=%s",
                    holiday.id, name, normalized, state, holiday.is_recurring)
        return holiday

    def update(self, holiday_id, **changes):
        holiday = db.session.get(Holiday, holiday_id)
        if not holiday:
            raise NotFoundError(f"공휴일을 찾을 수 없습니다: id={holiday_id}")

        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise InvalidHolidayDataError(f"수정할 수 없는 항목: {', '.join(sorted(unknown))}")

        # 모든 값을 먼저 검증/변환한다. 하나라도 실패하면 행은 그대로
        values = {}
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise InvalidHolidayDataError("공휴일 이름은 비어 있을 수 없습니다.")
            values["name"] = name
        if "date" in changes:
            values["date"] = self.clock.local_date(changes["date"])
        if "type" in changes:
            values["type"] = _coerce_type(changes["type"]).value
        if "is_recurring" in changes:
            values["is_recurring"] = coerce_flag(changes["is_recurring"], "is_recurring")
        if "state" in changes:
            values["state"] = normalize_state(changes["state"])
        if "city" in changes:
            values["city"] = (changes["city"] or "").strip() or None
        if "description" in changes:
            values["description"] = changes["description"]
        if "is_active" in changes:
            values["is_active"] = coerce_flag(changes["is_active"], "is_active")

        name = values.get("name", holiday.name)
        holiday_date = values.get("date", holiday.date)
        clash = Holiday.query.filter(
            Holiday.date == holiday_date,
            Holiday.name == name,
            Holiday.id != holiday.id,
        ).first()
        if clash:
            raise DuplicateHolidayError(name, holiday_date)

        for field_name, value in values.items():
            setattr(holiday, field_name, value)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise DuplicateHolidayError(name, holiday_date) from exc

        logger.info("공휴일 수정: id=%s, fields=%s", holiday_id, sorted(changes))
        return holiday

    def delete(self, holiday_id):
        holiday = db.session.get(Holiday, holiday_id)
        if not holiday:
            raise NotFoundError(f"공휴일을 찾을 수 없습니다: id={holiday_id}")
        name, holiday_date = holiday.name, holiday.date
        db.session.delete(holiday)
        db.session.commit()
        logger.info("공휴일 삭제: id=%s, %s (%s)", holiday_id, name, holiday_date)

    # ── 조회 ──

    def get_holiday_by_id(self, holiday_id):
        return db.session.get(Holiday, holiday_id)

    def get_holidays(self, holiday_filter=None):
        f = holiday_filter or HolidayFilter()
        query = Holiday.query

        if f.month is not None and not 1 <= f.month <= 12:
            raise InvalidDateError(f"월은 1~12 사이여야 합니다: {f.month}")
        if f.year is not None:
            validate_year(f.year)
            if f.month:
                start = date(f.year, f.month, 1)
                end = date(f.year, f.month, _cal.monthrange(f.year, f.month)[1])
            else:
                start, end = date(f.year, 1, 1), date(f.year, 12, 31)
            query = query.filter(Holiday.date.between(start, end))
        elif f.month:
            query = query.filter(extract("month", Holiday.date) == f.month)

        if f.type:
            query = query.filter_by(type=_coerce_type(f.type).value)
        if f.city:
            query = query.filter_by(city=f.city)
        if f.is_active is not None:
            query = query.filter_by(is_active=f.is_active)
        if f.is_recurring is not None:
            query = query.filter_by(is_recurring=f.is_recurring)
        query = f.state.apply(query)

        return query.order_by(Holiday.date, Holiday.id).all()

    def get_holiday_by_date(self, value, state=None):
        """해당 날짜의 공휴일. 정확한 날짜 일치가 반복 공휴일보다 우선."""
        day = self.clock.local_date(value)
        scope = StateScope.of(state)

        exact = (
            scope.apply(Holiday.query.filter_by(is_active=True, date=day))
            .order_by(Holiday.id)
            .first()
        )
        if exact:
            return exact

        return (
            scope.apply(Holiday.query.filter_by(is_active=True, is_recurring=True))
            .filter(
                extract("month", Holiday.date) == day.month,
                extract("day", Holiday.date) == day.day,
            )
            .order_by(Holiday.id)
            .first()
        )

    def is_holiday(self, value, state=None):
        return self.get_holiday_by_date(value, state) is not None

    def get_holidays_by_period(self, start, end, state=None):
        start_day = self.clock.local_date(start)
        end_day = self.clock.local_date(end)
        if end_day < start_day:
            raise InvalidRangeError(f"종료일({end_day})이 시작일({start_day})보다 앞섭니다.")
        scope = StateScope.of(state)

        exact_rows = (
            scope.apply(Holiday.query.filter_by(is_active=True))
            .filter(Holiday.date.between(start_day, end_day))
            .order_by(Holiday.date, Holiday.id)
            .all()
        )
        recurring_rows = (
            scope.apply(Holiday.query.filter_by(is_active=True, is_recurring=True))
            .order_by(Holiday.id)
            .all()
        )

        projections = set()
        for holiday in recurring_rows:
            for year in range(start_day.year, end_day.year + 1):
                try:
                    projected = holiday.date.replace(year=year)
                except ValueError:
                    continue  # 2/29 반복 공휴일은 평년에 전개하지 않음
                if start_day <= projected <= end_day:
                    projections.add((projected, holiday.id))

        # 같은 날짜에 실제 행이 있으면 전개분은 제외 (이중 집계 방지)
        covered = {h.date for h in exact_rows}
        by_id = {h.id: h for h in recurring_rows}
        occurrences = [HolidayOccurrence.from_holiday(h) for h in exact_rows]
        occurrences.extend(
            HolidayOccurrence.from_holiday(by_id[holiday_id], on=day)
            for day, holiday_id in projections
            if day not in covered
        )
        occurrences.sort(key=lambda o: (o.date, o.holiday_id))
        return occurrences

    def count_working_days(self, start, end, state=None):
        occurrences = self.get_holidays_by_period(start, end, state)
        return working_days.count_working_days(
            self.clock.local_date(start),
            self.clock.local_date(end),
            {o.date for o in occurrences},
        )

    # ── 일괄 등록 ──

    def import_national_holidays(self, year, created_by=None):
        """해당 연도 전국 공휴일 12건 등록. 이미 있는 항목은 건너뛴다."""
        validate_year(year)
        definitions = national_holiday_definitions(year, self.clock)
        return self._seed(year, definitions, created_by)

    def generate_recurring_holidays(self, year, created_by=None):
        """활성 반복 공휴일마다 해당 연도의 비반복 행을 만든다."""
        validate_year(year)
        sources = (
            Holiday.query.filter_by(is_recurring=True, is_active=True)
            .order_by(Holiday.date, Holiday.id)
            .all()
        )

        definitions = []
        for source in sources:
            try:
                target = source.date.replace(year=year)
            except ValueError:
                logger.info("반복 공휴일 전개 건너뜀 (평년 2/29): %s", source.name)
                continue
            definitions.append({
                "name": source.name,
                "holiday_date": target,
                "holiday_type": source.type,
                "is_recurring": False,
                "state": source.state,
                "city": source.city,
                "description": source.description,
            })
        return self._seed(year, definitions, created_by)

    def _seed(self, year, definitions, created_by):
        report = SeedReport(year=year)
        for definition in definitions:
            try:
                holiday = self.create(created_by=created_by, **definition)
            except DuplicateHolidayError:
                report.items.append(SeedItem(
                    definition["name"], definition["holiday_date"], SeedStatus.ALREADY_EXISTS,
                ))
                continue
            except Exception as exc:
                db.session.rollback()
                report.items.append(SeedItem(
                    definition["name"], definition["holiday_date"], SeedStatus.FAILED, reason=str(exc),
                ))
                logger.error("공휴일 일괄 등록 중단 (%s): %s - %s", year, definition["name"], exc)
                raise HolidaySeedError(
                    f"{year}년 공휴일 등록 중 오류로 중단되었습니다: {definition['name']}",
                    report,
                ) from exc
            report.items.append(SeedItem(
                holiday.name, holiday.date, SeedStatus.CREATED, holiday_id=holiday.id,
            ))

        logger.info("공휴일 일괄 등록 완료 (%s): 신규 %d건, 기존 %d건",
                    year, len(report.created), len(report.already_existing))
        return report
