"""공휴일 달력 서비스 테스트 (등록/조회/주 범위/이동 공휴일/일괄 등록)"""
from datetime import date

import pytest

from models import Holiday, HolidayType, db
from services.errors import (
    DuplicateHolidayError,
    HolidaySeedError,
    InvalidDateError,
    InvalidHolidayDataError,
    InvalidRangeError,
    NotFoundError,
)
from services.holiday_service import (
    HolidayFilter,
    HolidayService,
    SeedStatus,
    StateScope,
    easter_sunday,
    national_holiday_definitions,
)


@pytest.fixture
def service(flask_app):
    return HolidayService()


# ── 부활절 / 이동 공휴일 ─────────────────────────────────

@pytest.mark.parametrize("year, expected", [
    (2024, date(2024, 3, 31)),
    (2025, date(2025, 4, 20)),
    (2026, date(2026, 4, 5)),
    (2019, date(2019, 4, 21)),
])
def test_easter_sunday(year, expected):
    assert easter_sunday(year) == expected


def test_national_definitions_2024(clock):
    defs = {d["name"]: d for d in national_holiday_definitions(2024, clock)}
    assert len(defs) == 12
    assert defs["Carnaval"]["holiday_date"] == date(2024, 2, 13)
    assert defs["Sexta-feira Santa"]["holiday_date"] == date(2024, 3, 29)
    assert defs["Corpus Christi"]["holiday_date"] == date(2024, 5, 30)
    assert defs["Carnaval"]["holiday_type"] == HolidayType.OPTIONAL
    assert defs["Sexta-feira Santa"]["holiday_type"] == HolidayType.NATIONAL
    # 이동 공휴일은 해마다 날짜가 바뀌므로 반복 아님
    assert not defs["Corpus Christi"]["is_recurring"]
    assert defs["Natal"]["is_recurring"]


# ── 등록 / 중복 ─────────────────────────────────────────

def test_create_normalizes_fields(service):
    holiday = service.create(
        "  Aniversário da Cidade ", "2024-03-19", holiday_type="municipal",
        state="go", city=" Anápolis ",
    )
    assert holiday.id is not None
    assert holiday.name == "Aniversário da Cidade"
    assert holiday.date == date(2024, 3, 19)
    assert holiday.type == "MUNICIPAL"
    assert holiday.state == "GO"
    assert holiday.city == "Anápolis"


def test_create_duplicate_date_name_rejected(service):
    service.create("Natal", "2024-12-25")
    with pytest.raises(DuplicateHolidayError) as excinfo:
        service.create("Natal", date(2024, 12, 25))
    assert excinfo.value.date == date(2024, 12, 25)
    assert Holiday.query.count() == 1


def test_same_name_other_date_allowed(service):
    service.create("Natal", "2024-12-25")
    service.create("Natal", "2025-12-25")
    assert Holiday.query.count() == 2


@pytest.mark.parametrize("kwargs", [
    {"name": "", "holiday_date": "2024-01-01"},
    {"name": "X", "holiday_date": "2024-01-01", "holiday_type": "FEDERAL"},
    {"name": "X", "holiday_date": "2024-01-01", "state": "DFX"},
])
def test_create_invalid_data(service, kwargs):
    with pytest.raises(InvalidHolidayDataError):
        service.create(**kwargs)


def test_create_invalid_date(service):
    with pytest.raises(InvalidDateError):
        service.create("X", "2024-02-30")


# ── 수정 / 삭제 ─────────────────────────────────────────

def test_update_fields(service):
    holiday = service.create("Feriado", "2024-07-09")
    updated = service.update(holiday.id, name="Revolução", state="sp", is_recurring=True)
    assert updated.name == "Revolução"
    assert updated.state == "SP"
    assert updated.is_recurring is True


def test_update_clash_raises_duplicate(service):
    service.create("Natal", "2024-12-25")
    other = service.create("Véspera", "2024-12-24")
    with pytest.raises(DuplicateHolidayError):
        service.update(other.id, name="Natal", date="2024-12-25")
    assert db.session.get(Holiday, other.id).name == "Véspera"


@pytest.mark.parametrize("bad_change", [
    {"type": "BOGUS"},
    {"state": "Distrito"},
    {"date": "2024-02-30"},
    {"is_active": "talvez"},
])
def test_rejected_update_leaves_row_untouched(service, bad_change):
    """검증 실패한 수정은 이후 다른 커밋에 섞여 저장되지 않는다"""
    natal = service.create("Natal", "2024-12-25")
    other = service.create("Véspera", "2024-12-24")

    with pytest.raises((InvalidHolidayDataError, InvalidDateError)):
        service.update(natal.id, name="Alterado", **bad_change)

    service.update(other.id, city="Brasília")
    db.session.expire_all()
    reloaded = db.session.get(Holiday, natal.id)
    assert reloaded.name == "Natal"
    assert reloaded.is_active is True
    assert db.session.get(Holiday, other.id).city == "Brasília"


@pytest.mark.parametrize("raw, expected", [
    ("false", False), ("False", False), ("0", False), (0, False),
    ("true", True), ("yes", True), (1, True), (True, True),
])
def test_flag_values_coerced(service, raw, expected):
    holiday = service.create("Feriado", "2024-07-09", is_recurring=raw)
    assert holiday.is_recurring is expected

    updated = service.update(holiday.id, is_active=raw)
    assert updated.is_active is expected


@pytest.mark.parametrize("raw", ["talvez", 2, None, [], "off"])
def test_invalid_flag_rejected(service, raw):
    with pytest.raises(InvalidHolidayDataError):
        service.create("Feriado", "2024-07-09", is_recurring=raw)
    assert Holiday.query.count() == 0


def test_update_unknown_field_rejected(service):
    holiday = service.create("Feriado", "2024-07-09")
    with pytest.raises(InvalidHolidayDataError):
        service.update(holiday.id, id=99)


def test_update_and_delete_missing(service):
    with pytest.raises(NotFoundError):
        service.update(999, name="X")
    with pytest.raises(NotFoundError):
        service.delete(999)
    assert service.get_holiday_by_id(999) is None


def test_delete(service):
    holiday = service.create("Feriado", "2024-07-09")
    service.delete(holiday.id)
    assert service.get_holiday_by_id(holiday.id) is None
    assert not service.is_holiday("2024-07-09")


# ── 날짜 판정 / 주 범위 ──────────────────────────────────

def test_import_then_is_holiday(service):
    service.import_national_holidays(2024)
    assert service.is_holiday("2024-12-25")
    assert service.is_holiday("2024-01-01")
    assert service.is_holiday("2024-03-29")          # 성금요일
    assert not service.is_holiday("2024-12-26")


def test_recurring_holiday_matches_any_year(service):
    service.create("Proclamação da República", "2020-11-15", is_recurring=True)
    assert service.is_holiday("2031-11-15")
    assert service.is_holiday("1999-11-15T10:00:00")
    assert not service.is_holiday("2031-11-16")


def test_movable_holiday_does_not_recur(service):
    service.import_national_holidays(2024)
    # 2025년 성금요일은 4/18, 2024년 날짜(3/29)는 공휴일 아님
    assert not service.is_holiday("2025-03-29")


def test_inactive_holiday_ignored(service):
    service.create("Desativado", "2024-08-15", is_active=False)
    assert not service.is_holiday("2024-08-15")


def test_exact_match_preferred_over_recurring(service):
    service.create("Recorrente", "2000-06-01", is_recurring=True)
    exact = service.create("Exato", "2024-06-01")
    assert service.get_holiday_by_date("2024-06-01").id == exact.id


def test_state_scoping(service):
    """주 지정 시 전국 + 해당 주, 미지정 시 전국만"""
    service.create("Dia do Evangélico", "2024-11-30", holiday_type="STATE",
                   is_recurring=True, state="DF")
    service.create("Natal", "2024-12-25", is_recurring=True)

    assert service.is_holiday("2025-11-30", "DF")
    assert service.is_holiday("2025-11-30", "df")
    assert not service.is_holiday("2025-11-30", "GO")
    assert not service.is_holiday("2025-11-30")
    assert service.is_holiday("2025-12-25", "GO")


def test_utc_instant_resolves_to_local_date(service):
    service.create("Natal", "2024-12-25")
    # UTC 12/26 01:00 = 상파울루 12/25 22:00
    assert service.is_holiday("2024-12-26T01:00:00Z")
    assert not service.is_holiday("2024-12-25T02:00:00Z")


# ── 목록 필터 ───────────────────────────────────────────

def test_get_holidays_filters(service):
    service.import_national_holidays(2024)
    service.create("Dia do Evangélico", "2024-11-30", holiday_type="STATE", state="DF")

    december = service.get_holidays(HolidayFilter(year=2024, month=12))
    assert [h.name for h in december] == ["Natal"]

    optional = service.get_holidays(HolidayFilter(year=2024, type="OPTIONAL"))
    assert len(optional) == 3

    assert len(service.get_holidays()) == 13
    assert len(service.get_holidays(HolidayFilter(state=StateScope.NATIONWIDE))) == 12
    assert len(service.get_holidays(HolidayFilter(state=StateScope.of("DF")))) == 13
    assert len(service.get_holidays(HolidayFilter(state=StateScope.of("GO")))) == 12
    assert len(service.get_holidays(HolidayFilter(is_recurring=True))) == 9


def test_get_holidays_month_without_year(service):
    service.create("Natal", "2024-12-25")
    service.create("Natal", "2030-12-25")
    service.create("Finados", "2024-11-02")
    assert len(service.get_holidays(HolidayFilter(month=12))) == 2


def test_get_holidays_invalid_month(service):
    with pytest.raises(InvalidDateError):
        service.get_holidays(HolidayFilter(year=2024, month=13))


# ── 기간 조회 / 영업일 ──────────────────────────────────

def test_period_projects_recurring_without_double_count(service):
    service.import_national_holidays(2024)

    same_year = service.get_holidays_by_period("2024-01-01", "2024-12-31")
    assert len(same_year) == 12
    assert not any(o.projected for o in same_year)

    next_year = service.get_holidays_by_period("2025-01-01", "2025-12-31")
    assert len(next_year) == 9
    assert all(o.projected for o in next_year)
    assert [o.date for o in next_year] == sorted(o.date for o in next_year)


def test_period_spanning_years(service):
    service.create("Natal", "2020-12-25", is_recurring=True)
    service.create("Confraternização Universal", "2020-01-01", is_recurring=True)
    occurrences = service.get_holidays_by_period("2024-12-20", "2025-01-05")
    assert [o.date for o in occurrences] == [date(2024, 12, 25), date(2025, 1, 1)]


def test_period_skips_feb_29_in_common_year(service):
    service.create("Dia Bissexto", "2024-02-29", is_recurring=True)
    assert service.get_holidays_by_period("2025-02-01", "2025-03-31") == []
    assert len(service.get_holidays_by_period("2028-02-01", "2028-03-31")) == 1


def test_period_reversed_range(service):
    with pytest.raises(InvalidRangeError):
        service.get_holidays_by_period("2024-12-31", "2024-01-01")


def test_count_working_days_january_2024(service):
    service.import_national_holidays(2024)
    assert service.count_working_days("2024-01-01", "2024-01-31") == 22


def test_count_working_days_with_state(service):
    service.create("Aniversário de Goiânia", "2024-10-24", holiday_type="MUNICIPAL",
                   state="GO", is_recurring=True)
    # 2024-10-24 목요일
    assert service.count_working_days("2024-10-21", "2024-10-25", "GO") == 4
    assert service.count_working_days("2024-10-21", "2024-10-25", "DF") == 5


# ── 일괄 등록 ───────────────────────────────────────────

def test_import_is_idempotent(service):
    first = service.import_national_holidays(2024)
    assert len(first.created) == 12

    second = service.import_national_holidays(2024)
    assert len(second.created) == 0
    assert len(second.already_existing) == 12
    assert Holiday.query.count() == 12


def test_import_invalid_year(service):
    with pytest.raises(InvalidDateError):
        service.import_national_holidays(1500)


def test_generate_recurring(service):
    service.import_national_holidays(2024)
    service.create("Dia do Evangélico", "2024-11-30", holiday_type="STATE",
                   is_recurring=True, state="DF")

    report = service.generate_recurring_holidays(2025)
    assert len(report.created) == 10
    generated = Holiday.query.filter_by(name="Dia do Evangélico", date=date(2025, 11, 30)).one()
    assert generated.state == "DF"
    assert generated.is_recurring is False

    again = service.generate_recurring_holidays(2025)
    assert len(again.created) == 0
    assert len(again.already_existing) == 10

    # 실제 행이 생긴 뒤에도 기간 조회는 날짜당 한 번
    occurrences = service.get_holidays_by_period("2025-01-01", "2025-12-31")
    assert len(occurrences) == 9
    assert not any(o.projected for o in occurrences)


def test_generate_recurring_skips_feb_29(service):
    service.create("Dia Bissexto", "2024-02-29", is_recurring=True)
    report = service.generate_recurring_holidays(2025)
    assert report.items == []


def test_seed_failure_aborts_with_report(service, monkeypatch):
    original_create = service.create
    calls = []

    def flaky_create(**kwargs):
        calls.append(kwargs["name"])
        if len(calls) == 3:
            raise RuntimeError("connection lost")
        return original_create(**kwargs)

    monkeypatch.setattr(service, "create", flaky_create)

    with pytest.raises(HolidaySeedError) as excinfo:
        service.import_national_holidays(2024)

    statuses = [item.status for item in excinfo.value.report.items]
    assert statuses == [SeedStatus.CREATED, SeedStatus.CREATED, SeedStatus.FAILED]
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert Holiday.query.count() == 2
