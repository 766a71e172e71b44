"""공휴일/근무시간 엔진 도메인 예외.

라우트 계층은 이 예외 종류만 보고 HTTP 상태 코드를 결정한다
(메시지 문자열 매칭 금지).
"""


class HolidayEngineError(Exception):
    """엔진 예외 공통 부모."""


class InvalidDateError(HolidayEngineError, ValueError):
    """날짜로 해석할 수 없는 입력."""


class InvalidRangeError(HolidayEngineError, ValueError):
    """종료일이 시작일보다 앞선 기간 조회."""


class InvalidHolidayDataError(HolidayEngineError, ValueError):
    """공휴일 이름/유형/주(state) 코드가 올바르지 않음."""


class DuplicateHolidayError(HolidayEngineError):
    """(date, name) 조합이 이미 존재함."""

    def __init__(self, name, holiday_date):
        self.name = name
        self.date = holiday_date
        super().__init__(f"이미 같은 날짜에 같은 이름의 공휴일이 있습니다: {name} ({holiday_date})")


class NotFoundError(HolidayEngineError, LookupError):
    """존재하지 않는 공휴일/직원 ID."""


class HolidaySeedError(HolidayEngineError):
    """일괄 등록 중 중복 외 오류로 배치가 중단됨.

    report 에는 중단 시점까지의 항목별 결과가 담긴다.
    """

    def __init__(self, message, report):
        self.report = report
        super().__init__(message)
