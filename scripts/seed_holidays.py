"""
연도별 브라질 전국 공휴일 등록 스크립트

사용법:
  # 2026년 전국 공휴일 12건 등록 (이미 있는 항목은 건너뜀)
  python scripts/seed_holidays.py 2026

  # 여러 해 + 반복 공휴일(주/시 공휴일 포함)의 연도별 행 생성
  python scripts/seed_holidays.py 2026 2027 --generate-recurring

  # 등록 없이 계산 결과만 확인
  python scripts/seed_holidays.py 2026 --dry-run
"""
import argparse
import io
import os
import sys

# Windows 콘솔 출력 보정
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")

# Flask 앱 컨텍스트 설정
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import app  # noqa: E402
from services.errors import HolidaySeedError  # noqa: E402
from services.holiday_service import (  # noqa: E402
    HolidayService,
    national_holiday_definitions,
)


def print_report(title, report):
    print(f"\n[{title}] {report.year}년: 신규 {len(report.created)}건, 기존 {len(report.already_existing)}건")
    for item in report.items:
        print(f"  {item.date:%Y-%m-%d}  {item.status.value:<15} {item.name}")


def print_definitions(year, service):
    print(f"\n[dry-run] {year}년 전국 공휴일")
    for definition in national_holiday_definitions(year, service.clock):
        print(f"  {definition['holiday_date']:%Y-%m-%d}  "
              f"{definition['holiday_type'].value:<9} {definition['name']}")


def main():
    parser = argparse.ArgumentParser(description="브라질 공휴일 일괄 등록")
    parser.add_argument("years", nargs="+", type=int, help="등록할 연도 (예: 2026)")
    parser.add_argument("--generate-recurring", action="store_true",
                        help="반복 공휴일을 해당 연도의 비반복 행으로 전개")
    parser.add_argument("--created-by", default=None, help="등록자 식별자")
    parser.add_argument("--dry-run", action="store_true", help="DB에 쓰지 않고 날짜만 출력")
    args = parser.parse_args()

    with app.app_context():
        service = HolidayService()
        for year in args.years:
            if args.dry_run:
                print_definitions(year, service)
                continue
            try:
                print_report("전국 공휴일",
                             service.import_national_holidays(year, created_by=args.created_by))
                if args.generate_recurring:
                    print_report("반복 공휴일 전개",
                                 service.generate_recurring_holidays(year, created_by=args.created_by))
            except HolidaySeedError as exc:
                print_report("중단", exc.report)
                print(f"\n오류: {exc}", file=sys.stderr)
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
