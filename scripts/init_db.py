"""Create any missing tables (employees, holidays, time_records).

운영 DB 는 `flask db upgrade` 로 관리하고, 로컬/SQLite 초기화에만 사용한다.

사용법:
  python scripts/init_db.py
  python scripts/init_db.py --seed 2026     # 생성 후 해당 연도 전국 공휴일 등록
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect  # noqa: E402

from app import app  # noqa: E402
from models import db  # noqa: E402
from services.holiday_service import HolidayService  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="테이블 생성 (db.create_all)")
    parser.add_argument("--seed", type=int, nargs="*", default=[], help="등록할 공휴일 연도")
    args = parser.parse_args()

    with app.app_context():
        before = set(inspect(db.engine).get_table_names())
        print(f"DB: {db.engine.url.render_as_string(hide_password=True)}")
        print(f"Existing tables: {sorted(before)}")

        db.create_all()

        after = set(inspect(db.engine).get_table_names())
        print(f"Created tables: {sorted(after - before) or '-'}")

        for year in args.seed:
            report = HolidayService().import_national_holidays(year)
            print(f"{year}: 신규 {len(report.created)}건, 기존 {len(report.already_existing)}건")


if __name__ == "__main__":
    main()
