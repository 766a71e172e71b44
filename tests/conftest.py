import os
from pathlib import Path

import pytest

# Configure a dedicated SQLite DB for tests before importing the Flask app.
TEST_DB_PATH = Path(__file__).resolve().parent / "pytest_workcalendar.db"
os.environ["FLASK_ENV"] = "development"
os.environ["SECRET_KEY"] = "test_secret_key"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH.as_posix()}"
os.environ["RATELIMIT_ENABLED"] = "false"
os.environ["REFERENCE_TIMEZONE"] = "America/Sao_Paulo"

from app import app as _flask_app, db
from models import Employee, TimeRecord
from services.calendar_clock import CalendarClock


@pytest.fixture
def flask_app():
    _flask_app.config["TESTING"] = True

    with _flask_app.app_context():
        db.session.remove()
        db.drop_all()
        db.create_all()
        yield _flask_app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(flask_app):
    with flask_app.test_client() as client:
        yield client


@pytest.fixture
def clock():
    return CalendarClock("America/Sao_Paulo")


@pytest.fixture
def make_employee(flask_app):
    def _make(name="Teste", work_hub=None, base_salary=2200.0, danger_pay=0.0, unhealthy_pay=0.0):
        employee = Employee(
            name=name,
            work_hub=work_hub,
            base_salary=base_salary,
            danger_pay=danger_pay,
            unhealthy_pay=unhealthy_pay,
        )
        db.session.add(employee)
        db.session.commit()
        return employee
    return _make


@pytest.fixture
def add_punches(flask_app, clock):
    """기준 시간대 벽시계 시각 목록으로 출퇴근 기록을 저장 (naive UTC 변환)."""
    def _add(employee_id, *punches, is_valid=True):
        for local_time, record_type in punches:
            db.session.add(TimeRecord(
                employee_id=employee_id,
                timestamp=clock.to_utc(local_time),
                type=record_type,
                is_valid=is_valid,
            ))
        db.session.commit()
    return _add
