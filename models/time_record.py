import enum
from datetime import datetime

from models._base import db


class TimeRecordType(str, enum.Enum):
    ENTRY = "ENTRY"
    EXIT = "EXIT"
    LUNCH_START = "LUNCH_START"
    LUNCH_END = "LUNCH_END"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"
    ABSENCE_JUSTIFIED = "ABSENCE_JUSTIFIED"


class TimeRecord(db.Model):
    """출퇴근 원시 기록. 외부 수집 시스템이 적재하고 엔진은 읽기만 한다."""

    __tablename__ = "time_records"
    __table_args__ = (
        db.Index("ix_time_record_employee_timestamp", "employee_id", "timestamp"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    employee_id = db.Column(
        db.Integer,
        db.ForeignKey("employees.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    timestamp = db.Column(db.DateTime, nullable=False)  # naive UTC
    type = db.Column(db.String(20), nullable=False)
    is_valid = db.Column(db.Boolean, nullable=False, default=True)
    reason = db.Column(db.String(200), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now)

    employee = db.relationship("Employee", back_populates="time_records")

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "timestamp": self.timestamp.isoformat() + "Z" if self.timestamp else "",
            "type": self.type,
            "is_valid": self.is_valid,
            "reason": self.reason or "",
        }
