import enum
from datetime import datetime

from models._base import db


class HolidayType(str, enum.Enum):
    NATIONAL = "NATIONAL"
    OPTIONAL = "OPTIONAL"
    STATE = "STATE"
    MUNICIPAL = "MUNICIPAL"


class Holiday(db.Model):
    __tablename__ = "holidays"
    __table_args__ = (
        # (date, name) 중복 금지. 동시 등록 경쟁도 이 제약으로 막는다
        db.UniqueConstraint("date", "name", name="uq_holiday_date_name"),
        db.Index("ix_holiday_recurring_active", "is_recurring", "is_active"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False)
    # 기준 시간대의 달력 날짜. 반복 공휴일이면 연도는 의미 없음 (월/일만 사용)
    date = db.Column(db.Date, nullable=False, index=True)
    type = db.Column(db.String(10), nullable=False, default=HolidayType.NATIONAL.value)
    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    state = db.Column(db.String(2), nullable=True, index=True)  # null = 전국
    city = db.Column(db.String(100), nullable=True)             # 표시용, 매칭에 사용 안 함
    description = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_by = db.Column(db.String(36), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<Holiday {self.date} {self.name} state={self.state}>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.strftime("%Y-%m-%d") if self.date else "",
            "type": self.type,
            "is_recurring": self.is_recurring,
            "state": self.state,
            "city": self.city,
            "description": self.description or "",
            "is_active": self.is_active,
            "created_by": self.created_by,
        }
