from datetime import datetime

from models._base import db


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    work_hub = db.Column(db.String(100), nullable=True)  # 근무 거점 (polo)
    base_salary = db.Column(db.Float, nullable=False, default=0.0)
    danger_pay = db.Column(db.Float, nullable=False, default=0.0)      # 위험수당 (periculosidade)
    unhealthy_pay = db.Column(db.Float, nullable=False, default=0.0)   # 유해수당 (insalubridade)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    time_records = db.relationship("TimeRecord", back_populates="employee", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "work_hub": self.work_hub or "",
            "base_salary": self.base_salary,
            "danger_pay": self.danger_pay,
            "unhealthy_pay": self.unhealthy_pay,
            "is_active": self.is_active,
        }
