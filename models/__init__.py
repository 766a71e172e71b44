from models._base import db
from models.employee import Employee
from models.holiday import Holiday, HolidayType
from models.time_record import TimeRecord, TimeRecordType

__all__ = [
    "db",
    "Employee",
    "Holiday",
    "HolidayType",
    "TimeRecord",
    "TimeRecordType",
]
