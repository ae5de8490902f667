"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here so metadata.create_all sees them
from cedoi.db.models import UserRow, MeetingRow, AttendanceRow  # noqa: F401, E402
