# school_admin/models/attendance.py
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from .common import utcnow


class Attendance(SQLModel, table=True):
    """One attendance record per student and day."""

    __tablename__ = "asistencias"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: str = Field(nullable=False, index=True)
    date: str = Field(nullable=False, index=True)
    status: str = Field(nullable=False)
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow)
