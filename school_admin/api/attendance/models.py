# school_admin/api/attendance/models.py
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...core.constants import AttendanceStatus
from ...schemas import CamelModel


class AttendanceCreate(CamelModel):
    student_id: Optional[str] = None
    date: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceUpdate(AttendanceCreate):
    pass


class Attendance(CamelModel):
    id: uuid.UUID
    student_id: str
    date: str
    status: str
    notes: Optional[str] = None
    created_at: datetime


class AttendanceStatusCount(BaseModel):
    # Serialized as {"_id": status, "count": n}, the shape the dashboard reads
    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(serialization_alias="_id")
    count: int
