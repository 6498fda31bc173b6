# school_admin/api/students/models.py
import uuid
from datetime import datetime
from typing import Optional

from ...core.constants import StudentStatus
from ...schemas import CamelModel


# --- Modelos Pydantic (Alumnos) ---
class StudentCreate(CamelModel):
    name: Optional[str] = None
    grade: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[StudentStatus] = None
    avatar_url: Optional[str] = None
    enrollment_date: Optional[str] = None


class StudentUpdate(StudentCreate):
    pass


class Student(CamelModel):
    id: uuid.UUID
    name: str
    grade: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    avatar_url: Optional[str] = None
    enrollment_date: str
    created_at: datetime
