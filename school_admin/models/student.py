# school_admin/models/student.py
"""
Student model.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from ..core.constants import StudentStatus
from .common import utcnow


class Student(SQLModel, table=True):
    """
    Student model.

    Fields:
    - name, grade: required
    - status: Activo, Inactivo or Suspendido (default Activo)
    - enrollment_date: 'YYYY-MM-DD', defaults to the creation date
    """

    __tablename__ = "alumnos"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False, index=True)
    grade: str = Field(nullable=False)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    status: str = Field(default=StudentStatus.ACTIVO.value, nullable=False)
    avatar_url: Optional[str] = Field(default=None)
    enrollment_date: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow)
