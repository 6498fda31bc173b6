# school_admin/services/student_service.py
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from ..core.constants import StudentStatus
from ..models import Student
from .base_service import BaseCRUDService, is_blank, today, validate_date

logger = logging.getLogger(__name__)


class StudentService(BaseCRUDService[Student]):
    def __init__(self, session: Session):
        super().__init__(session, Student)

    def list_students(self, status: Optional[str] = None, grade: Optional[str] = None) -> List[Student]:
        """Alumnos ordenados por nombre, con filtros opcionales de estado y grado."""
        statement = select(Student)
        if status:
            statement = statement.where(Student.status == status)
        if grade:
            statement = statement.where(Student.grade == grade)
        return self.session.exec(statement.order_by(Student.name)).all()

    def create_student(self, data: Dict[str, Any]) -> Student:
        if is_blank(data.get("name")) or is_blank(data.get("grade")):
            raise ValueError("Nombre y grado son campos requeridos")

        fields = dict(data)
        fields["status"] = _status_value(fields.get("status") or StudentStatus.ACTIVO)
        fields["enrollment_date"] = fields.get("enrollment_date") or today()
        self._check_fields(fields)

        student = self.create(fields)
        logger.info(f"Alumno creado (ID: {student.id}): {student.name}, grado {student.grade}.")
        return student

    def update_student(self, student_id: uuid.UUID | str, data: Dict[str, Any]) -> Student:
        fields = dict(data)
        for required in ("name", "grade"):
            if required in fields and is_blank(fields[required]):
                raise ValueError(f"El campo '{required}' no puede estar vacío.")
        if "status" in fields:
            fields["status"] = _status_value(fields["status"])
        self._check_fields(fields)
        return self.update(student_id, fields)

    def _check_fields(self, fields: Dict[str, Any]) -> None:
        if "status" in fields and fields["status"] not in {s.value for s in StudentStatus}:
            raise ValueError(f"Estado de alumno inválido: {fields['status']}")
        if fields.get("enrollment_date"):
            validate_date(fields["enrollment_date"], "fecha de inscripción")


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, StudentStatus) else str(status)
