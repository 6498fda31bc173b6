# school_admin/services/attendance_service.py
"""
Attendance records: at most one per student and calendar day.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..core.constants import AttendanceStatus
from ..models import Attendance
from .base_service import BaseCRUDService, is_blank, validate_date

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Ya existe un registro de asistencia para este alumno en esta fecha"


class AttendanceService(BaseCRUDService[Attendance]):
    def __init__(self, session: Session):
        super().__init__(session, Attendance)

    def list_attendance(
        self,
        date: Optional[str] = None,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Attendance]:
        """Registros que cumplen los filtros, fecha más reciente primero."""
        statement = select(Attendance)
        if date:
            statement = statement.where(Attendance.date == validate_date(date))
        if student_id:
            statement = statement.where(Attendance.student_id == student_id)
        if start_date:
            statement = statement.where(Attendance.date >= validate_date(start_date, "fecha inicial"))
        if end_date:
            statement = statement.where(Attendance.date <= validate_date(end_date, "fecha final"))
        if status:
            statement = statement.where(Attendance.status == _status_value(status))
        statement = statement.order_by(Attendance.date.desc(), Attendance.created_at.desc())
        return self.session.exec(statement).all()

    def list_range(self, start_date: str, end_date: str) -> List[Attendance]:
        validate_date(start_date, "fecha inicial")
        validate_date(end_date, "fecha final")
        if start_date > end_date:
            raise ValueError("La fecha inicial no puede ser posterior a la fecha final.")
        return self.list_attendance(start_date=start_date, end_date=end_date)

    def student_stats(self, student_id: str) -> List[Dict[str, Any]]:
        """Cantidad de registros del alumno por estado (Presente, Ausente, Retardo)."""
        statement = (
            select(Attendance.status, func.count(Attendance.id))
            .where(Attendance.student_id == student_id)
            .group_by(Attendance.status)
            .order_by(Attendance.status)
        )
        rows = self.session.exec(statement).all()
        return [{"status": status, "count": count} for status, count in rows]

    def find_for_day(
        self, student_id: str, date: str, exclude_id: Optional[uuid.UUID] = None
    ) -> Optional[Attendance]:
        statement = select(Attendance).where(
            Attendance.student_id == student_id,
            Attendance.date == date,
        )
        if exclude_id is not None:
            statement = statement.where(Attendance.id != exclude_id)
        return self.session.exec(statement.limit(1)).first()

    def create_attendance(self, data: Dict[str, Any]) -> Attendance:
        if is_blank(data.get("student_id")) or is_blank(data.get("date")) or is_blank(data.get("status")):
            raise ValueError("Alumno, fecha y estado son campos requeridos")

        fields = dict(data)
        fields["status"] = _status_value(fields["status"])
        self._check_fields(fields)

        if self.find_for_day(fields["student_id"], fields["date"]):
            raise ValueError(DUPLICATE_MESSAGE)

        record = self.create(fields)
        logger.info(
            f"Asistencia registrada (ID: {record.id}): alumno {record.student_id}, "
            f"{record.date}, {record.status}."
        )
        return record

    def update_attendance(self, attendance_id: uuid.UUID | str, data: Dict[str, Any]) -> Attendance:
        record = self.get_by_id(attendance_id)

        fields = dict(data)
        for required in ("student_id", "date", "status"):
            if required in fields and is_blank(fields[required]):
                raise ValueError(f"El campo '{required}' no puede estar vacío.")
        if "status" in fields:
            fields["status"] = _status_value(fields["status"])
        self._check_fields(fields)

        student_id = fields.get("student_id", record.student_id)
        date = fields.get("date", record.date)
        if (student_id, date) != (record.student_id, record.date):
            if self.find_for_day(student_id, date, exclude_id=record.id):
                raise ValueError(DUPLICATE_MESSAGE)

        return self.update(record.id, fields)

    def _check_fields(self, fields: Dict[str, Any]) -> None:
        if "status" in fields and fields["status"] not in {s.value for s in AttendanceStatus}:
            raise ValueError(f"Estado de asistencia inválido: {fields['status']}")
        if "date" in fields:
            validate_date(fields["date"])


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, AttendanceStatus) else str(status)
