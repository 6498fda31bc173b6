import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.audit import log_action
from ...core.constants import AttendanceStatus
from ...schemas import CreatedResponse
from ...services.attendance_service import AttendanceService
from ..dependencies import get_session
from .models import Attendance, AttendanceCreate, AttendanceStatusCount, AttendanceUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_attendance_service(session: Session = Depends(get_session)) -> AttendanceService:
    return AttendanceService(session)


@router.get("/attendance", response_model=list[Attendance])
def api_get_attendance(
    date: Optional[str] = None,
    student_id: Optional[str] = Query(None, alias="studentId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    attendance_status: Optional[AttendanceStatus] = Query(None, alias="status"),
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return service.list_attendance(
            date=date,
            student_id=student_id,
            start_date=start_date,
            end_date=end_date,
            status=attendance_status,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error obteniendo las asistencias")
        raise HTTPException(status_code=500, detail="Error al obtener las asistencias")


@router.get("/attendance/range/{start_date}/{end_date}", response_model=list[Attendance])
def api_get_attendance_range(
    start_date: str,
    end_date: str,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return service.list_range(start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error obteniendo asistencias por rango")
        raise HTTPException(status_code=500, detail="Error al obtener las asistencias")


@router.get("/attendance/stats/student/{student_id}", response_model=list[AttendanceStatusCount])
def api_get_student_attendance_stats(
    student_id: str,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return service.student_stats(student_id)
    except SQLAlchemyError:
        logger.exception(f"Error obteniendo estadísticas de asistencia del alumno {student_id}")
        raise HTTPException(status_code=500, detail="Error al obtener las estadísticas de asistencia")


@router.get("/attendance/{attendance_id}", response_model=Attendance)
def api_get_attendance_record(
    attendance_id: uuid.UUID,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return service.get_by_id(attendance_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/attendance", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def api_create_attendance(
    attendance: AttendanceCreate,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        record = service.create_attendance(attendance.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error registrando asistencia")
        raise HTTPException(status_code=500, detail="Error al registrar la asistencia")
    return {"success": True, "id": record.id}


@router.put("/attendance/{attendance_id}", response_model=Attendance)
def api_update_attendance(
    attendance_id: uuid.UUID,
    attendance_update: AttendanceUpdate,
    service: AttendanceService = Depends(get_attendance_service),
):
    update_fields = attendance_update.model_dump(exclude_unset=True)
    try:
        return service.update_attendance(attendance_id, update_fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error actualizando asistencia")
        raise HTTPException(status_code=500, detail="Error al actualizar la asistencia")


@router.delete("/attendance/{attendance_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_attendance(
    attendance_id: uuid.UUID,
    request: Request,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        service.delete(attendance_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error eliminando asistencia")
        raise HTTPException(status_code=500, detail="Error al eliminar la asistencia")
    log_action("DELETE", "attendance", str(attendance_id), request=request)
    return
