import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.audit import log_action
from ...schemas import CreatedResponse
from ...services.student_service import StudentService
from ..dependencies import get_session
from .models import Student, StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_student_service(session: Session = Depends(get_session)) -> StudentService:
    return StudentService(session)


@router.get("/students", response_model=list[Student])
def api_get_students(
    student_status: Optional[str] = Query(None, alias="status"),
    grade: Optional[str] = None,
    service: StudentService = Depends(get_student_service),
):
    try:
        return service.list_students(status=student_status, grade=grade)
    except SQLAlchemyError:
        logger.exception("Error obteniendo los alumnos")
        raise HTTPException(status_code=500, detail="Error al obtener los alumnos")


@router.get("/students/{student_id}", response_model=Student)
def api_get_student(
    student_id: uuid.UUID,
    service: StudentService = Depends(get_student_service),
):
    try:
        return service.get_by_id(student_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/students", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def api_create_student(
    student: StudentCreate,
    service: StudentService = Depends(get_student_service),
):
    try:
        new_student = service.create_student(student.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error creando alumno")
        raise HTTPException(status_code=500, detail="Error al crear el alumno")
    return {"success": True, "id": new_student.id}


@router.put("/students/{student_id}", response_model=Student)
def api_update_student(
    student_id: uuid.UUID,
    student_update: StudentUpdate,
    service: StudentService = Depends(get_student_service),
):
    update_fields = student_update.model_dump(exclude_unset=True)
    try:
        return service.update_student(student_id, update_fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error actualizando alumno")
        raise HTTPException(status_code=500, detail="Error al actualizar el alumno")


@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_student(
    student_id: uuid.UUID,
    request: Request,
    service: StudentService = Depends(get_student_service),
):
    try:
        service.delete(student_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error eliminando alumno")
        raise HTTPException(status_code=500, detail="Error al eliminar el alumno")
    log_action("DELETE", "student", str(student_id), request=request)
    return
