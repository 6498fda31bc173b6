import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.audit import log_action
from ...core.config import Settings
from ...services.payment_service import PaymentService
from ...services.receipt_service import ReceiptConflictError
from ..dependencies import get_app_settings, get_clock, get_session
from .models import (
    Payment,
    PaymentCreate,
    PaymentCreated,
    PaymentRangeSummary,
    PaymentUpdate,
    StudentPaymentSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dependency Injectors ---
def get_payment_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> PaymentService:
    return PaymentService(session, settings, now=clock)


# --- Summary Endpoints ---


@router.get("/payments/student/{student_id}/summary", response_model=StudentPaymentSummary)
def api_get_student_payment_summary(
    student_id: str,
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return service.student_summary(student_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error obteniendo el resumen de pagos del alumno")
        raise HTTPException(status_code=500, detail="Error al obtener el resumen de pagos")


@router.get("/payments/summary/range", response_model=PaymentRangeSummary)
def api_get_payment_range_summary(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return service.range_summary(start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error obteniendo el resumen de pagos por rango")
        raise HTTPException(status_code=500, detail="Error al obtener el resumen de pagos")


# --- Payment Endpoints ---


@router.get("/payments", response_model=list[Payment])
def api_get_payments(
    student_id: Optional[str] = Query(None, alias="studentId"),
    payment_status: Optional[str] = Query(None, alias="status"),
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return service.find_by_filter(
            student_id=student_id,
            status=payment_status,
            payment_method=payment_method,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error obteniendo los pagos")
        raise HTTPException(status_code=500, detail="Error al obtener los pagos")


@router.post("/payments", response_model=PaymentCreated, status_code=status.HTTP_201_CREATED)
def api_create_payment(
    payment: PaymentCreate,
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Register a payment. Payments created as 'Pagado' receive the next
    receipt number; any receiptNumber sent by the client is ignored.
    """
    try:
        new_payment = service.create_payment(payment.model_dump(exclude={"receipt_number"}))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReceiptConflictError as e:
        logger.error(str(e))
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error crítico registrando pago")
        raise HTTPException(status_code=500, detail="Error al registrar el pago")

    log_action(
        "CREATE",
        "payment",
        str(new_payment.id),
        request=request,
        details={"amount": new_payment.amount, "receipt_number": new_payment.receipt_number},
    )
    return {"success": True, "id": new_payment.id, "receipt_number": new_payment.receipt_number}


@router.get("/payments/{payment_id}", response_model=Payment)
def api_get_payment(
    payment_id: uuid.UUID,
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return service.get_by_id(payment_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/payments/{payment_id}", response_model=Payment)
def api_update_payment(
    payment_id: uuid.UUID,
    payment_update: PaymentUpdate,
    service: PaymentService = Depends(get_payment_service),
):
    update_fields = payment_update.model_dump(exclude_unset=True)
    try:
        return service.update_payment(payment_id, update_fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error actualizando pago")
        raise HTTPException(status_code=500, detail="Error al actualizar el pago")


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_payment(
    payment_id: uuid.UUID,
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    try:
        service.delete(payment_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error eliminando pago")
        raise HTTPException(status_code=500, detail="Error al eliminar el pago")
    log_action("DELETE", "payment", str(payment_id), request=request)
    return
