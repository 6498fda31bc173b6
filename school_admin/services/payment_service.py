# school_admin/services/payment_service.py
"""
Payment service layer using SQLModel ORM.

Acts as the payment store (latest paid lookup, insert, filtered queries,
partial updates, deletes) and owns the creation flow that assigns receipt
numbers through ReceiptSequencer.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.config import Settings
from ..core.constants import PaymentStatus
from ..models import Payment
from .base_service import BaseCRUDService, is_blank, today, validate_date
from .receipt_service import ReceiptConflictError, ReceiptSequencer, parse_counter
from .student_service import StudentService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Alumno, monto y concepto son campos requeridos"


class PaymentService(BaseCRUDService[Payment]):
    """
    Service layer for Payment operations using SQLModel ORM.
    """

    # receipt_number is decided once, at creation
    immutable_fields = ("id", "created_at", "receipt_number")

    def __init__(
        self,
        session: Session,
        settings: Settings,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize with a SQLModel session.

        Args:
            session: SQLModel Session instance
            settings: application settings (receipt policy, payment methods)
            now: clock for receipt year/month, datetime.now by default
        """
        super().__init__(session, Payment)
        self.settings = settings
        self.student_service = StudentService(session)
        self.max_retries = max(settings.receipt_max_retries, 0)
        self.sequencer = ReceiptSequencer(
            self,
            prefix=settings.receipt_prefix,
            reset=settings.receipt_counter_reset,
            now=now or datetime.now,
        )

    # --- Store queries ---

    def find_latest_paid(self, prefix: Optional[str] = None) -> Optional[Payment]:
        """
        Most recently created payment with status Pagado.
        With `prefix`, only payments whose receipt starts with '{prefix}-'.
        """
        statement = select(Payment).where(Payment.status == PaymentStatus.PAGADO.value)
        if prefix:
            statement = statement.where(Payment.receipt_number.startswith(f"{prefix}-", autoescape=True))
        statement = statement.order_by(Payment.created_at.desc()).limit(1)
        return self.session.exec(statement).first()

    def highest_counter(self, prefix: str) -> Optional[int]:
        """
        Largest sequence counter among receipts starting with '{prefix}-',
        or None when there are none. Compared numerically: '1000' > '999'.
        """
        statement = select(Payment.receipt_number).where(
            Payment.receipt_number.startswith(f"{prefix}-", autoescape=True)
        )
        counters = [parse_counter(r) for r in self.session.exec(statement).all()]
        return max((c for c in counters if c is not None), default=None)

    def find_by_filter(
        self,
        student_id: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Payment]:
        """Payments matching every given filter, most recent `date` first."""
        statement = select(Payment)
        if student_id:
            statement = statement.where(Payment.student_id == student_id)
        if status:
            statement = statement.where(Payment.status == status)
        if payment_method:
            statement = statement.where(Payment.payment_method == payment_method)
        if start_date:
            statement = statement.where(Payment.date >= validate_date(start_date, "fecha inicial"))
        if end_date:
            statement = statement.where(Payment.date <= validate_date(end_date, "fecha final"))
        statement = statement.order_by(Payment.date.desc(), Payment.created_at.desc())
        return self.session.exec(statement).all()

    # --- Creation ---

    def create_payment(self, data: Dict[str, Any]) -> Payment:
        """
        Validate and insert a new payment, assigning a receipt number when
        its status is Pagado. Any client supplied receipt_number is ignored.

        Raises:
            ValueError: missing/invalid fields (nothing is written)
            ReceiptConflictError: the receipt number kept colliding
            SQLAlchemyError: the store failed (nothing is written)
        """
        fields = self._validate_new(data)

        rejected = None
        for attempt in range(self.max_retries + 1):
            receipt_number = self.sequencer.next_receipt_number(fields["status"], after=rejected)
            payment = Payment(**fields, receipt_number=receipt_number)
            try:
                new_payment = self.insert(payment)
            except IntegrityError:
                # Only the receipt number can collide (ids are random UUIDs)
                if receipt_number is None:
                    raise
                logger.warning(
                    f"Número de recibo {receipt_number} duplicado (intento {attempt + 1}); recalculando."
                )
                rejected = receipt_number
                continue

            logger.info(
                f"Pago registrado (ID: {new_payment.id}) para el alumno {new_payment.student_id}"
                + (f" con recibo {receipt_number}." if receipt_number else ".")
            )
            return new_payment

        raise ReceiptConflictError(rejected, self.max_retries + 1)

    def _validate_new(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if is_blank(data.get("student_id")) or data.get("amount") is None or is_blank(data.get("concept")):
            raise ValueError(REQUIRED_FIELDS_MESSAGE)

        fields = {
            "student_id": str(data["student_id"]).strip(),
            "amount": data["amount"],
            "concept": data["concept"].strip(),
            "status": _status_value(data.get("status") or PaymentStatus.PENDIENTE),
            "payment_method": data.get("payment_method"),
            "date": data.get("date") or today(),
        }
        self._check_fields(fields)
        return fields

    def _check_fields(self, fields: Dict[str, Any]) -> None:
        if "student_id" in fields and is_blank(fields["student_id"]):
            raise ValueError("El alumno no puede estar vacío.")
        if "amount" in fields and (fields["amount"] is None or fields["amount"] < 0):
            raise ValueError("El monto debe ser un número no negativo.")
        if "concept" in fields and is_blank(fields["concept"]):
            raise ValueError("El concepto no puede estar vacío.")
        if "status" in fields and fields["status"] not in {s.value for s in PaymentStatus}:
            raise ValueError(f"Estado de pago inválido: {fields['status']}")
        method = fields.get("payment_method")
        if method is not None and method not in self.settings.accepted_payment_methods:
            raise ValueError(
                f"Método de pago inválido: {method}. "
                f"Opciones: {', '.join(self.settings.accepted_payment_methods)}"
            )
        if "date" in fields:
            validate_date(fields["date"])

    # --- Generic update ---

    def update_payment(self, payment_id: uuid.UUID | str, data: Dict[str, Any]) -> Payment:
        """
        Partial update of amount, status, concept, method or date.
        Never assigns, re-derives or revokes the receipt number.
        """
        fields = {k: v for k, v in data.items() if k not in self.immutable_fields}
        if "status" in fields:
            fields["status"] = _status_value(fields["status"])
        self._check_fields(fields)
        payment = self.update(payment_id, fields)
        logger.info(f"Pago {payment_id} actualizado: {', '.join(fields) or 'sin cambios'}.")
        return payment

    # --- Summaries ---

    def student_summary(self, student_id: str) -> Dict[str, Any]:
        """Per-status totals of a student's payments plus basic student info."""
        student = self.student_service.get_by_id(student_id)

        statement = (
            select(Payment.status, func.sum(Payment.amount), func.count(Payment.id))
            .where(Payment.student_id == student_id)
            .group_by(Payment.status)
            .order_by(Payment.status)
        )
        rows = self.session.exec(statement).all()
        return {
            "student": {"name": student.name, "email": student.email, "grade": student.grade},
            "payments": [
                {"status": status, "total": float(total or 0), "count": count}
                for status, total, count in rows
            ],
        }

    def range_summary(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """Totals by (status, payment method) for payments dated within [start, end]."""
        if is_blank(start_date) or is_blank(end_date):
            raise ValueError("Fecha inicial y fecha final son requeridas")
        validate_date(start_date, "fecha inicial")
        validate_date(end_date, "fecha final")
        if start_date > end_date:
            raise ValueError("La fecha inicial no puede ser posterior a la fecha final.")

        statement = (
            select(
                Payment.status,
                Payment.payment_method,
                func.sum(Payment.amount),
                func.count(Payment.id),
            )
            .where(Payment.date >= start_date, Payment.date <= end_date)
            .group_by(Payment.status, Payment.payment_method)
            .order_by(Payment.status, Payment.payment_method)
        )
        rows = self.session.exec(statement).all()

        summary = [
            {
                "status": status,
                "payment_method": method,
                "total": float(total or 0),
                "count": count,
            }
            for status, method, total, count in rows
        ]
        return {
            "period": {"start_date": start_date, "end_date": end_date},
            "summary": summary,
            "totals": {
                "total": sum(row["total"] for row in summary),
                "count": sum(row["count"] for row in summary),
            },
        }


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, PaymentStatus) else str(status)
