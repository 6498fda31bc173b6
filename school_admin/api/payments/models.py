# school_admin/api/payments/models.py
import uuid
from datetime import datetime
from typing import List, Optional

from ...core.constants import PaymentStatus
from ...schemas import CamelModel, CreatedResponse


# --- Modelos Pydantic (Pagos) ---
class PaymentCreate(CamelModel):
    # Required fields are validated by PaymentService so that a missing
    # field yields the same 400 message as an empty one.
    student_id: Optional[str] = None
    amount: Optional[float] = None
    concept: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDIENTE
    payment_method: Optional[str] = None
    date: Optional[str] = None
    # Accepted for compatibility with older clients, always ignored
    receipt_number: Optional[str] = None


class PaymentUpdate(CamelModel):
    student_id: Optional[str] = None
    amount: Optional[float] = None
    concept: Optional[str] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = None
    date: Optional[str] = None


class Payment(CamelModel):
    id: uuid.UUID
    student_id: str
    amount: float
    date: str
    concept: str
    status: str
    payment_method: Optional[str] = None
    receipt_number: Optional[str] = None
    created_at: datetime


class PaymentCreated(CreatedResponse):
    receipt_number: Optional[str] = None


# --- Resúmenes ---
class StudentInfo(CamelModel):
    name: str
    email: Optional[str] = None
    grade: str


class StatusTotal(CamelModel):
    status: str
    total: float
    count: int


class StudentPaymentSummary(CamelModel):
    student: StudentInfo
    payments: List[StatusTotal]


class Period(CamelModel):
    start_date: str
    end_date: str


class StatusMethodTotal(StatusTotal):
    payment_method: Optional[str] = None


class Totals(CamelModel):
    total: float
    count: int


class PaymentRangeSummary(CamelModel):
    period: Period
    summary: List[StatusMethodTotal]
    totals: Totals
