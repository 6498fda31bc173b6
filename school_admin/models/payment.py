# school_admin/models/payment.py
"""
Payment model for student payment tracking.
"""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from ..core.constants import PaymentStatus
from .common import utcnow


class Payment(SQLModel, table=True):
    """
    Payment model representing student payments.

    Fields:
    - id: UUID primary key, assigned at insertion
    - student_id: Reference to the student (required, not a foreign key)
    - amount: Payment amount (required, non-negative)
    - date: Calendar date the payment is recorded for ('YYYY-MM-DD')
    - concept: Free text label (required)
    - status: Pagado, Pendiente or Cancelado
    - payment_method: Efectivo, Tarjeta or Transferencia
    - receipt_number: 'REC-YYYYMM-NNN', only for payments created as Pagado
    - created_at: Insertion timestamp, never modified
    """

    __tablename__ = "pagos"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: str = Field(nullable=False, index=True)
    amount: float = Field(nullable=False)
    date: str = Field(nullable=False, index=True)
    concept: str = Field(nullable=False)
    status: str = Field(default=PaymentStatus.PENDIENTE.value, nullable=False, index=True)
    payment_method: str | None = Field(default=None)
    # Unique index: the database is the arbiter for concurrent receipt assignment
    receipt_number: str | None = Field(default=None, unique=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
