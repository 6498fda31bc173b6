# school_admin/services/receipt_service.py
"""
Receipt numbering for paid payments.

Receipt numbers look like 'REC-202404-008': a prefix, the year and month
of assignment, and a sequence counter padded to three digits.

The counter is derived from the most recently created paid payment
(read-then-insert). Two requests that read the same "latest" payment compute
the same number; the unique index on pagos.receipt_number rejects the second
insert and PaymentService retries above both the rejected number and the
highest counter already stored for the month.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from ..core.constants import PaymentStatus, ReceiptCounterReset
from ..models.payment import Payment

logger = logging.getLogger(__name__)


class ReceiptConflictError(Exception):
    """Raised when a receipt number keeps colliding after all retries."""

    def __init__(self, receipt_number: str, attempts: int):
        self.receipt_number = receipt_number
        self.attempts = attempts
        super().__init__(
            f"El recibo {receipt_number} ya existe; no se pudo asignar un número único "
            f"tras {attempts} intento(s)."
        )


class PaidPaymentLookup(Protocol):
    def find_latest_paid(self, prefix: Optional[str] = None) -> Optional[Payment]:
        ...

    def highest_counter(self, prefix: str) -> Optional[int]:
        ...


def parse_counter(receipt_number: Optional[str]) -> Optional[int]:
    """
    Sequence component of a receipt number (third hyphen-delimited segment).
    Returns None when the receipt is missing or malformed.
    """
    if not receipt_number:
        return None
    parts = receipt_number.split("-")
    if len(parts) < 3:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


class ReceiptSequencer:
    """
    Assigns receipt numbers to payments created with status Pagado.

    Args:
        store: anything exposing find_latest_paid(prefix=None) and
            highest_counter(prefix)
        prefix: receipt prefix, 'REC' by default
        reset: NEVER keeps counting from the latest paid payment across
            months (REC-202403-007 -> REC-202404-008); MONTHLY only looks
            at receipts of the current month, so each month starts at 001
        now: clock used for the year/month of the receipt
    """

    def __init__(
        self,
        store: PaidPaymentLookup,
        prefix: str = "REC",
        reset: ReceiptCounterReset = ReceiptCounterReset.NEVER,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.prefix = prefix
        self.reset = ReceiptCounterReset(reset)
        self.now = now

    def period_prefix(self, moment: datetime) -> str:
        return f"{self.prefix}-{moment.year}{moment.month:02d}"

    def next_receipt_number(
        self, status: str, after: Optional[str] = None
    ) -> Optional[str]:
        """
        Receipt number for a payment about to be created with `status`.

        Returns None (without querying the store) unless status is Pagado.
        `after` is a number the store already rejected; the result then uses
        a counter above both the rejected one and the highest counter already
        stored under the current period, so a retry never walks through
        existing receipts one by one.
        """
        if status != PaymentStatus.PAGADO.value:
            return None

        period = self.period_prefix(self.now())
        scope = period if self.reset == ReceiptCounterReset.MONTHLY else None

        latest = self.store.find_latest_paid(prefix=scope)
        counter = self._next_counter(latest)

        if after is not None:
            floor = max(parse_counter(after) or 0, self.store.highest_counter(period) or 0)
            if counter <= floor:
                counter = floor + 1

        return f"{period}-{counter:03d}"

    def _next_counter(self, latest: Optional[Payment]) -> int:
        if latest is None or not latest.receipt_number:
            return 1

        last_counter = parse_counter(latest.receipt_number)
        if last_counter is None:
            logger.warning(
                f"Recibo con formato inesperado '{latest.receipt_number}' (pago {latest.id}); "
                "se reinicia el contador en 1."
            )
            return 1
        return last_counter + 1
