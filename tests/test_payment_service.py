from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from school_admin.models import Payment
from school_admin.models.common import utcnow
from school_admin.services.payment_service import REQUIRED_FIELDS_MESSAGE, PaymentService
from school_admin.services.receipt_service import ReceiptConflictError


def paid(**overrides):
    data = {
        "student_id": "stu-001",
        "amount": 1500.0,
        "concept": "Colegiatura",
        "status": "Pagado",
        "payment_method": "Efectivo",
        "date": "2024-04-05",
    }
    data.update(overrides)
    return data


def count_payments(session):
    return len(session.exec(select(Payment)).all())


@pytest.fixture
def service(session, settings, clock):
    return PaymentService(session, settings, now=clock)


def test_pending_payment_skips_latest_paid_lookup(service, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("latest paid lookup must not run for unpaid payments")

    monkeypatch.setattr(service, "find_latest_paid", fail)

    payment = service.create_payment(paid(status="Pendiente"))

    assert payment.receipt_number is None
    assert payment.created_at is not None


def test_sequential_paid_payments_increment(service):
    first = service.create_payment(paid())
    second = service.create_payment(paid(student_id="stu-002"))

    assert first.receipt_number == "REC-202404-001"
    assert second.receipt_number == "REC-202404-002"


def test_receipt_month_comes_from_clock_not_payment_date(service):
    payment = service.create_payment(paid(date="2023-12-20"))

    assert payment.receipt_number == "REC-202404-001"


def test_counter_carries_across_month_boundary(service, clock):
    clock.moment = datetime(2024, 3, 28, 12, 0)
    for _ in range(7):
        march = service.create_payment(paid())
    assert march.receipt_number == "REC-202403-007"

    clock.moment = datetime(2024, 4, 2, 8, 0)
    april = service.create_payment(paid())

    assert april.receipt_number == "REC-202404-008"


def test_monthly_reset_starts_new_month_at_one(session, settings, clock):
    settings.receipt_counter_reset = "monthly"
    service = PaymentService(session, settings, now=clock)

    clock.moment = datetime(2024, 3, 28, 12, 0)
    service.create_payment(paid())
    service.create_payment(paid())

    clock.moment = datetime(2024, 4, 2, 8, 0)
    april = service.create_payment(paid())
    next_april = service.create_payment(paid())

    assert april.receipt_number == "REC-202404-001"
    assert next_april.receipt_number == "REC-202404-002"


def test_missing_required_fields_create_nothing(service, session):
    for missing in ("student_id", "amount", "concept"):
        data = paid()
        del data[missing]
        with pytest.raises(ValueError, match=REQUIRED_FIELDS_MESSAGE):
            service.create_payment(data)

    with pytest.raises(ValueError):
        service.create_payment(paid(concept="   "))

    assert count_payments(session) == 0


def test_negative_amount_is_rejected(service, session):
    with pytest.raises(ValueError):
        service.create_payment(paid(amount=-1))
    assert count_payments(session) == 0


def test_payment_method_must_be_configured(session, settings, clock):
    settings.payment_methods = "Efectivo,Transferencia"
    service = PaymentService(session, settings, now=clock)

    with pytest.raises(ValueError, match="Método de pago inválido"):
        service.create_payment(paid(payment_method="Tarjeta"))

    assert service.create_payment(paid(payment_method="Transferencia")).receipt_number


def test_date_defaults_to_today(service):
    payment = service.create_payment(paid(date=None))

    assert payment.date == datetime.now().strftime("%Y-%m-%d")


def test_update_never_touches_receipt_number(service):
    payment = service.create_payment(paid())
    pending = service.create_payment(paid(status="Pendiente"))

    updated = service.update_payment(
        payment.id, {"status": "Cancelado", "amount": 900.0, "receipt_number": "REC-999999-999"}
    )
    promoted = service.update_payment(pending.id, {"status": "Pagado"})

    assert updated.receipt_number == "REC-202404-001"
    assert updated.status == "Cancelado"
    assert updated.amount == 900.0
    assert promoted.receipt_number is None


def test_latest_paid_without_receipt_is_recovered_by_retry(service):
    # A payment promoted to Pagado after creation has no receipt; the next
    # computed number collides with the existing 001 and is retried.
    service.create_payment(paid())
    pending = service.create_payment(paid(status="Pendiente"))
    service.update_payment(pending.id, {"status": "Pagado"})

    payment = service.create_payment(paid())

    assert payment.receipt_number == "REC-202404-002"


def test_promoted_payment_does_not_block_numbering_past_retry_limit(service):
    # More receipts exist than retries allowed; each new payment must still
    # land after the highest stored counter instead of failing with a conflict
    assert service.max_retries < 5
    for _ in range(5):
        service.create_payment(paid())
    pending = service.create_payment(paid(status="Pendiente"))
    service.update_payment(pending.id, {"status": "Pagado"})

    receipts = [service.create_payment(paid()).receipt_number for _ in range(3)]

    assert receipts == ["REC-202404-006", "REC-202404-007", "REC-202404-008"]


def test_highest_counter_compares_numerically(service, session):
    for receipt in ("REC-202404-999", "REC-202404-1000", "REC-202403-2000", "REC-202404-abc"):
        session.add(Payment(**paid(), receipt_number=receipt))
    session.commit()

    assert service.highest_counter("REC-202404") == 1000
    assert service.highest_counter("REC-202405") is None


def test_monthly_prefix_with_like_wildcards_is_matched_literally(session, settings, clock):
    settings.receipt_prefix = "R_C"
    settings.receipt_counter_reset = "monthly"
    service = PaymentService(session, settings, now=clock)
    session.add(Payment(**paid(), receipt_number="RXC-202404-050"))
    session.commit()

    payment = service.create_payment(paid())

    assert payment.receipt_number == "R_C-202404-001"
    assert service.find_latest_paid("R_C-202404").receipt_number == "R_C-202404-001"


def test_created_at_is_timezone_aware(service):
    payment = service.create_payment(paid(status="Pendiente"))
    unsaved = Payment(**paid())

    assert unsaved.created_at.tzinfo is not None
    assert utcnow().utcoffset() == timedelta(0)
    assert payment.created_at is not None


def test_concurrent_reads_compute_the_same_number(database, settings, clock):
    with database.session() as s1, database.session() as s2:
        a = PaymentService(s1, settings, now=clock)
        b = PaymentService(s2, settings, now=clock)
        a.create_payment(paid())

        # Both requests read "latest paid" before either inserts
        assert a.sequencer.next_receipt_number("Pagado") == "REC-202404-002"
        assert b.sequencer.next_receipt_number("Pagado") == "REC-202404-002"


def test_concurrent_insert_is_retried_with_next_number(database, settings, clock, monkeypatch):
    with database.session() as s1, database.session() as s2:
        a = PaymentService(s1, settings, now=clock)
        b = PaymentService(s2, settings, now=clock)
        original_lookup = a.find_latest_paid
        competitors = []

        def racing_lookup(prefix=None):
            latest = original_lookup(prefix)
            if not competitors:
                # Another request completes between our read and our insert
                competitors.append(b.create_payment(paid(student_id="stu-002")))
            return latest

        monkeypatch.setattr(a, "find_latest_paid", racing_lookup)

        payment = a.create_payment(paid())

        assert competitors[0].receipt_number == "REC-202404-001"
        assert payment.receipt_number == "REC-202404-002"

    with database.session() as session:
        receipts = [p.receipt_number for p in session.exec(select(Payment)).all()]
    assert sorted(receipts) == ["REC-202404-001", "REC-202404-002"]


def test_conflict_without_retries_is_reported(database, settings, clock, monkeypatch):
    settings.receipt_max_retries = 0
    with database.session() as s1, database.session() as s2:
        a = PaymentService(s1, settings, now=clock)
        b = PaymentService(s2, settings, now=clock)
        original_lookup = a.find_latest_paid

        def racing_lookup(prefix=None):
            latest = original_lookup(prefix)
            b.create_payment(paid(student_id="stu-002"))
            return latest

        monkeypatch.setattr(a, "find_latest_paid", racing_lookup)

        with pytest.raises(ReceiptConflictError) as exc_info:
            a.create_payment(paid())

    assert exc_info.value.receipt_number == "REC-202404-001"
    with database.session() as session:
        assert count_payments(session) == 1


def test_find_by_filter_sorts_by_date_desc(service):
    service.create_payment(paid(date="2024-01-10"))
    service.create_payment(paid(date="2024-03-10", status="Pendiente"))
    service.create_payment(paid(date="2024-02-10", student_id="stu-002"))

    dates = [p.date for p in service.find_by_filter()]
    assert dates == ["2024-03-10", "2024-02-10", "2024-01-10"]

    assert [p.date for p in service.find_by_filter(student_id="stu-002")] == ["2024-02-10"]
    assert [p.date for p in service.find_by_filter(status="Pendiente")] == ["2024-03-10"]
    assert [p.date for p in service.find_by_filter(start_date="2024-02-01", end_date="2024-02-28")] == [
        "2024-02-10"
    ]


def test_range_summary_groups_by_status_and_method(service):
    service.create_payment(paid(amount=100.0, date="2024-04-01"))
    service.create_payment(paid(amount=50.0, date="2024-04-02"))
    service.create_payment(paid(amount=70.0, date="2024-04-03", payment_method="Transferencia"))
    service.create_payment(paid(amount=30.0, date="2024-04-04", status="Pendiente"))
    service.create_payment(paid(amount=999.0, date="2024-05-01"))

    result = service.range_summary("2024-04-01", "2024-04-30")

    rows = {(r["status"], r["payment_method"]): (r["total"], r["count"]) for r in result["summary"]}
    assert rows == {
        ("Pagado", "Efectivo"): (150.0, 2),
        ("Pagado", "Transferencia"): (70.0, 1),
        ("Pendiente", "Efectivo"): (30.0, 1),
    }
    assert result["totals"] == {"total": 250.0, "count": 4}


def test_range_summary_rejects_inverted_range(service):
    with pytest.raises(ValueError):
        service.range_summary("2024-05-01", "2024-04-01")
