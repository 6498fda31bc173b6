"""
School admin - test configuration and fixtures.
Each test gets its own SQLite file under tmp_path.
"""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from school_admin.core.config import Settings
from school_admin.db.engine import Database
from school_admin.main import create_app


class FrozenClock:
    """Callable clock whose current moment can be moved by the test."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.sqlite'}",
        audit_log_file=str(tmp_path / "audit.log"),
        receipt_counter_reset="never",
        receipt_max_retries=3,
        payment_methods="Efectivo,Tarjeta,Transferencia",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 4, 10, 9, 30))


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.create_db_and_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as session:
        yield session


@pytest.fixture
def client(settings, clock):
    app = create_app(settings, clock=clock)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def payment_data():
    return {
        "studentId": "stu-001",
        "amount": 1500.0,
        "concept": "Colegiatura abril",
        "status": "Pagado",
        "paymentMethod": "Efectivo",
        "date": "2024-04-05",
    }
