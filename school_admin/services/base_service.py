# school_admin/services/base_service.py
"""
BaseCRUDService: Generic service class for standard CRUD operations.
Reduces code duplication across domain-specific services.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.constants import DATE_FORMAT

# Generic type for SQLModel models
ModelType = TypeVar("ModelType")


def today() -> str:
    """Current calendar date as 'YYYY-MM-DD'."""
    return datetime.now().strftime(DATE_FORMAT)


def validate_date(value: str, field: str = "fecha") -> str:
    """
    Check that `value` is a 'YYYY-MM-DD' date.

    Raises:
        ValueError: if the value does not parse.
    """
    try:
        datetime.strptime(value, DATE_FORMAT)
    except (TypeError, ValueError):
        raise ValueError(f"La {field} '{value}' no tiene el formato YYYY-MM-DD.")
    return value


def is_blank(value: Any) -> bool:
    """True for None and for empty or whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class BaseCRUDService(Generic[ModelType]):
    """
    Base class providing generic CRUD (Create, Read, Update, Delete) operations.

    Store errors (SQLAlchemyError) are rolled back and re-raised; missing
    records raise FileNotFoundError.

    Usage:
        class MyService(BaseCRUDService[MyModel]):
            def __init__(self, session: Session):
                super().__init__(session, MyModel)
    """

    # Fields a generic update may never touch
    immutable_fields = ("id", "created_at")

    def __init__(self, session: Session, model: Type[ModelType]):
        """
        Initialize the service with a database session and model class.

        Args:
            session: SQLModel database session.
            model: The SQLModel class this service manages.
        """
        self.session = session
        self.model = model

    def get_all(self) -> List[ModelType]:
        """Retrieve all records of the model."""
        statement = select(self.model)
        return self.session.exec(statement).all()

    def find(self, id: uuid.UUID | str) -> Optional[ModelType]:
        """Retrieve a record by primary key, or None."""
        if isinstance(id, str):
            try:
                id = uuid.UUID(id)
            except ValueError:
                return None
        return self.session.get(self.model, id)

    def get_by_id(self, id: uuid.UUID | str) -> ModelType:
        """
        Retrieve a single record by its primary key.

        Raises:
            FileNotFoundError: if not found.
        """
        record = self.find(id)
        if not record:
            raise FileNotFoundError(f"{self.model.__name__} {id} no encontrado.")
        return record

    def insert(self, record: ModelType) -> ModelType:
        """Persist a new model instance and return it refreshed."""
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
            return record
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def create(self, data: Dict[str, Any]) -> ModelType:
        """Create a new record from a dict of field values."""
        return self.insert(self.model(**data))

    def update(self, id: uuid.UUID | str, data: Dict[str, Any]) -> ModelType:
        """
        Update an existing record with the given fields.

        Raises:
            FileNotFoundError: if not found.
        """
        record = self.get_by_id(id)

        for key, value in data.items():
            if key in self.immutable_fields:
                continue
            setattr(record, key, value)

        return self.insert(record)

    def delete(self, id: uuid.UUID | str) -> None:
        """
        Delete a record by its primary key.

        Raises:
            FileNotFoundError: if not found.
        """
        record = self.get_by_id(id)
        try:
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
