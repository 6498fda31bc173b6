# school_admin/models/inventory.py
"""
Inventory item model.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from .common import utcnow


class InventoryItem(SQLModel, table=True):
    """
    Inventory item.

    Fields:
    - name, category, quantity: required
    - status: derived from quantity when the item is created
      (Disponible, Bajo stock, Agotado)
    - last_updated: 'YYYY-MM-DD' of the last write
    """

    __tablename__ = "inventario"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False, index=True)
    category: str = Field(nullable=False, index=True)
    quantity: int = Field(nullable=False)
    location: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    serial_number: Optional[str] = Field(default=None)
    status: str = Field(nullable=False)
    last_updated: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow)
