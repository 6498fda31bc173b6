# school_admin/api/inventory/models.py
import uuid
from datetime import datetime
from typing import Optional

from ...schemas import CamelModel


class InventoryItemCreate(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    location: Optional[str] = None
    description: Optional[str] = None
    serial_number: Optional[str] = None


class InventoryItemUpdate(InventoryItemCreate):
    pass


class InventoryItem(CamelModel):
    id: uuid.UUID
    name: str
    category: str
    quantity: int
    location: Optional[str] = None
    description: Optional[str] = None
    serial_number: Optional[str] = None
    status: str
    last_updated: str
    created_at: datetime
