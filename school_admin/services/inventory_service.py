# school_admin/services/inventory_service.py
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from ..core.constants import ALL_CATEGORIES, InventoryStatus
from ..models import InventoryItem
from .base_service import BaseCRUDService, is_blank, today

logger = logging.getLogger(__name__)


def derive_inventory_status(quantity: int, low_stock_threshold: int = 10) -> InventoryStatus:
    """Agotado at zero or less, Bajo stock up to the threshold, Disponible above."""
    if quantity <= 0:
        return InventoryStatus.AGOTADO
    if quantity <= low_stock_threshold:
        return InventoryStatus.BAJO_STOCK
    return InventoryStatus.DISPONIBLE


class InventoryService(BaseCRUDService[InventoryItem]):
    # status is only derived at creation time
    immutable_fields = ("id", "created_at", "status")

    def __init__(self, session: Session, low_stock_threshold: int = 10):
        super().__init__(session, InventoryItem)
        self.low_stock_threshold = low_stock_threshold

    def list_items(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[InventoryItem]:
        statement = select(InventoryItem)
        if category and category != ALL_CATEGORIES:
            statement = statement.where(InventoryItem.category == category)
        if status:
            statement = statement.where(InventoryItem.status == status)
        if location:
            statement = statement.where(InventoryItem.location == location)
        return self.session.exec(statement.order_by(InventoryItem.name)).all()

    def create_item(self, data: Dict[str, Any]) -> InventoryItem:
        if is_blank(data.get("name")) or is_blank(data.get("category")) or data.get("quantity") is None:
            raise ValueError("Nombre, categoría y cantidad son campos requeridos")

        fields = dict(data)
        fields["status"] = derive_inventory_status(fields["quantity"], self.low_stock_threshold).value
        fields["last_updated"] = today()

        item = self.create(fields)
        logger.info(f"Item de inventario creado (ID: {item.id}): {item.name} x{item.quantity} [{item.status}].")
        return item

    def update_item(self, item_id: uuid.UUID | str, data: Dict[str, Any]) -> InventoryItem:
        fields = dict(data)
        for required in ("name", "category"):
            if required in fields and is_blank(fields[required]):
                raise ValueError(f"El campo '{required}' no puede estar vacío.")
        if "quantity" in fields and fields["quantity"] is None:
            raise ValueError("La cantidad no puede estar vacía.")
        fields["last_updated"] = today()
        return self.update(item_id, fields)
