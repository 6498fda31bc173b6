import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.audit import log_action
from ...core.config import Settings
from ...schemas import CreatedResponse
from ...services.inventory_service import InventoryService
from ..dependencies import get_app_settings, get_session
from .models import InventoryItem, InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_inventory_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> InventoryService:
    return InventoryService(session, low_stock_threshold=settings.low_stock_threshold)


@router.get("/inventory", response_model=list[InventoryItem])
def api_get_inventory(
    category: Optional[str] = None,
    item_status: Optional[str] = Query(None, alias="status"),
    location: Optional[str] = None,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        return service.list_items(category=category, status=item_status, location=location)
    except SQLAlchemyError:
        logger.exception("Error obteniendo el inventario")
        raise HTTPException(status_code=500, detail="Error al obtener el inventario")


@router.get("/inventory/{item_id}", response_model=InventoryItem)
def api_get_inventory_item(
    item_id: uuid.UUID,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        return service.get_by_id(item_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/inventory", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def api_create_inventory_item(
    item: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        new_item = service.create_item(item.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error agregando item al inventario")
        raise HTTPException(status_code=500, detail="Error al agregar el item al inventario")
    return {"success": True, "id": new_item.id}


@router.put("/inventory/{item_id}", response_model=InventoryItem)
def api_update_inventory_item(
    item_id: uuid.UUID,
    item_update: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Update an item. The stock status keeps the value derived at creation."""
    update_fields = item_update.model_dump(exclude_unset=True)
    try:
        return service.update_item(item_id, update_fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error actualizando item de inventario")
        raise HTTPException(status_code=500, detail="Error al actualizar el item")


@router.delete("/inventory/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_inventory_item(
    item_id: uuid.UUID,
    request: Request,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        service.delete(item_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error eliminando item de inventario")
        raise HTTPException(status_code=500, detail="Error al eliminar el item")
    log_action("DELETE", "inventory", str(item_id), request=request)
    return
