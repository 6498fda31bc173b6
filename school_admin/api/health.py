import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from ..db.engine import Database
from .dependencies import get_database

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", tags=["System"])
def get_system_health(db: Database = Depends(get_database)):
    """
    Returns the system health status including database reachability.
    """
    try:
        db.ping()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Base de datos no disponible")
    return {"status": "ok", "database": "ok"}
