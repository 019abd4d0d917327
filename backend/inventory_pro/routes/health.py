import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.database import get_db, ping
from inventory_pro.models.tenant import utcnow


router = APIRouter()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@router.get("/")
def root():
    return {
        "message": "Inventory Pro API",
        "version": API_VERSION,
        "environment": settings.env,
        "timestamp": utcnow().isoformat(),
    }


@router.get("/health")
def health():
    return {"status": "healthy", "timestamp": utcnow().isoformat(), "environment": settings.env}


@router.get("/api/health/db")
def database_health(db: Session = Depends(get_db)):
    try:
        ping(db)
    except SQLAlchemyError:
        logger.error("Database health check failed", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"database": "disconnected", "timestamp": utcnow().isoformat()},
        )
    return {"database": "connected", "timestamp": utcnow().isoformat()}
