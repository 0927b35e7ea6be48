import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.config import get_settings
from store_sales.database.session import get_db
from store_sales.models.sale import Sale
from store_sales.models.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    settings = get_settings()
    payload = {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": datetime.now(timezone.utc).isoformat(),
    }
    try:
        payload["stores"] = db.scalar(select(func.count(Store.id)))
        payload["sales"] = db.scalar(select(func.count(Sale.id)))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        payload["status"] = "degraded"
        return JSONResponse(status_code=503, content=payload)
    return payload
