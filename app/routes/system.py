import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.database.connection import get_db
from app.schemas.system import HealthCheckResponse, RootResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/api/health", response_model=HealthCheckResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Lightweight public health check with a SELECT 1 against the pool.
    """
    db_ok = True
    try:
        db.execute(select(1))
    except SQLAlchemyError:
        logger.exception("Health check database probe failed")
        db_ok = False

    return HealthCheckResponse(
        status="ok" if db_ok else "degraded",
        timestamp=datetime.utcnow(),
        db_ok=db_ok,
    )


@router.get("/", response_model=RootResponse)
def root():
    return RootResponse(message=f"{settings.APP_NAME} is running")
