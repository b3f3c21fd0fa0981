import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.schemas.store import StoreListing
from app.services.store_service import get_stores_for_product, parse_coordinate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores", tags=["Stores"])


@router.get("/for-product/{key_name}", response_model=List[StoreListing])
def stores_for_product(
    key_name: str,
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Stores selling the product, cheapest first. `lat`/`lon` (shopper
    position) enable per-store distances; malformed values are ignored.
    """
    latitude = parse_coordinate(lat, 90)
    longitude = parse_coordinate(lon, 180)
    try:
        return get_stores_for_product(db, key_name, latitude, longitude)
    except SQLAlchemyError:
        logger.exception("Failed to fetch stores for %r", key_name)
        raise HTTPException(status_code=500, detail="Failed to fetch stores for product")
