import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.schemas.catalog import GalleryImage, VerticalResponse
from app.services.image_service import get_product_gallery
from app.services.vertical_service import get_all_verticals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/images/gallery/{key_name}", response_model=List[GalleryImage])
def product_gallery(key_name: str, db: Session = Depends(get_db)):
    try:
        return get_product_gallery(db, key_name)
    except SQLAlchemyError:
        logger.exception("Failed to fetch image gallery for %r", key_name)
        return []


@router.get("/verticals", response_model=List[VerticalResponse])
def verticals(db: Session = Depends(get_db)):
    try:
        return get_all_verticals(db)
    except SQLAlchemyError:
        logger.exception("Failed to fetch verticals")
        return []
