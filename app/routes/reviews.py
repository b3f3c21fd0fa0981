import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.schemas.product import ReviewResponse
from app.services.product_service import get_product_by_key_name, get_product_reviews

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


@router.get("/{key_name}", response_model=List[ReviewResponse])
def reviews_for_product(key_name: str, db: Session = Depends(get_db)):
    try:
        product = get_product_by_key_name(db, key_name)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return get_product_reviews(db, product.id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch reviews for %r", key_name)
        raise HTTPException(status_code=500, detail="Failed to fetch reviews by keyName")
