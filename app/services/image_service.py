from typing import List

from sqlalchemy.orm import Session

from app.models.entity import EntityImage
from app.models.product import Product

GALLERY_IMAGE_TYPE = "vertical_image_gallery"


def get_product_gallery(db: Session, key_name: str) -> List[EntityImage]:
    if not key_name:
        return []

    return (
        db.query(EntityImage)
        .join(Product, Product.id == EntityImage.entity_id)
        .filter(
            EntityImage.entity_type == "product",
            EntityImage.image_type == GALLERY_IMAGE_TYPE,
            Product.key_name == key_name,
        )
        .order_by(EntityImage.id.asc())
        .all()
    )
