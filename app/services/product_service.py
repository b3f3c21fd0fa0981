import logging
from typing import Any, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from app.core.config import settings
from app.enums.catalog import EntityPage, EntityType
from app.models.entity import Entity, EntityProductMapping
from app.models.product import Category, Product, Vertical
from app.models.review import RatingReview, User
from app.models.store import StoreProductMapping
from app.schemas.product import (
    CategoryProductsResponse,
    HomeRail,
    ListedProduct,
    ProductDetail,
    ReviewResponse,
    SimilarProduct,
)
from app.schemas.variant import ProductVariant
from app.services.search_service import parse_positive_int

logger = logging.getLogger(__name__)


def _listing_limit(value: Any, default: int) -> int:
    limit = parse_positive_int(value, default)
    if limit > settings.LISTING_MAX_LIMIT:
        return default
    return limit


def _listing_query(db: Session):
    return (
        db.query(
            Product.name,
            Product.key_name,
            Product.image,
            func.min(StoreProductMapping.price).label("min_price"),
        )
        .outerjoin(StoreProductMapping, StoreProductMapping.product_id == Product.id)
    )


_LISTING_GROUP = (Product.id, Product.name, Product.key_name, Product.image)


def _to_listed(rows) -> List[ListedProduct]:
    return [
        ListedProduct(
            name=row.name,
            key_name=row.key_name,
            image_url=row.image or None,
            min_price=float(row.min_price) if row.min_price is not None else None,
        )
        for row in rows
    ]


# --------------------------
# PRODUCT BY KEY NAME
# --------------------------
def get_product_reviews(db: Session, product_id: int) -> List[ReviewResponse]:
    rows = (
        db.query(
            RatingReview.review,
            RatingReview.rating,
            RatingReview.created_at,
            RatingReview.images.label("review_images"),
            User.name.label("user_name"),
            User.user_image,
        )
        .outerjoin(User, RatingReview.user_id == User.id)
        .filter(
            RatingReview.entity_type == "product",
            RatingReview.entity_id == product_id,
        )
        .order_by(RatingReview.id)
        .all()
    )
    return [
        ReviewResponse(
            review=row.review,
            rating=row.rating,
            created_at=row.created_at,
            review_images=row.review_images,
            user_name=row.user_name,
            user_image=row.user_image,
        )
        for row in rows
    ]


def get_product_by_key_name(db: Session, key_name: str) -> Optional[ProductDetail]:
    if not key_name:
        return None

    parent_cat = aliased(Category)
    sub_cat = aliased(Category)
    row = (
        db.query(
            Product,
            Vertical.name.label("vertical_name"),
            parent_cat.name.label("parent_category_name"),
            sub_cat.name.label("sub_category_name"),
        )
        .outerjoin(parent_cat, Product.parent_category_id == parent_cat.id)
        .outerjoin(sub_cat, Product.sub_category_id == sub_cat.id)
        .outerjoin(Vertical, Product.vertical_id == Vertical.id)
        .filter(Product.key_name == key_name)
        .first()
    )
    if not row:
        return None

    product = row.Product
    return ProductDetail(
        id=product.id,
        name=product.name,
        key_name=product.key_name,
        image=product.image,
        highlights=product.highlights,
        specifications=product.specifications,
        storage=product.storage,
        ram=product.ram,
        colour=product.colour,
        vertical_id=product.vertical_id,
        vertical_name=row.vertical_name,
        rating=product.rating,
        rating_count=product.rating_count,
        review_count=product.review_count,
        mrp=product.mrp,
        parent_category_id=product.parent_category_id,
        sub_category_id=product.sub_category_id,
        parent_category_name=row.parent_category_name,
        sub_category_name=row.sub_category_name,
        reviews=get_product_reviews(db, product.id),
    )


# --------------------------
# VARIANTS
# --------------------------
def get_product_variants(db: Session, vertical_id: Any) -> List[ProductVariant]:
    """
    All siblings of a vertical, oldest first, so "first match" is stable.
    A non-numeric vertical_id yields no variants.
    """
    valid_id = parse_positive_int(vertical_id, None)
    if valid_id is None:
        return []

    products = (
        db.query(Product)
        .filter(Product.vertical_id == valid_id)
        .order_by(Product.id.asc())
        .all()
    )
    return [ProductVariant.model_validate(p) for p in products]


# --------------------------
# SIMILAR PRODUCTS
# --------------------------
def get_similar_products(db: Session, vertical_id: int) -> List[SimilarProduct]:
    """
    The cheapest product of every other vertical. Products without any
    store mapping have no price and are skipped.
    """
    min_price = func.min(StoreProductMapping.price)
    ranked = (
        db.query(
            Vertical.id.label("vertical_id"),
            Vertical.name.label("vertical_name"),
            Product.name.label("product_name"),
            Product.key_name.label("key_name"),
            Product.image.label("product_image"),
            min_price.label("min_price"),
            func.row_number()
            .over(partition_by=Vertical.id, order_by=(min_price.asc(), Product.id.asc()))
            .label("rn"),
        )
        .join(Product, Product.vertical_id == Vertical.id)
        .join(StoreProductMapping, StoreProductMapping.product_id == Product.id)
        .filter(Vertical.id != vertical_id)
        .group_by(Vertical.id, Vertical.name, Product.id, Product.name, Product.key_name, Product.image)
        .subquery()
    )

    rows = (
        db.query(
            ranked.c.vertical_name,
            ranked.c.product_name,
            ranked.c.key_name,
            ranked.c.product_image,
            ranked.c.min_price,
        )
        .filter(ranked.c.rn == 1)
        .order_by(ranked.c.vertical_id.asc())
        .all()
    )
    return [
        SimilarProduct(
            verticalName=row.vertical_name,
            productName=row.product_name,
            key_name=row.key_name,
            productImage=row.product_image or settings.PLACEHOLDER_IMAGE_URL,
            price=float(row.min_price) if row.min_price is not None else None,
        )
        for row in rows
    ]


# --------------------------
# CURATED LISTS
# --------------------------
def get_popular_pills(db: Session) -> List[Entity]:
    return (
        db.query(Entity)
        .filter(
            Entity.entity_type == EntityType.popular_pills.value,
            Entity.page == EntityPage.search.value,
        )
        .order_by(Entity.rank.asc())
        .all()
    )


def get_home_rails(db: Session, limit_per_rail: Any = None) -> List[HomeRail]:
    limit = _listing_limit(limit_per_rail, settings.RAIL_PRODUCTS_LIMIT)
    rails = (
        db.query(Entity)
        .filter(
            Entity.page == EntityPage.home.value,
            Entity.entity_type == EntityType.rail.value,
        )
        .order_by(Entity.rank.asc())
        .all()
    )

    result = []
    for rail in rails:
        rows = (
            _listing_query(db)
            .join(EntityProductMapping, EntityProductMapping.product_id == Product.id)
            .filter(EntityProductMapping.entity_id == rail.id)
            .group_by(*_LISTING_GROUP)
            .order_by(func.min(EntityProductMapping.id))
            .limit(limit)
            .all()
        )
        result.append(HomeRail(id=rail.id, header=rail.header, products=_to_listed(rows)))

    logger.debug("Loaded %d home rails", len(result))
    return result


# --------------------------
# TOP / CATEGORY LISTINGS
# --------------------------
def get_top_products(db: Session, limit: Any = None) -> List[ListedProduct]:
    valid_limit = _listing_limit(limit, settings.TOP_PRODUCTS_LIMIT)
    rows = _listing_query(db).group_by(*_LISTING_GROUP).order_by(Product.id.asc()).limit(valid_limit).all()
    return _to_listed(rows)


def get_products_by_category(
    db: Session,
    category_name: Optional[str],
    limit: Any = None,
) -> CategoryProductsResponse:
    """
    category_name comes from the URL, so it is matched case-insensitively
    ("mobiles" finds "Mobiles").
    """
    if not category_name:
        return CategoryProductsResponse(category="Unknown", products=[])

    category = (
        db.query(Category)
        .filter(func.lower(Category.name) == category_name.lower())
        .first()
    )
    if not category:
        return CategoryProductsResponse(category="Unknown", products=[])

    valid_limit = _listing_limit(limit, settings.CATEGORY_PRODUCTS_LIMIT)
    rows = (
        _listing_query(db)
        .filter(Product.parent_category_id == category.id)
        .group_by(*_LISTING_GROUP)
        .order_by(Product.id.asc())
        .limit(valid_limit)
        .all()
    )
    return CategoryProductsResponse(category=category.name, products=_to_listed(rows))
