import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.schemas.product import (
    CategoryProductsResponse,
    HomeRail,
    ListedProduct,
    PopularPill,
    ProductDetail,
    ProductSummary,
    SimilarProduct,
)
from app.schemas.variant import ProductVariant, VariantSelector, VariantSwitchResponse
from app.services.product_service import (
    get_home_rails,
    get_popular_pills,
    get_product_by_key_name,
    get_product_variants,
    get_products_by_category,
    get_similar_products,
    get_top_products,
)
from app.services.search_service import run_search
from app.services.variant_service import (
    VARIANT_ATTRIBUTES,
    build_variant_selectors,
    product_url,
    resolve_variant,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


def _require_product(db: Session, key_name: str) -> ProductDetail:
    product = get_product_by_key_name(db, key_name)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _siblings(db: Session, product: ProductDetail) -> List[ProductVariant]:
    if not product.vertical_id:
        return [ProductVariant.model_validate(product.model_dump())]
    return get_product_variants(db, product.vertical_id)


# SEARCH
@router.get("/search", response_model=List[ProductSummary])
def search(
    q: Optional[str] = "",
    page: Optional[str] = None,
    limit: Optional[str] = None,
    entityid: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return run_search(db, q=q, page=page, limit=limit, entityid=entityid)


# POPULAR PILLS
@router.get("/popular-pills", response_model=List[PopularPill])
def popular_pills(db: Session = Depends(get_db)):
    try:
        return get_popular_pills(db)
    except SQLAlchemyError:
        logger.exception("Failed to fetch popular pills")
        return []


# TOP PRODUCTS
@router.get("/top", response_model=List[ListedProduct])
def top_products(limit: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return get_top_products(db, limit)
    except SQLAlchemyError:
        logger.exception("Failed to fetch top products")
        raise HTTPException(status_code=500, detail="Failed to fetch top products")


# VARIANTS OF A VERTICAL
@router.get("/product-variants", response_model=List[ProductVariant])
def product_variants(vertical_id: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return get_product_variants(db, vertical_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch product variants (vertical_id=%r)", vertical_id)
        return []


# HOME RAILS
@router.get("/home-rails", response_model=List[HomeRail])
def home_rails(db: Session = Depends(get_db)):
    try:
        return get_home_rails(db)
    except SQLAlchemyError:
        logger.exception("Failed to fetch home rails")
        raise HTTPException(status_code=500, detail="Failed to fetch home rails")


# CATEGORY LISTING
@router.get("/category/{category_name}", response_model=CategoryProductsResponse)
def products_by_category(category_name: str, db: Session = Depends(get_db)):
    try:
        return get_products_by_category(db, category_name)
    except SQLAlchemyError:
        logger.exception("Failed to fetch products for category %r", category_name)
        raise HTTPException(status_code=500, detail="Failed to fetch products for category")


# SIMILAR PRODUCTS
@router.get("/similar/{key_name}", response_model=List[SimilarProduct])
def similar_products(key_name: str, db: Session = Depends(get_db)):
    try:
        product = get_product_by_key_name(db, key_name)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        if not product.vertical_id:
            raise HTTPException(status_code=400, detail="Product has no vertical_id")
        return get_similar_products(db, product.vertical_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch similar products for %r", key_name)
        raise HTTPException(status_code=500, detail="Failed to fetch similar products")


# VARIANT SELECTORS
@router.get("/{key_name}/variant-options", response_model=List[VariantSelector])
def variant_options(key_name: str, db: Session = Depends(get_db)):
    """
    Selectable storage / RAM / colour values across the product's vertical.
    Attributes no sibling carries are omitted.
    """
    product = _require_product(db, key_name)
    try:
        variants = _siblings(db, product)
    except SQLAlchemyError:
        logger.exception("Failed to fetch variants for %r", key_name)
        return []
    return build_variant_selectors(variants, product)


# VARIANT SWITCH
@router.get("/{key_name}/switch-variant", response_model=VariantSwitchResponse)
def switch_variant(
    key_name: str,
    attribute: str,
    value: str,
    db: Session = Depends(get_db),
):
    """
    Best matching sibling when `attribute` changes to `value`:
    keep both other attributes, then one of them, then any sibling.
    """
    if attribute not in VARIANT_ATTRIBUTES:
        raise HTTPException(
            status_code=400,
            detail=f"attribute must be one of {', '.join(VARIANT_ATTRIBUTES)}",
        )

    product = _require_product(db, key_name)
    match = resolve_variant(_siblings(db, product), product, attribute, value)
    if match is None:
        logger.error("No variant found for %s: %s (from %s)", attribute, value, key_name)
        raise HTTPException(status_code=404, detail=f"No variant found for {attribute}: {value}")
    return VariantSwitchResponse(key_name=match.key_name, url=product_url(match.key_name))


# GET BY KEY NAME (must stay after the fixed paths above)
@router.get("/{key_name}", response_model=ProductDetail)
def product_by_key_name(key_name: str, db: Session = Depends(get_db)):
    try:
        product = get_product_by_key_name(db, key_name)
    except SQLAlchemyError:
        logger.exception("Failed to fetch product %r", key_name)
        raise HTTPException(status_code=500, detail="Failed to fetch product by key name")
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
