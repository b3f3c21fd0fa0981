import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.core.config import settings
from app.models.entity import EntityProductMapping
from app.models.product import Product, Vertical
from app.models.store import StoreProductMapping
from app.schemas.product import ProductSummary

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    offset: int


# --------------------------
# PARAMETER HANDLING
# --------------------------
def parse_positive_int(value: Any, default: Optional[int]) -> Optional[int]:
    """
    Returns value as a positive int, or `default` for anything else
    (None, "", "abc", "2.5", 0, -3, True).
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def resolve_pagination(page: Any = None, limit: Any = None) -> Pagination:
    """
    page is 1-based. Invalid values fall back to defaults instead of erroring.
    """
    valid_page = parse_positive_int(page, 1)
    if valid_page > settings.SEARCH_MAX_PAGE:
        valid_page = settings.SEARCH_MAX_PAGE
    valid_limit = parse_positive_int(limit, settings.SEARCH_PAGE_SIZE)
    if valid_limit > settings.SEARCH_MAX_LIMIT:
        valid_limit = settings.SEARCH_MAX_LIMIT

    return Pagination(
        page=valid_page,
        limit=valid_limit,
        offset=(valid_page - 1) * valid_limit,
    )


def tokenize(query: Optional[str]) -> List[str]:
    if not query:
        return []
    return [term for term in query.strip().split() if term]


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


# --------------------------
# QUERIES
# --------------------------
def _summary_query(db: Session) -> Query:
    # outer join keeps products without any store mapping (min_price NULL, store_count 0)
    return (
        db.query(
            Product.name,
            Product.image,
            Product.key_name,
            Vertical.name.label("vertical_name"),
            func.min(StoreProductMapping.price).label("min_price"),
            func.count(distinct(StoreProductMapping.store_id)).label("store_count"),
        )
        .join(Vertical, Product.vertical_id == Vertical.id)
        .outerjoin(StoreProductMapping, StoreProductMapping.product_id == Product.id)
    )


def _page(query: Query, limit: int, offset: int) -> List[ProductSummary]:
    rows = (
        query
        .group_by(Product.id, Product.name, Product.image, Product.key_name, Vertical.name)
        .order_by(Product.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return [
        ProductSummary(
            name=row.name,
            image=row.image,
            key_name=row.key_name,
            vertical_name=row.vertical_name,
            min_price=float(row.min_price) if row.min_price is not None else None,
            store_count=int(row.store_count or 0),
        )
        for row in rows
    ]


def search_products(
    db: Session,
    query: Optional[str] = "",
    limit: int = 5,
    offset: int = 0,
) -> List[ProductSummary]:
    """
    Every whitespace-separated term must appear in the product name
    (case-insensitive, any order). Empty query returns the whole catalogue.
    Newest first (products.id DESC).
    """
    q = _summary_query(db)
    for term in tokenize(query):
        q = q.filter(Product.name.ilike(_like_pattern(term), escape=LIKE_ESCAPE))
    return _page(q, limit, offset)


def get_products_by_entity_id(
    db: Session,
    entity_id: int,
    limit: int = 20,
    offset: int = 0,
) -> List[ProductSummary]:
    q = (
        _summary_query(db)
        .join(EntityProductMapping, EntityProductMapping.product_id == Product.id)
        .filter(EntityProductMapping.entity_id == entity_id)
    )
    return _page(q, limit, offset)


# --------------------------
# CONTROLLER ENTRY POINT
# --------------------------
def run_search(
    db: Session,
    q: Optional[str] = "",
    page: Any = None,
    limit: Any = None,
    entityid: Any = None,
) -> List[ProductSummary]:
    """
    Curated-list lookup when `entityid` is given, free-text search otherwise.
    Query failures degrade to an empty page.
    """
    pagination = resolve_pagination(page, limit)

    try:
        if entityid not in (None, ""):
            entity_id = parse_positive_int(entityid, None)
            if entity_id is None:
                logger.info("Ignoring malformed entityid=%r", entityid)
                return []
            return get_products_by_entity_id(db, entity_id, pagination.limit, pagination.offset)

        return search_products(db, q or "", pagination.limit, pagination.offset)
    except SQLAlchemyError:
        logger.exception("Product search failed (q=%r, entityid=%r)", q, entityid)
        return []
