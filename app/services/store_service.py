import json
import logging
import math
import re
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.product import Product
from app.models.store import Store, StoreProductMapping
from app.schemas.store import StoreListing

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

_ADJACENT_QUOTED = re.compile(r'"\s+"')
_QUOTED = re.compile(r'"([^"]*)"')


def default_offers() -> List[str]:
    return list(settings.DEFAULT_STORE_OFFERS)


# --------------------------
# OFFERS PARSING
# --------------------------
def parse_offers(raw: Any) -> List[str]:
    """
    Offers are imported as text and come in three shapes: a JSON array,
    a JSON array missing commas ('["a" "b"]'), or a Postgres array
    literal ('{"a","b"}'). Anything else falls back to the default list.
    """
    if not raw:
        return []
    if isinstance(raw, list):
        return [str(item) for item in raw]
    if not isinstance(raw, str):
        return default_offers()

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed offers JSON: %s", exc)
        return _repair_offers(raw.strip())

    if isinstance(parsed, list):
        return [str(item) for item in parsed]
    if isinstance(parsed, str):
        return [parsed]
    return default_offers()


def _repair_offers(text: str) -> List[str]:
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(_ADJACENT_QUOTED.sub('", "', text))
        except json.JSONDecodeError as exc:
            logger.error("Failed to fix malformed offers JSON: %s", exc)
            return default_offers()
        if isinstance(parsed, list):
            return [str(item) for item in parsed]
        return default_offers()

    if text.startswith("{") and text.endswith("}"):
        matches = _QUOTED.findall(text[1:-1])
        if matches:
            return matches
        return default_offers()

    return default_offers()


# --------------------------
# DISTANCE
# --------------------------
def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance, rounded to 0.1 km."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 1)


def parse_coordinate(value: Any, bound: float) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or abs(number) > bound:
        return None
    return number


# --------------------------
# STORES FOR PRODUCT
# --------------------------
def get_stores_for_product(
    db: Session,
    key_name: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> List[StoreListing]:
    """
    Stores carrying the product, cheapest first. Database errors propagate.
    """
    if not key_name:
        return []

    rows = (
        db.query(Store, StoreProductMapping)
        .join(StoreProductMapping, StoreProductMapping.store_id == Store.id)
        .join(Product, StoreProductMapping.product_id == Product.id)
        .filter(Product.key_name == key_name)
        .order_by(StoreProductMapping.price.asc(), Store.id.asc())
        .all()
    )

    has_position = latitude is not None and longitude is not None
    listings = []
    for store, mapping in rows:
        distance = None
        if has_position and store.latitude is not None and store.longitude is not None:
            distance = distance_km(latitude, longitude, store.latitude, store.longitude)

        listings.append(
            StoreListing(
                name=store.name,
                image=store.image,
                rating=store.rating,
                latitude=store.latitude,
                longitude=store.longitude,
                city=store.city or settings.DEFAULT_STORE_CITY,
                price=mapping.price,
                offers=parse_offers(mapping.offers),
                distance=distance,
                affiliate_link=mapping.affiliate_link,
            )
        )
    return listings
