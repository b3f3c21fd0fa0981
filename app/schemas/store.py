from typing import List, Optional

from pydantic import BaseModel


class StoreListing(BaseModel):
    name: str
    image: Optional[str] = None
    rating: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: str
    price: float
    offers: List[str] = []
    distance: Optional[float] = None  # km, only when the shopper position is known
    affiliate_link: Optional[str] = None
