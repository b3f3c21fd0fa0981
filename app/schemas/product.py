from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel


class ProductSummary(BaseModel):
    name: str
    image: Optional[str] = None
    key_name: str
    vertical_name: Optional[str] = None
    min_price: Optional[float] = None
    store_count: int = 0


class ReviewResponse(BaseModel):
    review: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    review_images: Optional[List[str]] = None
    user_name: Optional[str] = None
    user_image: Optional[str] = None


class ProductDetail(BaseModel):
    id: int
    name: str
    key_name: str
    image: Optional[str] = None
    highlights: Optional[Any] = None
    specifications: Optional[Any] = None
    storage: Optional[str] = None
    ram: Optional[str] = None
    colour: Optional[str] = None
    vertical_id: Optional[int] = None
    vertical_name: Optional[str] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    review_count: Optional[int] = None
    mrp: Optional[float] = None
    parent_category_id: Optional[int] = None
    sub_category_id: Optional[int] = None
    parent_category_name: Optional[str] = None
    sub_category_name: Optional[str] = None
    reviews: List[ReviewResponse] = []


class SimilarProduct(BaseModel):
    verticalName: str
    productName: str
    key_name: str
    productImage: str
    price: Optional[float] = None


class PopularPill(BaseModel):
    id: int
    header: str

    class Config:
        from_attributes = True


class ListedProduct(BaseModel):
    name: str
    key_name: Optional[str] = None
    image_url: Optional[str] = None
    min_price: Optional[float] = None


class CategoryProductsResponse(BaseModel):
    category: str
    products: List[ListedProduct]


class HomeRail(BaseModel):
    id: int
    header: str
    products: List[ListedProduct]
