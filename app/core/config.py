from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "ora catalog API"

    # DB
    DATABASE_URL: str = "sqlite:///./catalog.db"
    DB_POOL_SIZE: int = 1
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 10
    DB_POOL_RECYCLE: int = 10
    DB_SSL_REQUIRE: bool = False

    # Search / listings
    SEARCH_PAGE_SIZE: int = 20
    SEARCH_MAX_LIMIT: int = 100
    SEARCH_MAX_PAGE: int = 10000
    TOP_PRODUCTS_LIMIT: int = 3
    CATEGORY_PRODUCTS_LIMIT: int = 10
    RAIL_PRODUCTS_LIMIT: int = 12
    LISTING_MAX_LIMIT: int = 100

    # Stores
    DEFAULT_STORE_OFFERS: List[str] = [
        "Service center replacement/repair",
        "GST invoice available",
    ]
    DEFAULT_STORE_CITY: str = "Local Area"

    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/160x160?text=No+Image"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
