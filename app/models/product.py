from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.database.connection import Base


class Vertical(Base):
    __tablename__ = "vertical"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    products = relationship("Product", back_populates="vertical")


class Category(Base):
    __tablename__ = "category"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    key_name = Column(String, unique=True, index=True, nullable=False)  # URL slug
    image = Column(Text, nullable=True)
    highlights = Column(JSON, nullable=True)
    specifications = Column(JSON, nullable=True)

    # variant attributes, e.g. "128GB" / "8GB" / "1B1B1B"
    storage = Column(String, nullable=True)
    ram = Column(String, nullable=True)
    colour = Column(String, nullable=True)

    vertical_id = Column(Integer, ForeignKey("vertical.id"), nullable=True, index=True)
    parent_category_id = Column(Integer, ForeignKey("category.id"), nullable=True, index=True)
    sub_category_id = Column(Integer, ForeignKey("category.id"), nullable=True)

    # price lives on store_product_mapping only
    mrp = Column(Float, nullable=True)
    rating = Column(Float, nullable=True)
    rating_count = Column(Integer, default=0)
    review_count = Column(Integer, default=0)

    vertical = relationship("Vertical", back_populates="products")
    store_mappings = relationship("StoreProductMapping", back_populates="product")
