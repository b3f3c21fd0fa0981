from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database.connection import Base


class Store(Base):
    __tablename__ = "store"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    image = Column(Text, nullable=True)
    rating = Column(Float, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    city = Column(String, nullable=True)

    product_mappings = relationship("StoreProductMapping", back_populates="store")


class StoreProductMapping(Base):
    __tablename__ = "store_product_mapping"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    price = Column(Float, nullable=False)
    # stored as imported: JSON array text, "{...}" array literal, or junk
    offers = Column(Text, nullable=True)
    affiliate_link = Column(Text, nullable=True)

    store = relationship("Store", back_populates="product_mappings")
    product = relationship("Product", back_populates="store_mappings")
