from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database.connection import Base


class Entity(Base):
    """Curated list row: a homepage rail or a search pill."""

    __tablename__ = "entity"

    id = Column(Integer, primary_key=True, index=True)
    page = Column(String, nullable=False, index=True)  # HOME / SEARCH
    entity_type = Column(String, nullable=False, index=True)  # RAIL / POPULAR_PILLS
    header = Column(String, nullable=False)
    rank = Column(Integer, nullable=False, default=0)

    product_mappings = relationship(
        "EntityProductMapping",
        back_populates="entity",
        cascade="all, delete-orphan",
    )


class EntityProductMapping(Base):
    __tablename__ = "entity_product_mapping"

    id = Column(Integer, primary_key=True, index=True)
    entity_id = Column(Integer, ForeignKey("entity.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    entity = relationship("Entity", back_populates="product_mappings")


class EntityImage(Base):
    __tablename__ = "entity_image"

    id = Column(Integer, primary_key=True, index=True)
    entity_type = Column(String, nullable=False)  # e.g. "product"
    entity_id = Column(Integer, nullable=False, index=True)
    image_type = Column(String, nullable=False)  # e.g. "vertical_image_gallery"
    image_url = Column(Text, nullable=False)
