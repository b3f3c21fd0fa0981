from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.types import JSON

from app.database.connection import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    user_image = Column(Text, nullable=True)


class RatingReview(Base):
    __tablename__ = "ratings_reviews"

    id = Column(Integer, primary_key=True, index=True)
    entity_type = Column(String, nullable=False, default="product")
    entity_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    review = Column(Text, nullable=True)
    rating = Column(Float, nullable=True)
    images = Column(JSON, default=[])
    created_at = Column(DateTime, default=datetime.utcnow)
