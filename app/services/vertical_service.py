from typing import List

from sqlalchemy.orm import Session

from app.models.product import Vertical


def get_all_verticals(db: Session) -> List[Vertical]:
    return db.query(Vertical).order_by(Vertical.id.asc()).all()
