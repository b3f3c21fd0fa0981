from typing import List, Optional

from pydantic import BaseModel


class ProductVariant(BaseModel):
    storage: Optional[str] = None
    ram: Optional[str] = None
    colour: Optional[str] = None
    key_name: str

    class Config:
        from_attributes = True


class VariantOption(BaseModel):
    value: str
    key_name: str  # first sibling carrying this value
    active: bool = False
    swatch: Optional[str] = None  # colour only


class VariantSelector(BaseModel):
    attribute: str
    label: str
    options: List[VariantOption]


class VariantSwitchResponse(BaseModel):
    key_name: str
    url: str
