from pydantic import BaseModel


class GalleryImage(BaseModel):
    image_url: str

    class Config:
        from_attributes = True


class VerticalResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
