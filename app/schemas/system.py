from datetime import datetime

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: datetime
    db_ok: bool


class RootResponse(BaseModel):
    message: str
