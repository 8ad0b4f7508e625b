# app/schemas/air_quality_log.py
"""PM2.5 readings, one per zone per recompute cycle."""
from pydantic import Field
from datetime import datetime
from typing import Optional
from app.schemas.base import CamelModel


class AirQualityLogCreate(CamelModel):
    zone_id: str
    pm25: float = Field(ge=0)
    timestamp: Optional[datetime] = None   # defaults to now


class AirQualityLogOut(CamelModel):
    id: str
    zone_id: str
    pm25: float
    timestamp: datetime
