# app/schemas/zone.py
"""Zone provisioning and read models."""
from pydantic import Field
from app.schemas.base import CamelModel


class ZoneCreate(CamelModel):
    name: str = Field(min_length=1)
    density_factor: float = Field(ge=0, le=100)
    water_deficit: float = Field(ge=0, le=100)
    industrial_zone: bool
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ZoneOut(CamelModel):
    id: str
    name: str
    density_factor: float
    water_deficit: float
    industrial_zone: bool
    latitude: float
    longitude: float
