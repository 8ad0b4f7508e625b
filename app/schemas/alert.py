# app/schemas/alert.py
"""Alert create/read shapes. Severity is one of low, medium, high, critical."""
from pydantic import Field
from datetime import datetime
from typing import Literal, Optional
from app.schemas.base import CamelModel

Severity = Literal["critical", "high", "medium"]


class AlertCreate(CamelModel):
    zone_id: str
    zone_name: str
    res_score: float = Field(ge=0, le=100)
    pm25: float = Field(ge=0)
    severity: Severity
    message: str = Field(min_length=1)
    timestamp: Optional[datetime] = None   # defaults to now
    is_active: bool = True


class AlertOut(CamelModel):
    id: str
    zone_id: str
    zone_name: str
    res_score: float
    pm25: float
    severity: Severity
    message: str
    timestamp: datetime
    is_active: bool
