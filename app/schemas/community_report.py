# app/schemas/community_report.py
"""Citizen reports about a zone, unverified until an operator confirms them."""
from pydantic import Field
from datetime import datetime
from app.schemas.base import CamelModel


class CommunityReportCreate(CamelModel):
    zone_id: str
    zone_name: str
    report_text: str = Field(min_length=20, description="Detailed observations")
    is_verified: bool = False


class CommunityReportOut(CamelModel):
    id: str
    zone_id: str
    zone_name: str
    report_text: str
    is_verified: bool
    timestamp: datetime
