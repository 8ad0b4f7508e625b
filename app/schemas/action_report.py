# app/schemas/action_report.py
"""Action reports filed by operators against an alert."""
from pydantic import Field
from datetime import datetime
from app.schemas.base import CamelModel


class ActionReportCreate(CamelModel):
    alert_id: str
    action_taken: str = Field(min_length=10, description="Describe the action taken in detail")
    user_id: str = "system"


class ActionReportOut(CamelModel):
    id: str
    alert_id: str
    action_taken: str
    user_id: str
    timestamp: datetime
