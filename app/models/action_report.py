# app/models/action_report.py
"""
Action reports table — mitigation actions an operator took in response to an alert.
Immutable once created.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Text
from app.database import Base


class ActionReport(Base):
    __tablename__ = "action_reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    alert_id = Column(String(36), nullable=False, index=True)
    action_taken = Column(Text, nullable=False)
    user_id = Column(String(100), default="system", nullable=False)
    timestamp = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ActionReport {self.id} alert={self.alert_id} user={self.user_id}>"
