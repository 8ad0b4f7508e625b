# app/models/community_report.py
"""
Community reports table — citizen-submitted environmental observations per zone.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Text, Boolean
from app.database import Base


class CommunityReport(Base):
    __tablename__ = "community_reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    zone_id = Column(String(36), nullable=False, index=True)
    zone_name = Column(String(200), nullable=False)
    report_text = Column(Text, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<CommunityReport {self.id} zone={self.zone_id} verified={self.is_verified}>"
