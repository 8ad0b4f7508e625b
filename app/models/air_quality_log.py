# app/models/air_quality_log.py
"""
Air-quality log table — one PM2.5 reading per zone per recompute cycle.
Append-only: rows are never updated or deleted.
"""

import uuid
from sqlalchemy import Column, String, Float, DateTime
from app.database import Base


class AirQualityLog(Base):
    __tablename__ = "air_quality_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    zone_id = Column(String(36), nullable=False, index=True)
    pm25 = Column(Float, nullable=False)              # μg/m³
    timestamp = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<AirQualityLog {self.id} zone={self.zone_id} pm25={self.pm25}>"
