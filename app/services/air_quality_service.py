# app/services/air_quality_service.py
"""Air-quality log helpers — append-only PM2.5 history per zone."""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.models.air_quality_log import AirQualityLog


def get_all_air_quality_logs(db: Session) -> list[AirQualityLog]:
    return db.query(AirQualityLog).order_by(AirQualityLog.timestamp.desc()).all()


def get_air_quality_logs_by_zone(db: Session, zone_id: str) -> list[AirQualityLog]:
    return (
        db.query(AirQualityLog)
        .filter(AirQualityLog.zone_id == zone_id)
        .order_by(AirQualityLog.timestamp.desc())
        .all()
    )


def create_air_quality_log(db: Session, zone_id: str, pm25: float,
                           timestamp: Optional[datetime] = None, commit: bool = True) -> AirQualityLog:
    """Append one reading. The recompute cycle passes commit=False and commits per step."""
    log = AirQualityLog(zone_id=zone_id, pm25=pm25, timestamp=timestamp or datetime.utcnow())
    db.add(log)
    if commit:
        db.commit()
        db.refresh(log)
    return log
