# app/services/alert_service.py
"""
Shared alert persistence service.
Used by the recompute orchestrator and the alerts router.
Converts between Alert rows and the rule engine's immutable AlertRecord.
Extend create_alert to add push notifications, SMS, email, etc.
"""

from sqlalchemy.orm import Session
from app.models.alert import Alert
from app.services.alert_rules import AlertRecord
from app.utils.logger import get_logger

logger = get_logger(__name__)


def to_record(alert: Alert) -> AlertRecord:
    return AlertRecord(
        id=alert.id,
        zone_id=alert.zone_id,
        zone_name=alert.zone_name,
        res_score=alert.res_score,
        pm25=alert.pm25,
        severity=alert.severity,
        message=alert.message,
        timestamp=alert.timestamp,
        is_active=bool(alert.is_active),
    )


def get_all_alerts(db: Session) -> list[Alert]:
    return db.query(Alert).order_by(Alert.timestamp.desc()).all()


def get_alerts_by_zone(db: Session, zone_id: str) -> list[Alert]:
    return db.query(Alert).filter(Alert.zone_id == zone_id).order_by(Alert.timestamp.desc()).all()


def get_active_alerts(db: Session) -> list[Alert]:
    return (
        db.query(Alert)
        .filter(Alert.is_active == True)  # noqa: E712
        .order_by(Alert.timestamp.desc())
        .all()
    )


async def create_alert(db: Session, record: AlertRecord, commit: bool = True) -> Alert:
    """Persist an AlertRecord as-is (id and timestamp included)."""
    alert = Alert(
        id=record.id,
        zone_id=record.zone_id,
        zone_name=record.zone_name,
        res_score=record.res_score,
        pm25=record.pm25,
        severity=record.severity,
        message=record.message,
        timestamp=record.timestamp,
        is_active=record.is_active,
    )
    db.add(alert)
    if commit:
        db.commit()
    logger.warning(f"[ALERT][{record.severity.upper()}] {record.zone_name}: {record.message}")
    # Extend here: push notification, SMS, email, etc.
    return alert


def update_alert(db: Session, alert_id: str, commit: bool = True, **changes):
    """Apply a partial update. Returns the updated row, or None if the id is unknown."""
    alert = db.query(Alert).filter(Alert.id == alert_id).first()
    if not alert:
        return None
    for key, value in changes.items():
        setattr(alert, key, value)
    if commit:
        db.commit()
    return alert
