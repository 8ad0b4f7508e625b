# app/services/report_service.py
"""
Operator action reports and citizen community reports.
Neither is consumed by the scoring or alert engine.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from app.models.action_report import ActionReport
from app.models.community_report import CommunityReport
from app.utils.logger import get_logger

logger = get_logger(__name__)


# ── Action reports ────────────────────────────────────────────────────────
def get_all_action_reports(db: Session) -> list[ActionReport]:
    return db.query(ActionReport).order_by(ActionReport.timestamp.desc()).all()


def get_action_reports_by_alert(db: Session, alert_id: str) -> list[ActionReport]:
    return db.query(ActionReport).filter(ActionReport.alert_id == alert_id).all()


def create_action_report(db: Session, alert_id: str, action_taken: str,
                         user_id: str = "system") -> ActionReport:
    report = ActionReport(alert_id=alert_id, action_taken=action_taken,
                          user_id=user_id, timestamp=datetime.utcnow())
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(f"[REPORTS] Action on alert {alert_id} by {user_id}")
    return report


# ── Community reports ─────────────────────────────────────────────────────
def get_all_community_reports(db: Session) -> list[CommunityReport]:
    return db.query(CommunityReport).order_by(CommunityReport.timestamp.desc()).all()


def get_community_reports_by_zone(db: Session, zone_id: str) -> list[CommunityReport]:
    return db.query(CommunityReport).filter(CommunityReport.zone_id == zone_id).all()


def create_community_report(db: Session, zone_id: str, zone_name: str, report_text: str,
                            is_verified: bool = False) -> CommunityReport:
    report = CommunityReport(zone_id=zone_id, zone_name=zone_name, report_text=report_text,
                             is_verified=is_verified, timestamp=datetime.utcnow())
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def verify_community_report(db: Session, report_id: str):
    """Mark a community report verified. Returns None if not found."""
    report = db.query(CommunityReport).filter(CommunityReport.id == report_id).first()
    if not report:
        return None
    report.is_verified = True
    db.commit()
    db.refresh(report)
    logger.info(f"[REPORTS] Community report {report_id} verified")
    return report
