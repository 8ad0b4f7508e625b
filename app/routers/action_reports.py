# app/routers/action_reports.py
"""Action reports — operator responses to alerts."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.action_report import ActionReportCreate, ActionReportOut
from app.services import report_service

router = APIRouter()


@router.get("/action-reports", response_model=list[ActionReportOut], summary="All action reports")
def list_action_reports(db: Session = Depends(get_db)):
    return report_service.get_all_action_reports(db)


@router.get("/action-reports/{alert_id}", response_model=list[ActionReportOut],
            summary="Action reports for an alert")
def list_alert_action_reports(alert_id: str, db: Session = Depends(get_db)):
    return report_service.get_action_reports_by_alert(db, alert_id)


@router.post("/action-reports", response_model=ActionReportOut, status_code=status.HTTP_201_CREATED,
             summary="File an action report")
def create_action_report(body: ActionReportCreate, db: Session = Depends(get_db)):
    return report_service.create_action_report(db, body.alert_id, body.action_taken, body.user_id)
