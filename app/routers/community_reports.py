# app/routers/community_reports.py
"""Community reports — citizen observations, verified by an operator."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.community_report import CommunityReportCreate, CommunityReportOut
from app.services import report_service

router = APIRouter()


@router.get("/community-reports", response_model=list[CommunityReportOut], summary="All community reports")
def list_community_reports(db: Session = Depends(get_db)):
    return report_service.get_all_community_reports(db)


@router.get("/community-reports/{zone_id}", response_model=list[CommunityReportOut],
            summary="Community reports for a zone")
def list_zone_community_reports(zone_id: str, db: Session = Depends(get_db)):
    return report_service.get_community_reports_by_zone(db, zone_id)


@router.post("/community-reports", response_model=CommunityReportOut, status_code=status.HTTP_201_CREATED,
             summary="Submit a community report")
def create_community_report(body: CommunityReportCreate, db: Session = Depends(get_db)):
    return report_service.create_community_report(
        db, body.zone_id, body.zone_name, body.report_text, body.is_verified
    )


@router.post("/community-reports/{report_id}/verify", response_model=CommunityReportOut,
             summary="Mark a community report verified")
def verify_community_report(report_id: str, db: Session = Depends(get_db)):
    report = report_service.verify_community_report(db, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Community report not found")
    return report
