# app/routers/alerts.py
"""Alerts — list (all / active / per zone) and manual creation."""

from datetime import datetime
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.alert import AlertCreate, AlertOut
from app.services import alert_service
from app.services.alert_rules import AlertRecord

router = APIRouter()


@router.get("/alerts", response_model=list[AlertOut], summary="All alerts, newest first")
def get_all_alerts(db: Session = Depends(get_db)):
    return alert_service.get_all_alerts(db)


@router.get("/alerts/active", response_model=list[AlertOut], summary="Active alerts only")
def get_active_alerts(db: Session = Depends(get_db)):
    return alert_service.get_active_alerts(db)


@router.get("/alerts/{zone_id}", response_model=list[AlertOut], summary="Alerts for a zone")
def get_zone_alerts(zone_id: str, db: Session = Depends(get_db)):
    return alert_service.get_alerts_by_zone(db, zone_id)


@router.post("/alerts", response_model=AlertOut, status_code=status.HTTP_201_CREATED,
             summary="Create an alert manually")
async def create_alert(body: AlertCreate, db: Session = Depends(get_db)):
    record = AlertRecord(
        zone_id=body.zone_id,
        zone_name=body.zone_name,
        res_score=body.res_score,
        pm25=body.pm25,
        severity=body.severity,
        message=body.message,
        timestamp=body.timestamp or datetime.utcnow(),
        is_active=body.is_active,
    )
    return await alert_service.create_alert(db, record)
