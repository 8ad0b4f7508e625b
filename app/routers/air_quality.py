# app/routers/air_quality.py
"""Air-quality logs — PM2.5 history appended by each recompute cycle."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.air_quality_log import AirQualityLogCreate, AirQualityLogOut
from app.services import air_quality_service

router = APIRouter()


@router.get("/air-quality", response_model=list[AirQualityLogOut], summary="All air-quality logs")
def list_logs(db: Session = Depends(get_db)):
    return air_quality_service.get_all_air_quality_logs(db)


@router.get("/air-quality/{zone_id}", response_model=list[AirQualityLogOut], summary="Air-quality logs for a zone")
def list_zone_logs(zone_id: str, db: Session = Depends(get_db)):
    return air_quality_service.get_air_quality_logs_by_zone(db, zone_id)


@router.post("/air-quality", response_model=AirQualityLogOut, status_code=status.HTTP_201_CREATED,
             summary="Append an air-quality reading")
def create_log(body: AirQualityLogCreate, db: Session = Depends(get_db)):
    return air_quality_service.create_air_quality_log(db, body.zone_id, body.pm25, body.timestamp)
