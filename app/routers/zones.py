# app/routers/zones.py
"""Zones — list, lookup and provisioning endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.zone import ZoneCreate, ZoneOut
from app.services import zone_service

router = APIRouter()


@router.get("/zones", response_model=list[ZoneOut], summary="List all zones")
def list_zones(db: Session = Depends(get_db)):
    return zone_service.get_all_zones(db)


@router.get("/zones/{zone_id}", response_model=ZoneOut, summary="Get one zone")
def get_zone(zone_id: str, db: Session = Depends(get_db)):
    zone = zone_service.get_zone(db, zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail=f"Zone '{zone_id}' not found")
    return zone


@router.post("/zones", response_model=ZoneOut, status_code=status.HTTP_201_CREATED,
             summary="Provision a zone")
def create_zone(body: ZoneCreate, db: Session = Depends(get_db)):
    """Zones are static once created; scores pick them up on the next cycle."""
    return zone_service.create_zone(db, **body.model_dump())
