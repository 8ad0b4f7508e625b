# app/services/zone_service.py
"""
Zone lookup and provisioning helpers.
Zones are static: the core reads them every recompute cycle and never mutates them.
"""

from sqlalchemy.orm import Session
from app.models.zone import Zone
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Delhi administrative zones seeded into an empty database
SAMPLE_ZONES = [
    {"name": "Central Delhi",    "density_factor": 85, "water_deficit": 45, "industrial_zone": False, "latitude": 28.6519, "longitude": 77.2315},
    {"name": "North Delhi",      "density_factor": 72, "water_deficit": 52, "industrial_zone": True,  "latitude": 28.7041, "longitude": 77.1025},
    {"name": "South Delhi",      "density_factor": 65, "water_deficit": 38, "industrial_zone": False, "latitude": 28.5355, "longitude": 77.3910},
    {"name": "East Delhi",       "density_factor": 78, "water_deficit": 55, "industrial_zone": True,  "latitude": 28.6692, "longitude": 77.3538},
    {"name": "West Delhi",       "density_factor": 68, "water_deficit": 48, "industrial_zone": False, "latitude": 28.6519, "longitude": 77.1025},
    {"name": "New Delhi",        "density_factor": 55, "water_deficit": 35, "industrial_zone": False, "latitude": 28.6139, "longitude": 77.2090},
    {"name": "North East Delhi", "density_factor": 82, "water_deficit": 58, "industrial_zone": True,  "latitude": 28.7041, "longitude": 77.2750},
    {"name": "South West Delhi", "density_factor": 60, "water_deficit": 42, "industrial_zone": False, "latitude": 28.6139, "longitude": 77.0369},
]


def get_all_zones(db: Session) -> list[Zone]:
    return db.query(Zone).order_by(Zone.name).all()


def get_zone(db: Session, zone_id: str):
    """Find a zone by id. Returns None if not found."""
    return db.query(Zone).filter(Zone.id == zone_id).first()


def create_zone(db: Session, **fields) -> Zone:
    zone = Zone(**fields)
    db.add(zone)
    db.commit()
    db.refresh(zone)
    logger.info(f"[ZONES] Provisioned {zone.name} ({zone.id})")
    return zone


def seed_sample_zones(db: Session) -> int:
    """Insert SAMPLE_ZONES if the zones table is empty. Returns how many were added."""
    if db.query(Zone).first() is not None:
        return 0
    for fields in SAMPLE_ZONES:
        db.add(Zone(**fields))
    db.commit()
    logger.info(f"[ZONES] Seeded {len(SAMPLE_ZONES)} sample zones")
    return len(SAMPLE_ZONES)
