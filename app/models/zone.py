# app/models/zone.py
"""
Zones table — fixed geographic/administrative units with static resilience factors.
Read by the recompute cycle every run; provisioned once and never mutated by the core.
"""

import uuid
from sqlalchemy import Column, String, Float, Boolean
from app.database import Base


class Zone(Base):
    __tablename__ = "zones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    density_factor = Column(Float, nullable=False)    # 0-100 normalized population density
    water_deficit = Column(Float, nullable=False)     # 0-100 percentage water deficit
    industrial_zone = Column(Boolean, default=False, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    def __repr__(self):
        return f"<Zone {self.id} name={self.name} industrial={self.industrial_zone}>"
