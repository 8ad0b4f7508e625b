# app/models/alert.py
"""
Alerts table — threshold alerts raised by the recompute cycle.
Only is_active ever changes (true → false); rows are never deleted or re-activated.
"""

from sqlalchemy import Column, String, Float, DateTime, Text, Boolean
from app.database import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(String(36), primary_key=True)
    zone_id = Column(String(36), nullable=False, index=True)
    zone_name = Column(String(200), nullable=False)
    res_score = Column(Float, nullable=False)         # snapshot at creation
    pm25 = Column(Float, nullable=False)              # snapshot at creation
    severity = Column(String(20), nullable=False, index=True)  # critical | high | medium
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self):
        return f"<Alert {self.id} zone={self.zone_id} severity={self.severity} active={self.is_active}>"
