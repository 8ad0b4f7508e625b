# app/schemas/res_score.py
"""RES score responses served from the orchestrator cache."""
from datetime import datetime
from app.schemas.base import CamelModel


class ResScoreOut(CamelModel):
    zone_id: str
    zone_name: str
    score: float
    air_risk: float
    water_deficit: float
    density_factor: float
    industrial_penalty: float
    pm25: float
    timestamp: datetime
    severity_band: str          # critical | high | medium | good


class RefreshOut(CamelModel):
    message: str
    scores: list[ResScoreOut]
