# app/services/res_engine.py
"""
RES (Resilience Environmental Score) calculation engine.

    RES = 100 - [W1·AirRisk + W2·WaterDeficit + W3·PopDensity + IndustrialPenalty]

Pure functions: no I/O, no DB access. Inputs are clamped, never rejected.
The industrial term is a flat 10-point penalty; `ResWeights.industrial_zone`
is carried for configuration parity only and does not enter the formula.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Sequence

INDUSTRIAL_PENALTY = 10.0


@dataclass(frozen=True)
class ResWeights:
    air_quality: float = 0.4
    water_deficit: float = 0.3
    population_density: float = 0.2
    industrial_zone: float = 0.1     # unused by the flat-penalty formula


DEFAULT_WEIGHTS = ResWeights()


@dataclass
class ResScore:
    zone_id: str
    zone_name: str
    score: float                 # 0-100, higher = more resilient
    air_risk: float              # 0-100
    water_deficit: float         # 0-100
    density_factor: float        # 0-100
    industrial_penalty: float    # 0 or 10
    pm25: float                  # μg/m³
    timestamp: datetime = field(default_factory=datetime.utcnow)

    @property
    def severity_band(self) -> str:
        return get_res_severity(self.score)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_air_risk(pm25: float) -> float:
    """
    Map a PM2.5 concentration to a 0-100 air risk, piecewise-linear over WHO-style bands:
      0-50 → 0-25, 50-100 → 25-50, 100-150 → 50-75, 150+ → 75-100 (capped at 300 μg/m³).
    Continuous at every band boundary.
    """
    pm25 = max(pm25, 0.0)
    if pm25 <= 50:
        return pm25 / 50 * 25
    if pm25 <= 100:
        return 25 + (pm25 - 50) / 50 * 25
    if pm25 <= 150:
        return 50 + (pm25 - 100) / 50 * 25
    return min(75 + (pm25 - 150) / 150 * 25, 100.0)


def calculate_res_score(zone, pm25: float, weights: ResWeights = DEFAULT_WEIGHTS) -> ResScore:
    """Score one zone. `zone` is anything with the Zone attributes (ORM row or schema)."""
    air_risk = calculate_air_risk(pm25)
    water_deficit = zone.water_deficit
    density_factor = zone.density_factor
    industrial_penalty = INDUSTRIAL_PENALTY if zone.industrial_zone else 0.0

    total_risk = (
        weights.air_quality * air_risk
        + weights.water_deficit * water_deficit
        + weights.population_density * density_factor
        + industrial_penalty
    )

    return ResScore(
        zone_id=zone.id,
        zone_name=zone.name,
        score=_clamp(100 - total_risk, 0.0, 100.0),
        air_risk=air_risk,
        water_deficit=water_deficit,
        density_factor=density_factor,
        industrial_penalty=industrial_penalty,
        pm25=pm25,
    )


def calculate_all_res_scores(
    zones: Sequence,
    pm25_by_zone: Mapping[str, float],
    weights: Optional[ResWeights] = None,
) -> list[ResScore]:
    """Score every zone. A zone without a reading is scored as zero pollution."""
    weights = weights or DEFAULT_WEIGHTS
    return [
        calculate_res_score(zone, pm25_by_zone.get(zone.id) or 0.0, weights)
        for zone in zones
    ]


def get_res_severity(score: float) -> str:
    """Display band for a RES score: critical | high | medium | good."""
    if score < 40:
        return "critical"
    if score < 60:
        return "high"
    if score < 80:
        return "medium"
    return "good"
