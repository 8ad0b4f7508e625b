# app/services/air_quality_source.py
"""
Air-quality source adapter — produces one PM2.5 reading per zone.

Pulls a single regional PM2.5 average from an OpenAQ-compatible API
(GET {OPENAQ_API_BASE}/latest?city=...&parameter=pm25) and spreads it across
zones with a synthetic variation model keyed on zone attributes. The model is
an approximation, not sensor placement.

Never raises: any source failure (network, timeout, bad payload, empty result)
falls back to settings.DEFAULT_BASELINE_PM25.
"""

import random
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

PM25_MIN = 10.0
PM25_MAX = 300.0


def _extract_pm25_values(payload) -> list[float]:
    """
    Collect PM2.5 values from an OpenAQ /latest payload.
    Accepts both flat results ({"value": ..}) and nested ones ({"measurements": [..]}).
    """
    if not isinstance(payload, dict):
        return []
    results = payload.get("results") or []
    if not isinstance(results, list):
        return []

    values = []
    for item in results:
        if not isinstance(item, dict):
            continue
        candidates = []
        if "value" in item:
            candidates.append(item["value"])
        for m in item.get("measurements") or []:
            if isinstance(m, dict) and m.get("parameter") in ("pm25", "pm2.5"):
                candidates.append(m.get("value"))
        for v in candidates:
            if isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 0:
                values.append(float(v))
    return values


async def fetch_regional_pm25(transport: Optional[httpx.AsyncBaseTransport] = None) -> Optional[float]:
    """
    Fetch the regional PM2.5 average. Returns None if nothing usable came back.
    The request is bounded by AIR_QUALITY_TIMEOUT_SECONDS.
    """
    url = f"{settings.OPENAQ_API_BASE.rstrip('/')}/latest"
    params = {"city": settings.OPENAQ_CITY, "parameter": "pm25", "limit": 100}
    headers = {"X-API-Key": settings.OPENAQ_API_KEY} if settings.OPENAQ_API_KEY else {}

    try:
        async with httpx.AsyncClient(timeout=settings.AIR_QUALITY_TIMEOUT_SECONDS,
                                     transport=transport) as client:
            response = await client.get(url, params=params, headers=headers)
            if response.status_code != 200:
                logger.warning(f"[AQ] Source returned HTTP {response.status_code} — using fallback")
                return None
            values = _extract_pm25_values(response.json())
    except httpx.TimeoutException:
        logger.warning(f"[AQ] Source timed out after {settings.AIR_QUALITY_TIMEOUT_SECONDS}s — using fallback")
        return None
    except Exception as e:
        logger.warning(f"[AQ] Source fetch failed: {e} — using fallback")
        return None

    if not values:
        logger.info("[AQ] Source returned no PM2.5 measurements — using fallback")
        return None

    avg = sum(values) / len(values)
    logger.info(f"[AQ] Regional PM2.5 average {avg:.1f} μg/m³ from {len(values)} measurements")
    return avg


def generate_synthetic_pm25(baseline: float, industrial_zone: bool = False,
                            density_factor: float = 50, rng=None) -> float:
    """
    Derive a zone's PM2.5 from the regional baseline.
    Industrial zones run 30-60% higher, dense zones up to 25% higher, then ±15% noise.
    Always within [10, 300] μg/m³.

    `rng` is anything with a `uniform(a, b)` method (e.g. random.Random(seed)).
    """
    rng = rng or random
    pm25 = baseline

    if industrial_zone:
        pm25 *= rng.uniform(1.3, 1.6)

    pm25 *= 1 + (density_factor / 100) * 0.25
    pm25 *= rng.uniform(0.85, 1.15)

    return max(PM25_MIN, min(PM25_MAX, pm25))


async def get_zone_pm25_data(
    zones: Sequence,
    rng=None,
    fetch: Callable[[], Awaitable[Optional[float]]] = fetch_regional_pm25,
) -> dict[str, float]:
    """Map every zone id to a PM2.5 reading. Never raises."""
    try:
        regional = await fetch()
    except Exception as e:
        logger.warning(f"[AQ] Regional fetch raised: {e} — using fallback")
        regional = None

    baseline = regional if regional and regional > 0 else settings.DEFAULT_BASELINE_PM25

    return {
        zone.id: generate_synthetic_pm25(baseline, zone.industrial_zone, zone.density_factor, rng)
        for zone in zones
    }
