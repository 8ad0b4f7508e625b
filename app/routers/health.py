# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + air-quality source reachability + score cache age.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from app.services.orchestrator import RecomputationOrchestrator, get_orchestrator
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db),
                 orchestrator: RecomputationOrchestrator = Depends(get_orchestrator)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Air-quality source reachability (a down source only means synthetic fallback)
    - Age of the cached scores
    """
    age = orchestrator.cache_age_seconds()
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "air_quality_source": "unknown",
        "scores": {
            "cached_zones": len(orchestrator.get_cached_scores()),
            "age_seconds": round(age, 1) if age is not None else None,
            "fresh": orchestrator.is_fresh(),
        },
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Ping the air-quality source
    headers = {"X-API-Key": settings.OPENAQ_API_KEY} if settings.OPENAQ_API_KEY else {}
    try:
        resp = requests.get(f"{settings.OPENAQ_API_BASE.rstrip('/')}/latest",
                            params={"city": settings.OPENAQ_CITY, "parameter": "pm25", "limit": 1},
                            headers=headers, timeout=3)
        result["air_quality_source"] = "ok" if resp.status_code == 200 else f"http_{resp.status_code}"
    except requests.exceptions.ConnectionError:
        result["air_quality_source"] = "unreachable"
    except Exception as e:
        result["air_quality_source"] = f"error: {str(e)}"

    return result
