# app/routers/res_scores.py
"""
RES scores — served from the orchestrator's cache.
A stale cache (older than SCORE_FRESHNESS_SECONDS) triggers a synchronous recompute,
so a cold read is noticeably slower than a warm one.
"""

from fastapi import APIRouter, Depends, HTTPException
from app.schemas.res_score import ResScoreOut, RefreshOut
from app.services.orchestrator import RecomputationOrchestrator, get_orchestrator

router = APIRouter()


def _to_out(scores) -> list[ResScoreOut]:
    # ResScore is a dataclass; validate from attributes so severity_band is kept
    return [ResScoreOut.model_validate(s) for s in scores]


@router.get("/res/scores", response_model=list[ResScoreOut], summary="Current RES scores for all zones")
async def get_scores(orchestrator: RecomputationOrchestrator = Depends(get_orchestrator)):
    return _to_out(await orchestrator.get_scores())


@router.get("/res/scores/{zone_id}", response_model=ResScoreOut, summary="Cached RES score for one zone")
def get_zone_score(zone_id: str, orchestrator: RecomputationOrchestrator = Depends(get_orchestrator)):
    score = next((s for s in orchestrator.get_cached_scores() if s.zone_id == zone_id), None)
    if not score:
        raise HTTPException(status_code=404, detail=f"RES score not found for zone '{zone_id}'")
    return ResScoreOut.model_validate(score)


@router.post("/res/refresh", response_model=RefreshOut, summary="Force a recompute of scores and alerts")
async def refresh_scores(orchestrator: RecomputationOrchestrator = Depends(get_orchestrator)):
    await orchestrator.recompute_all()
    return RefreshOut(message="RES scores and alerts updated",
                      scores=_to_out(orchestrator.get_cached_scores()))
