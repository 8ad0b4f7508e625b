# app/services/orchestrator.py
"""
Recomputation orchestrator — ties the source adapter, scoring engine and alert rules
together and owns the score cache.

One cycle:
  1. load zones                       5. generate candidate alerts
  2. fetch PM2.5 per zone             6. deactivate alerts that no longer qualify
  3. compute RES scores               7. persist non-duplicate candidates (merge_alerts
  4. append one AQ log per zone          against persisted alerts is the only dedup point)
                                      8. replace the cache

Cycles are single-flight: a periodic tick and a cache-miss read arriving together
share one in-flight cycle instead of double-appending logs or double-creating alerts.
Any failure aborts the cycle (logged, rolled back); the previous cache keeps serving.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from fastapi import Request

from app.config import settings
from app.database import SessionLocal
from app.services import alert_service, zone_service
from app.services.air_quality_service import create_air_quality_log
from app.services.air_quality_source import get_zone_pm25_data
from app.services.alert_rules import (
    AlertThresholds, generate_alerts, merge_alerts, update_alert_status,
)
from app.services.res_engine import ResScore, ResWeights, calculate_all_res_scores
from app.utils.logger import get_logger

logger = get_logger(__name__)

Pm25Source = Callable[[Sequence], Awaitable[Mapping[str, float]]]


@dataclass
class ScoreCache:
    scores: list[ResScore] = field(default_factory=list)
    last_update_time: Optional[float] = None     # clock() reading of the last good cycle


@dataclass
class CycleResult:
    zones: int
    candidates: int
    created: int
    deactivated: int


def is_cache_fresh(now: float, last_update_time: Optional[float], window: float) -> bool:
    return last_update_time is not None and now - last_update_time < window


class RecomputationOrchestrator:
    def __init__(
        self,
        session_factory=SessionLocal,
        pm25_source: Pm25Source = get_zone_pm25_data,
        weights: Optional[ResWeights] = None,
        thresholds: Optional[AlertThresholds] = None,
        freshness_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session_factory = session_factory
        self._pm25_source = pm25_source
        self.weights = weights or ResWeights()
        self.thresholds = thresholds or AlertThresholds()
        self.freshness_seconds = freshness_seconds
        self._clock = clock
        self.cache = ScoreCache()
        self._inflight: Optional[asyncio.Task] = None

    # ── Read path ─────────────────────────────────────────────────────────
    def get_cached_scores(self) -> list[ResScore]:
        return self.cache.scores

    def is_fresh(self) -> bool:
        return is_cache_fresh(self._clock(), self.cache.last_update_time, self.freshness_seconds)

    def cache_age_seconds(self) -> Optional[float]:
        if self.cache.last_update_time is None:
            return None
        return self._clock() - self.cache.last_update_time

    async def get_scores(self) -> list[ResScore]:
        """Serve the cache while fresh, otherwise recompute before answering."""
        if self.is_fresh() and self.cache.scores:
            return self.cache.scores
        logger.debug("[RES] Cache stale or empty — recomputing on read")
        await self.recompute_all()
        return self.cache.scores

    # ── Write path ────────────────────────────────────────────────────────
    async def recompute_all(self) -> Optional[CycleResult]:
        """
        Run one cycle, or join the one already running. Never raises on cycle
        failure; returns None when the cycle was aborted.
        """
        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._guarded_cycle(), name="res-recompute")
            self._inflight = task
        else:
            logger.debug("[RES] Recompute already in flight — joining it")
        return await asyncio.shield(task)

    async def _guarded_cycle(self) -> Optional[CycleResult]:
        try:
            return await self._run_cycle()
        finally:
            self._inflight = None

    async def _run_cycle(self) -> Optional[CycleResult]:
        started = time.time()
        db = None
        try:
            db = self._session_factory()
            zones = zone_service.get_all_zones(db)
            pm25_by_zone = await self._pm25_source(zones)
            scores = calculate_all_res_scores(zones, pm25_by_zone, self.weights)

            for s in scores:
                create_air_quality_log(db, s.zone_id, s.pm25, s.timestamp, commit=False)
            db.commit()

            candidates = generate_alerts(scores, self.thresholds)

            existing = [alert_service.to_record(a) for a in alert_service.get_all_alerts(db)]
            updated = update_alert_status(existing, scores, self.thresholds)
            deactivated = 0
            for before, after in zip(existing, updated):
                if before.is_active != after.is_active:
                    alert_service.update_alert(db, after.id, commit=False, is_active=after.is_active)
                    deactivated += 1
            db.commit()

            merged = merge_alerts(updated, candidates)
            new_alerts = merged[len(updated):]
            for record in new_alerts:
                await alert_service.create_alert(db, record, commit=False)
            db.commit()

            self.cache = ScoreCache(scores=scores, last_update_time=self._clock())
            result = CycleResult(zones=len(zones), candidates=len(candidates),
                                 created=len(new_alerts), deactivated=deactivated)
            logger.info(
                f"[RES] Updated scores for {result.zones} zones in "
                f"{round((time.time() - started) * 1000, 1)}ms — "
                f"{result.candidates} candidate / {result.created} new / "
                f"{result.deactivated} deactivated alerts"
            )
            return result

        except Exception as e:
            logger.error(f"[RES] Recompute cycle aborted: {e}", exc_info=True)
            if db is not None:
                try:
                    db.rollback()
                except Exception as rollback_error:
                    logger.error(f"[RES] Rollback failed: {rollback_error}")
            return None
        finally:
            if db is not None:
                try:
                    db.close()
                except Exception as close_error:
                    logger.warning(f"[RES] Could not close session: {close_error}")

    async def run_periodic(self, interval_seconds: float):
        """Recompute every `interval_seconds`. Runs until cancelled."""
        logger.info(f"⏱  Periodic recompute every {interval_seconds}s")
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.recompute_all()
            except Exception as e:
                logger.error(f"[RES] Periodic recompute failed: {e}", exc_info=True)

    async def aclose(self):
        """Cancel an in-flight cycle and wait for it to release its session."""
        task = self._inflight
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


def build_orchestrator() -> RecomputationOrchestrator:
    """Orchestrator wired from settings (weights, thresholds, freshness window)."""
    return RecomputationOrchestrator(
        weights=ResWeights(
            air_quality=settings.RES_WEIGHT_AIR_QUALITY,
            water_deficit=settings.RES_WEIGHT_WATER_DEFICIT,
            population_density=settings.RES_WEIGHT_POPULATION_DENSITY,
            industrial_zone=settings.RES_WEIGHT_INDUSTRIAL_ZONE,
        ),
        thresholds=AlertThresholds(
            res_critical=settings.ALERT_RES_CRITICAL,
            res_high=settings.ALERT_RES_HIGH,
            pm25_critical=settings.ALERT_PM25_CRITICAL,
            pm25_high=settings.ALERT_PM25_HIGH,
            pm25_medium=settings.ALERT_PM25_MEDIUM,
        ),
        freshness_seconds=settings.SCORE_FRESHNESS_SECONDS,
    )


def get_orchestrator(request: Request) -> RecomputationOrchestrator:
    """FastAPI dependency — the orchestrator created at startup."""
    return request.app.state.orchestrator
