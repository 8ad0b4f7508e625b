# tests/test_orchestrator.py
"""Tests for the recomputation orchestrator against an in-memory database."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from unittest.mock import MagicMock
from app.models.air_quality_log import AirQualityLog
from app.models.alert import Alert
from app.services import zone_service
from app.services.alert_service import create_alert
from app.services.alert_rules import AlertRecord
from app.services.orchestrator import RecomputationOrchestrator, ScoreCache, is_cache_fresh


class FakeSource:
    """PM2.5 source keyed by zone name; counts how often it is called."""

    def __init__(self, readings, delay=0.0):
        self.readings = dict(readings)
        self.delay = delay
        self.calls = 0

    async def __call__(self, zones):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return {z.id: self.readings.get(z.name, 0.0) for z in zones}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def seed(db):
    clean = zone_service.create_zone(db, name="Clean", density_factor=10, water_deficit=10,
                                     industrial_zone=False, latitude=28.5, longitude=77.1)
    smog = zone_service.create_zone(db, name="Smog", density_factor=40, water_deficit=30,
                                    industrial_zone=True, latitude=28.7, longitude=77.3)
    return clean.id, smog.id


def alerts_for(db, zone_id):
    db.expire_all()
    return db.query(Alert).filter(Alert.zone_id == zone_id).all()


class TestCacheFreshness:
    def test_never_updated_is_stale(self):
        assert is_cache_fresh(1000, None, 60) is False

    def test_within_window_is_fresh(self):
        assert is_cache_fresh(1059, 1000, 60) is True

    def test_window_edge_is_stale(self):
        assert is_cache_fresh(1060, 1000, 60) is False


class TestRecomputeCycle:
    @pytest.mark.asyncio
    async def test_first_cycle_scores_logs_and_alerts(self, session_factory, db):
        clean_id, smog_id = seed(db)
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source)

        result = await orch.recompute_all()

        assert result.zones == 2
        assert result.created == 1
        assert db.query(AirQualityLog).count() == 2
        assert alerts_for(db, clean_id) == []
        [smog_alert] = alerts_for(db, smog_id)
        assert smog_alert.severity == "critical"
        assert smog_alert.is_active
        assert {s.zone_id for s in orch.get_cached_scores()} == {clean_id, smog_id}
        assert orch.cache.last_update_time is not None

    @pytest.mark.asyncio
    async def test_repeat_cycles_do_not_duplicate_alerts(self, session_factory, db):
        _, smog_id = seed(db)
        orch = RecomputationOrchestrator(session_factory=session_factory,
                                         pm25_source=FakeSource({"Clean": 20, "Smog": 220}))

        await orch.recompute_all()
        result = await orch.recompute_all()

        assert result.created == 0
        assert len(alerts_for(db, smog_id)) == 1
        assert db.query(AirQualityLog).count() == 4

    @pytest.mark.asyncio
    async def test_recovery_deactivates_and_relapse_creates_new_record(self, session_factory, db):
        _, smog_id = seed(db)
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source)
        await orch.recompute_all()

        # Static risk for Smog is 0.3*30 + 0.2*40 + 10 = 27, so pm25=10 gives RES 71
        source.readings["Smog"] = 10
        result = await orch.recompute_all()
        assert result.deactivated == 1
        [old] = alerts_for(db, smog_id)
        assert old.is_active is False

        source.readings["Smog"] = 220
        await orch.recompute_all()
        records = alerts_for(db, smog_id)
        assert len(records) == 2
        assert sum(1 for a in records if a.is_active) == 1
        assert old.id in {a.id for a in records if not a.is_active}

    @pytest.mark.asyncio
    async def test_alert_for_vanished_zone_deactivated(self, session_factory, db):
        seed(db)
        await create_alert(db, AlertRecord(zone_id="retired-zone", zone_name="Retired", res_score=20,
                                           pm25=250, severity="critical", message="old"))
        orch = RecomputationOrchestrator(session_factory=session_factory,
                                         pm25_source=FakeSource({"Clean": 20, "Smog": 20}))

        await orch.recompute_all()

        [ghost] = alerts_for(db, "retired-zone")
        assert ghost.is_active is False

    @pytest.mark.asyncio
    async def test_failed_cycle_keeps_previous_cache(self, session_factory, db):
        seed(db)
        clock = FakeClock()
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source, clock=clock)
        await orch.recompute_all()
        previous = orch.cache

        async def broken_source(zones):
            raise RuntimeError("database went away")

        orch._pm25_source = broken_source
        clock.now += 120
        result = await orch.recompute_all()

        assert result is None
        assert orch.cache is previous
        assert db.query(AirQualityLog).count() == 2

    @pytest.mark.asyncio
    async def test_overlapping_triggers_share_one_cycle(self, session_factory, db):
        seed(db)
        source = FakeSource({"Clean": 20, "Smog": 220}, delay=0.05)
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source)

        first, second = await asyncio.gather(orch.recompute_all(), orch.recompute_all())

        assert source.calls == 1
        assert first is second
        assert db.query(AirQualityLog).count() == 2
        assert db.query(Alert).count() == 1

    @pytest.mark.asyncio
    async def test_sequential_triggers_run_separate_cycles(self, session_factory, db):
        seed(db)
        source = FakeSource({"Clean": 20, "Smog": 20})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source)

        await orch.recompute_all()
        await orch.recompute_all()

        assert source.calls == 2


class TestReadPath:
    @pytest.mark.asyncio
    async def test_fresh_cache_served_without_recompute(self, session_factory, db):
        seed(db)
        clock = FakeClock()
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source,
                                         freshness_seconds=60, clock=clock)

        scores = await orch.get_scores()
        assert len(scores) == 2
        assert source.calls == 1

        clock.now += 30
        assert orch.is_fresh()
        await orch.get_scores()
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_stale_cache_triggers_recompute(self, session_factory, db):
        seed(db)
        clock = FakeClock()
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source,
                                         freshness_seconds=60, clock=clock)
        await orch.get_scores()

        clock.now += 61
        assert not orch.is_fresh()
        await orch.get_scores()
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_empty_cache_is_never_served_as_fresh(self, session_factory):
        clock = FakeClock()
        source = FakeSource({})
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=source, clock=clock)
        orch.cache = ScoreCache(scores=[], last_update_time=clock.now)

        assert await orch.get_scores() == []
        assert source.calls == 1


class FlakySessionFactory:
    """Raises on the first `failures` calls, then hands out real sessions."""

    def __init__(self, session_factory, failures=1):
        self.session_factory = session_factory
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("could not open session")
        return self.session_factory()


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_session_open_failure_aborts_cycle(self, session_factory):
        orch = RecomputationOrchestrator(session_factory=FlakySessionFactory(session_factory),
                                         pm25_source=FakeSource({}))

        assert await orch.recompute_all() is None
        assert orch.cache.last_update_time is None
        assert orch._inflight is None

    @pytest.mark.asyncio
    async def test_rollback_and_close_failures_are_contained(self):
        broken = MagicMock()
        broken.query.side_effect = RuntimeError("connection reset")
        broken.rollback.side_effect = RuntimeError("rollback on dead connection")
        broken.close.side_effect = RuntimeError("close on dead connection")
        orch = RecomputationOrchestrator(session_factory=lambda: broken, pm25_source=FakeSource({}))

        assert await orch.recompute_all() is None
        broken.rollback.assert_called_once()
        broken.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_periodic_loop_survives_failing_cycle(self, session_factory, db):
        seed(db)
        factory = FlakySessionFactory(session_factory)
        source = FakeSource({"Clean": 20, "Smog": 220})
        orch = RecomputationOrchestrator(session_factory=factory, pm25_source=source)

        task = asyncio.create_task(orch.run_periodic(0.01))
        await asyncio.sleep(0.2)
        assert not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert factory.calls >= 2
        assert source.calls >= 1
        assert len(orch.get_cached_scores()) == 2

    @pytest.mark.asyncio
    async def test_aclose_cancels_inflight_cycle(self, session_factory, db):
        seed(db)
        orch = RecomputationOrchestrator(session_factory=session_factory,
                                         pm25_source=FakeSource({"Smog": 220}, delay=5))

        caller = asyncio.create_task(orch.recompute_all())
        await asyncio.sleep(0.05)
        assert orch._inflight is not None

        await orch.aclose()

        assert orch._inflight is None
        with pytest.raises(asyncio.CancelledError):
            await caller
        assert db.query(AirQualityLog).count() == 0

    @pytest.mark.asyncio
    async def test_aclose_when_idle_is_noop(self, session_factory):
        orch = RecomputationOrchestrator(session_factory=session_factory, pm25_source=FakeSource({}))
        await orch.aclose()
        assert orch._inflight is None
