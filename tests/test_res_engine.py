# tests/test_res_engine.py
"""Unit tests for the RES scoring engine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.models.zone import Zone
from app.services.res_engine import (
    ResWeights, calculate_air_risk, calculate_res_score, calculate_all_res_scores, get_res_severity,
)


def make_zone(zone_id="zone-1", name="Test Zone", density=50, water=50, industrial=False):
    return Zone(id=zone_id, name=name, density_factor=density, water_deficit=water,
                industrial_zone=industrial, latitude=28.6, longitude=77.2)


class TestAirRisk:
    @pytest.mark.parametrize("pm25", [0, 1, 12.5, 25, 37.2, 49.99, 50])
    def test_good_band_is_linear(self, pm25):
        assert calculate_air_risk(pm25) == pytest.approx(pm25 / 50 * 25)

    @pytest.mark.parametrize("boundary", [50, 100, 150])
    def test_continuous_at_band_boundaries(self, boundary):
        eps = 1e-12
        assert abs(calculate_air_risk(boundary + eps) - calculate_air_risk(boundary)) < 1e-9
        assert abs(calculate_air_risk(boundary) - calculate_air_risk(boundary - eps)) < 1e-9

    def test_band_anchor_values(self):
        assert calculate_air_risk(50) == 25
        assert calculate_air_risk(100) == 50
        assert calculate_air_risk(150) == 75

    def test_caps_at_100(self):
        assert calculate_air_risk(300) == 100
        assert calculate_air_risk(1000) == 100

    def test_negative_reading_clamped_to_zero(self):
        assert calculate_air_risk(-20) == 0


class TestResScore:
    def test_pristine_zone_scores_100(self):
        score = calculate_res_score(make_zone(density=0, water=0, industrial=False), 0)
        assert score.score == 100
        assert score.air_risk == 0
        assert score.industrial_penalty == 0

    def test_worst_zone_scores_0(self):
        score = calculate_res_score(make_zone(density=100, water=100, industrial=True), 300)
        assert score.air_risk == 100
        assert score.industrial_penalty == 10
        assert score.score == pytest.approx(0, abs=1e-9)
        assert score.score >= 0

    @pytest.mark.parametrize("pm25", [0, 25, 50, 99.9, 150, 151, 300, 5000])
    @pytest.mark.parametrize("density,water,industrial", [
        (0, 0, False), (100, 100, True), (55, 35, False), (82, 58, True),
    ])
    def test_score_always_within_bounds(self, pm25, density, water, industrial):
        score = calculate_res_score(make_zone(density=density, water=water, industrial=industrial), pm25)
        assert 0 <= score.score <= 100

    def test_component_breakdown(self):
        zone = make_zone(density=60, water=40, industrial=False)
        score = calculate_res_score(zone, 100)
        # totalRisk = 0.4*50 + 0.3*40 + 0.2*60 = 44
        assert score.score == pytest.approx(56)
        assert score.water_deficit == 40
        assert score.density_factor == 60
        assert score.pm25 == 100
        assert score.zone_id == "zone-1"
        assert score.zone_name == "Test Zone"

    def test_industrial_penalty_is_flat_not_weighted(self):
        zone = make_zone(density=0, water=0, industrial=True)
        default = calculate_res_score(zone, 0)
        reweighted = calculate_res_score(zone, 0, ResWeights(industrial_zone=0.9))
        assert default.score == reweighted.score == 90

    def test_custom_weights_apply(self):
        zone = make_zone(density=0, water=100, industrial=False)
        score = calculate_res_score(zone, 0, ResWeights(water_deficit=0.5))
        assert score.score == pytest.approx(50)


class TestAllScores:
    def test_missing_reading_scored_as_zero_pollution(self):
        zones = [make_zone("a", density=0, water=0), make_zone("b", density=0, water=0)]
        scores = calculate_all_res_scores(zones, {"a": 200})
        by_id = {s.zone_id: s for s in scores}
        assert by_id["a"].pm25 == 200
        assert by_id["b"].pm25 == 0
        assert by_id["b"].air_risk == 0
        assert by_id["b"].score == 100

    def test_one_score_per_zone_in_order(self):
        zones = [make_zone("a"), make_zone("b"), make_zone("c")]
        scores = calculate_all_res_scores(zones, {"a": 10, "b": 20, "c": 30})
        assert [s.zone_id for s in scores] == ["a", "b", "c"]


class TestSeverityBand:
    @pytest.mark.parametrize("score,band", [
        (10, "critical"), (39.9, "critical"), (40, "high"), (59.9, "high"),
        (60, "medium"), (79.9, "medium"), (80, "good"), (100, "good"),
    ])
    def test_bands(self, score, band):
        assert get_res_severity(score) == band
