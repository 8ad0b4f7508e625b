# app/services/alert_rules.py
"""
Alert rule engine — threshold rules over RES scores.

Rule order encodes priority (first match wins):
  1. RES < res_critical      → critical
  2. PM2.5 > pm25_critical   → critical
  3. RES < res_high          → high
  4. PM2.5 > pm25_high       → high
  5. PM2.5 > pm25_medium     → medium

Lifecycle is tracked per (zone_id, severity): no-alert → active → inactive.
Inactive records are terminal; a zone that qualifies again gets a new record.
Everything here is pure — persistence lives in alert_service / orchestrator.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Sequence

from app.services.res_engine import ResScore

SEVERITY_CRITICAL = "critical"
SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITIES = (SEVERITY_CRITICAL, SEVERITY_HIGH, SEVERITY_MEDIUM)


@dataclass(frozen=True)
class AlertThresholds:
    res_critical: float = 40
    res_high: float = 60
    pm25_critical: float = 150
    pm25_high: float = 100
    pm25_medium: float = 50


DEFAULT_THRESHOLDS = AlertThresholds()


@dataclass(frozen=True)
class AlertDecision:
    should_alert: bool
    severity: Optional[str] = None
    message: Optional[str] = None


NO_ALERT = AlertDecision(should_alert=False)


@dataclass(frozen=True)
class AlertRecord:
    zone_id: str
    zone_name: str
    res_score: float
    pm25: float
    severity: str
    message: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)
    is_active: bool = True

    @property
    def dedup_key(self) -> tuple:
        return (self.zone_id, self.severity)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fmt_threshold(value: float) -> str:
    return f"{value:g}"


def should_generate_alert(res_score: ResScore,
                          thresholds: AlertThresholds = DEFAULT_THRESHOLDS) -> AlertDecision:
    t = thresholds
    score, pm25 = res_score.score, res_score.pm25

    if score < t.res_critical:
        return AlertDecision(True, SEVERITY_CRITICAL,
                             f"Critical resilience failure detected. RES score at {_round_half_up(score)}/100.")
    if pm25 > t.pm25_critical:
        return AlertDecision(True, SEVERITY_CRITICAL,
                             f"Hazardous air quality detected. PM2.5 at {pm25:.1f} μg/m³ "
                             f"(>{_fmt_threshold(t.pm25_critical)}).")
    if score < t.res_high:
        return AlertDecision(True, SEVERITY_HIGH,
                             f"Low resilience warning. RES score at {_round_half_up(score)}/100.")
    if pm25 > t.pm25_high:
        return AlertDecision(True, SEVERITY_HIGH,
                             f"Unhealthy air quality detected. PM2.5 at {pm25:.1f} μg/m³ "
                             f"(>{_fmt_threshold(t.pm25_high)}).")
    if pm25 > t.pm25_medium:
        return AlertDecision(True, SEVERITY_MEDIUM,
                             f"Moderate air quality detected. PM2.5 at {pm25:.1f} μg/m³.")
    return NO_ALERT


def generate_alerts(res_scores: Sequence[ResScore],
                    thresholds: Optional[AlertThresholds] = None) -> list[AlertRecord]:
    """
    One fresh active AlertRecord per zone that trips a rule.
    No de-duplication here — that happens against persisted alerts via merge_alerts.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    alerts = []
    for res_score in res_scores:
        decision = should_generate_alert(res_score, thresholds)
        if not decision.should_alert:
            continue
        alerts.append(AlertRecord(
            zone_id=res_score.zone_id,
            zone_name=res_score.zone_name,
            res_score=res_score.score,
            pm25=res_score.pm25,
            severity=decision.severity,
            message=decision.message,
        ))
    return alerts


def update_alert_status(existing_alerts: Sequence[AlertRecord],
                        current_res_scores: Sequence[ResScore],
                        thresholds: Optional[AlertThresholds] = None) -> list[AlertRecord]:
    """
    Return every existing alert, deactivating those whose zone no longer trips any rule
    or has disappeared from the current scores. A still-tripping zone keeps its alerts
    active whatever their severity.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    scores_by_zone = {s.zone_id: s for s in current_res_scores}

    updated = []
    for alert in existing_alerts:
        current = scores_by_zone.get(alert.zone_id)
        if current is None:
            updated.append(replace(alert, is_active=False) if alert.is_active else alert)
            continue
        if alert.is_active and not should_generate_alert(current, thresholds).should_alert:
            updated.append(replace(alert, is_active=False))
            continue
        updated.append(alert)
    return updated


def merge_alerts(existing_alerts: Sequence[AlertRecord],
                 new_alerts: Sequence[AlertRecord]) -> list[AlertRecord]:
    """
    Append each new alert unless an active alert with the same (zone_id, severity)
    is already present. Never yields two active alerts with the same key.
    """
    merged = list(existing_alerts)
    active_keys = {a.dedup_key for a in merged if a.is_active}
    for alert in new_alerts:
        if alert.is_active and alert.dedup_key in active_keys:
            continue
        merged.append(alert)
        if alert.is_active:
            active_keys.add(alert.dedup_key)
    return merged
