# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./resilience.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Air-quality source (OpenAQ-compatible) ────────────────────────────
    OPENAQ_API_BASE: str = "https://api.openaq.org/v2"
    OPENAQ_API_KEY: Optional[str] = None
    OPENAQ_CITY: str = "Delhi"
    AIR_QUALITY_TIMEOUT_SECONDS: float = 10.0
    DEFAULT_BASELINE_PM25: float = 85.0         # μg/m³, used when the source is down

    # ── Recomputation ─────────────────────────────────────────────────────
    RECOMPUTE_INTERVAL_SECONDS: int = 300        # Periodic cycle (5 min)
    SCORE_FRESHNESS_SECONDS: int = 60            # Serve cached scores within this window
    SEED_SAMPLE_ZONES: bool = True               # Seed Delhi zones into an empty DB

    # ── RES weights ───────────────────────────────────────────────────────
    RES_WEIGHT_AIR_QUALITY: float = 0.4
    RES_WEIGHT_WATER_DEFICIT: float = 0.3
    RES_WEIGHT_POPULATION_DENSITY: float = 0.2
    RES_WEIGHT_INDUSTRIAL_ZONE: float = 0.1      # Kept for config parity; penalty is flat

    # ── Alert thresholds ──────────────────────────────────────────────────
    ALERT_RES_CRITICAL: float = 40
    ALERT_RES_HIGH: float = 60
    ALERT_PM25_CRITICAL: float = 150
    ALERT_PM25_HIGH: float = 100
    ALERT_PM25_MEDIUM: float = 50

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_DIR: Optional[str] = None                # Defaults to <repo>/logs

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
