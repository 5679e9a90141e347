"""
Centralized configuration management for the profiling service.

Handles environment variables, analysis thresholds and application settings
with type safety and validation.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class AnalysisConfig:
    """Thresholds used by the profiling engine."""

    outlier_iqr_multiplier: float = 1.5
    outlier_display_limit: int = 10
    sample_value_limit: int = 5
    top_values_limit: int = 10

    # Data quality
    high_missing_percentage: float = 50.0
    low_variance_std: float = 0.001
    high_cardinality_ratio: float = 0.8

    # Drop rows where either value is missing before correlating
    pairwise_correlation: bool = False

    def __post_init__(self):
        if self.outlier_iqr_multiplier <= 0:
            raise ValueError("outlier_iqr_multiplier must be positive")
        if not 0 <= self.high_cardinality_ratio <= 1:
            raise ValueError("high_cardinality_ratio must be between 0 and 1")

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Load analysis thresholds from environment variables."""
        return cls(
            outlier_iqr_multiplier=float(os.getenv("OUTLIER_IQR_MULTIPLIER", "1.5")),
            outlier_display_limit=int(os.getenv("OUTLIER_DISPLAY_LIMIT", "10")),
            high_missing_percentage=float(os.getenv("HIGH_MISSING_PERCENTAGE", "50")),
            low_variance_std=float(os.getenv("LOW_VARIANCE_STD", "0.001")),
            high_cardinality_ratio=float(os.getenv("HIGH_CARDINALITY_RATIO", "0.8")),
            pairwise_correlation=_env_bool("PAIRWISE_CORRELATION", False),
        )


@dataclass
class AppConfig:
    """Application-level configuration."""

    title: str = "EDA Profiler"
    log_level: str = "INFO"
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"]
    )

    # Sessions
    session_ttl_seconds: int = 3600  # seconds
    cleanup_interval_seconds: int = 300

    # Data handling
    max_upload_bytes: int = 50 * 1024 * 1024
    preview_rows: int = 20

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load app config from environment variables."""
        defaults = cls()
        origins = os.getenv("CORS_ORIGINS")
        return cls(
            title=os.getenv("APP_TITLE", defaults.title),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins else defaults.cors_origins
            ),
            session_ttl_seconds=int(os.getenv("SESSION_TTL", str(defaults.session_ttl_seconds))),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(defaults.max_upload_bytes))),
            preview_rows=int(os.getenv("PREVIEW_ROWS", str(defaults.preview_rows))),
        )


class Config:
    """Global configuration manager."""

    _instance: Optional["Config"] = None

    def __init__(self):
        self.app = AppConfig.from_env()
        self.analysis = AnalysisConfig.from_env()
        self.root_dir = Path(__file__).parent.parent

    @classmethod
    def load(cls) -> "Config":
        """Singleton pattern - load or return existing config."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached instance so the next load re-reads the environment."""
        cls._instance = None
