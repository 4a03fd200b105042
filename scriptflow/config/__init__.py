"""Settings and startup validation."""

from .settings import TREND_SOURCES, YOUTUBE_CATEGORIES, Settings, get_settings
from .startup_validation import (
    ServiceStatus,
    StartupValidation,
    ValidationResult,
    ensure_validated,
    run_startup_validation,
)

__all__ = [
    "TREND_SOURCES",
    "YOUTUBE_CATEGORIES",
    "Settings",
    "get_settings",
    "ServiceStatus",
    "StartupValidation",
    "ValidationResult",
    "ensure_validated",
    "run_startup_validation",
]
