"""
Startup Validation Module for ScriptFlow.

Validates credentials for every collaborator on application startup.
Generation is required; research and trend sources degrade gracefully.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

logger = logging.getLogger(__name__)


class ServiceStatus(Enum):
    """Status of a validated service."""
    AVAILABLE = "available"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


@dataclass
class ValidationResult:
    """Result of a single validation check."""
    service: str
    status: ServiceStatus
    message: str
    required: bool = True
    details: Optional[Dict[str, Any]] = None


@dataclass
class StartupValidation:
    """Complete startup validation results."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    services: Dict[str, ValidationResult] = field(default_factory=dict)

    def add_result(self, result: ValidationResult):
        """Add a validation result."""
        self.services[result.service] = result

        if result.status == ServiceStatus.UNAVAILABLE:
            if result.required:
                self.is_valid = False
                self.errors.append(f"[{result.service}] {result.message}")
            else:
                self.warnings.append(f"[{result.service}] {result.message}")
        elif result.status == ServiceStatus.DEGRADED:
            self.warnings.append(f"[{result.service}] {result.message}")

    def log_summary(self):
        """Log one line per service, then the overall verdict."""
        for service, result in self.services.items():
            if result.status == ServiceStatus.AVAILABLE:
                logger.info(f"{service}: {result.status.value}")
            else:
                logger.warning(f"{service}: {result.status.value} - {result.message}")

        if self.is_valid:
            logger.info("Startup validation passed")
        else:
            logger.error(f"Startup validation failed: {'; '.join(self.errors)}")

    def to_dict(self) -> dict:
        return {
            "valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "services": {name: r.status.value for name, r in self.services.items()},
        }


def validate_gemini_api() -> ValidationResult:
    """Validate Gemini API key."""
    api_key = os.getenv("GEMINI_API_KEY")

    if not api_key:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.UNAVAILABLE,
            message="GEMINI_API_KEY environment variable not set. "
                    "Script generation will not work.",
            required=True
        )

    if len(api_key) < 20:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.UNAVAILABLE,
            message="GEMINI_API_KEY appears to be invalid (too short).",
            required=True
        )

    try:
        from google import genai
        genai.Client(api_key=api_key)
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.AVAILABLE,
            message="Gemini API configured successfully"
        )
    except Exception as e:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.UNAVAILABLE,
            message=f"Failed to initialize Gemini client: {e}",
            required=True
        )


def validate_exa_api() -> ValidationResult:
    """Validate Exa API key for topic research."""
    if not os.getenv("EXA_API_KEY"):
        return ValidationResult(
            service="Exa Research",
            status=ServiceStatus.UNAVAILABLE,
            message="EXA_API_KEY not set. Topic research disabled.",
            required=False
        )

    return ValidationResult(
        service="Exa Research",
        status=ServiceStatus.AVAILABLE,
        message="Exa API configured"
    )


def validate_reddit() -> ValidationResult:
    """Reddit works without credentials through the public API."""
    missing = [
        name for name in ("REDDIT_CLIENT_ID", "REDDIT_CLIENT_SECRET")
        if not os.getenv(name)
    ]

    if missing:
        return ValidationResult(
            service="Reddit",
            status=ServiceStatus.DEGRADED,
            message=f"Missing environment variables: {', '.join(missing)}. "
                    "Using the rate-limited public API.",
            required=False,
            details={"missing": missing, "fallback": "public"}
        )

    return ValidationResult(
        service="Reddit",
        status=ServiceStatus.AVAILABLE,
        message="Reddit OAuth configured"
    )


def validate_youtube() -> ValidationResult:
    """Validate YouTube Data API key."""
    if not os.getenv("YOUTUBE_API_KEY"):
        return ValidationResult(
            service="YouTube",
            status=ServiceStatus.DEGRADED,
            message="YOUTUBE_API_KEY not set. YouTube trends disabled.",
            required=False
        )

    return ValidationResult(
        service="YouTube",
        status=ServiceStatus.AVAILABLE,
        message="YouTube Data API configured"
    )


def validate_google_trends() -> ValidationResult:
    """Google Trends needs no credentials, only the pytrends package."""
    try:
        import pytrends  # noqa: F401
        return ValidationResult(
            service="Google Trends",
            status=ServiceStatus.AVAILABLE,
            message="pytrends available"
        )
    except ImportError:
        return ValidationResult(
            service="Google Trends",
            status=ServiceStatus.DEGRADED,
            message="pytrends package not installed. Run: pip install pytrends",
            required=False
        )


def run_startup_validation(
    require_gemini: bool = True,
    require_exa: bool = False,
    log_summary: bool = True
) -> StartupValidation:
    """
    Run complete startup validation.

    Args:
        require_gemini: Whether Gemini API is required
        require_exa: Whether Exa research is required
        log_summary: Log validation summary

    Returns:
        StartupValidation with all results
    """
    validation = StartupValidation()

    gemini_result = validate_gemini_api()
    gemini_result.required = require_gemini
    validation.add_result(gemini_result)

    exa_result = validate_exa_api()
    exa_result.required = require_exa
    validation.add_result(exa_result)

    validation.add_result(validate_reddit())
    validation.add_result(validate_youtube())
    validation.add_result(validate_google_trends())

    if log_summary:
        validation.log_summary()

    return validation


# Module-level validation cache
_validation_cache: Optional[StartupValidation] = None


def get_cached_validation() -> Optional[StartupValidation]:
    """Get cached validation result."""
    return _validation_cache


def ensure_validated(require_gemini: bool = True) -> StartupValidation:
    """
    Ensure validation has been run, running it if necessary.
    Caches the result.
    """
    global _validation_cache

    if _validation_cache is None:
        _validation_cache = run_startup_validation(require_gemini=require_gemini)

    return _validation_cache


def reset_validation_cache():
    global _validation_cache
    _validation_cache = None
