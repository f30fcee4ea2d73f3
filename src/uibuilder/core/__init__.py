"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    UIBuilderError,
    RequestValidationError,
    GenerationError,
    PlanValidationError,
    WhitelistViolationError,
    CodeSafetyError,
    VersionNotFoundError,
)
from .validate import GenerationRequest, ReplayRequest, RollbackRequest, GenerationAction
from .logging_config import configure_logging, get_logger, LogContext
from .json import extract_json, loads, safe_json_dumps, canonical_json, JSONParseError
from .hash import hash_string, rolling_hash


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "UIBuilderError",
    "RequestValidationError",
    "GenerationError",
    "PlanValidationError",
    "WhitelistViolationError",
    "CodeSafetyError",
    "VersionNotFoundError",
    # Requests
    "GenerationRequest",
    "ReplayRequest",
    "RollbackRequest",
    "GenerationAction",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "loads",
    "safe_json_dumps",
    "canonical_json",
    "JSONParseError",
    # DI
    "create_container",
    # Hashing
    "hash_string",
    "rolling_hash",
]
