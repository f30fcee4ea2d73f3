"""Error taxonomy.

Input errors stop a request before the pipeline starts, generation errors
abort it without storing anything, and lookups of unknown versions get their
own type so the transport layer can tell them apart. Oracle failures never
appear here: they are recovered where the oracle is called.
"""


class UIBuilderError(Exception):
    """Base class for all errors raised to callers."""


class RequestValidationError(UIBuilderError):
    """Missing or malformed request input (empty intent, missing id)."""


class GenerationError(UIBuilderError):
    """A pipeline stage produced output that failed validation."""

    stage: str = "pipeline"


class PlanValidationError(GenerationError):
    """Plan failed schema or semantic validation."""

    stage = "planner"


class WhitelistViolationError(GenerationError):
    """Plan referenced a component outside the fixed library."""

    stage = "generator"

    def __init__(self, components: list[str]) -> None:
        super().__init__(f"Component whitelist violation: {', '.join(components)}")
        self.components = components


class CodeSafetyError(GenerationError):
    """Generated code failed the safety checks."""

    stage = "safety"


class VersionNotFoundError(UIBuilderError):
    """No snapshot exists for the requested id."""

    def __init__(self, version_id: str) -> None:
        super().__init__(f"Version not found: {version_id}")
        self.version_id = version_id


__all__ = [
    "UIBuilderError",
    "RequestValidationError",
    "GenerationError",
    "PlanValidationError",
    "WhitelistViolationError",
    "CodeSafetyError",
    "VersionNotFoundError",
]
