"""Request validation with strong typing."""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import RequestValidationError

# Validation limits
MAX_INTENT_LENGTH = 4_000
MAX_PLAN_SIZE = 256 * 1024  # 256KB of serialized plan
MAX_NODE_DEPTH = 100  # nodes nested inside one another

GenerationAction = Literal["generate", "modify", "regenerate"]

R = TypeVar("R", bound="RequestValidator")


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        frozen=True,  # Immutable by default
        populate_by_name=True,
    )

    @classmethod
    def parse(cls: type[R], data: Any) -> R:
        """Validate raw input, raising the input-error type callers expect."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise RequestValidationError(format_validation_error(e)) from e


class GenerationRequest(RequestValidator):
    """Validated generate / modify / regenerate request."""

    intent: str = Field(min_length=1, max_length=MAX_INTENT_LENGTH)
    action: GenerationAction = "generate"
    base_version_id: str | None = Field(default=None, alias="baseVersionId", min_length=1)

    @field_validator("intent")
    @classmethod
    def validate_intent(cls, v: str) -> str:
        """Ensure intent is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Intent is required")
        return stripped


class ReplayRequest(RequestValidator):
    """Validated replay request."""

    source_version_id: str = Field(alias="sourceVersionId", min_length=1)


class RollbackRequest(RequestValidator):
    """Validated rollback request."""

    id: str = Field(min_length=1)


def format_validation_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic error into ``loc: message; loc: message``."""
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)


__all__ = [
    "MAX_INTENT_LENGTH",
    "MAX_PLAN_SIZE",
    "MAX_NODE_DEPTH",
    "GenerationAction",
    "RequestValidator",
    "GenerationRequest",
    "ReplayRequest",
    "RollbackRequest",
    "format_validation_error",
]
