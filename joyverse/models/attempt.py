"""Typing attempt data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from joyverse.core.logging import get_logger

logger = get_logger(__name__)

_timestamp = TypeAdapter(datetime)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tier(str, Enum):
    """Difficulty tiers partitioning the word bank."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Attempt(BaseModel):
    """
    One recorded word-typing trial.

    Accepts the web client's camelCase payloads. Numeric fields that are
    missing, null, negative or not numbers are stored as zero, and an
    unreadable completion time is replaced by the current time.
    """

    model_config = ConfigDict(frozen=True)

    word: str = ""
    input: str = ""
    correct: bool = False
    time_spent: int = Field(
        default=0,
        validation_alias=AliasChoices("time_spent", "timeSpent", "timeSpentMs"),
    )
    hesitations: int = 0
    completed_at: datetime = Field(
        default_factory=utcnow,
        validation_alias=AliasChoices("completed_at", "completedAt"),
    )

    @field_validator("word", "input", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("correct", mode="before")
    @classmethod
    def _as_flag(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("time_spent", "hesitations", mode="before")
    @classmethod
    def _as_count(cls, value: Any) -> int:
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(number, 0)

    @field_validator("completed_at", mode="before")
    @classmethod
    def _default_timestamp(cls, value: Any) -> datetime:
        if value is None:
            return utcnow()
        try:
            return _timestamp.validate_python(value)
        except ValidationError:
            return utcnow()


def parse_attempts(raw: Any) -> list[Attempt]:
    """
    Build an attempt list from untrusted input.

    Anything that is not a list or tuple yields an empty list, and records
    that cannot be read as an attempt are skipped.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    attempts: list[Attempt] = []
    for item in raw:
        if isinstance(item, Attempt):
            attempts.append(item)
            continue
        if not isinstance(item, dict):
            continue
        try:
            attempts.append(Attempt.model_validate(item))
        except ValidationError as exc:
            logger.debug("Skipping unreadable attempt: %s", exc.errors()[0]["msg"])
    return attempts
