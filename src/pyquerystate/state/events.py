"""Change records attached to signals.

Every write into a signal is tagged with where it came from. The record
is informational only: ordering between sources is always last writer
wins.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChangeSource(StrEnum):
    INITIAL = "initial"
    MOUNT = "mount"
    NAVIGATION = "navigation"
    WRITE = "write"


class SignalChange(BaseModel):
    """Describes the most recent write applied to a signal."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Signal key")
    source: ChangeSource
    version: int = Field(..., ge=0, description="Signal write counter after this change")
    changed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("changed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
