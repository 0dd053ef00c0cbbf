"""Timestamped key/value entries published by running tests."""

from collections.abc import Mapping
from datetime import datetime

from pydantic import Field, field_validator

from tree_console.models.base import Model


def require_not_blank(pairs: Mapping[str, str]) -> Mapping[str, str]:
    """Reject blank keys and values."""
    for key, value in pairs.items():
        if not key.strip():
            raise ValueError("keys must not be blank")
        if not value.strip():
            raise ValueError(f"value for key '{key}' must not be blank")
    return pairs


class ReportEntry(Model):
    """Key/value pairs reported by a test at a point in time."""

    timestamp: datetime = Field(
        default_factory=datetime.now, description="When the entry was published"
    )
    key_value_pairs: Mapping[str, str] = Field(
        default_factory=dict, description="Reported values in insertion order"
    )

    @field_validator("key_value_pairs")
    @classmethod
    def check_not_blank(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return require_not_blank(value)

    @classmethod
    def from_pair(
        cls, key: str, value: str, *, timestamp: datetime | None = None
    ) -> "ReportEntry":
        """Create an entry holding a single key/value pair."""
        if timestamp is None:
            return cls(key_value_pairs={key: value})
        return cls(timestamp=timestamp, key_value_pairs={key: value})

    def formatted_timestamp(self) -> str:
        """Format the timestamp as ``uuuu-MM-dd'T'HH:mm:ss.SSS``."""
        ts = self.timestamp
        return (
            f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
            f"T{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
            f".{ts.microsecond // 1000:03d}"
        )

    def __str__(self) -> str:
        pairs = "".join(
            f", {key} = '{value}'" for key, value in self.key_value_pairs.items()
        )
        return f"ReportEntry [timestamp = {self.formatted_timestamp()}{pairs}]"
