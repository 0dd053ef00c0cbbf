"""Shared pydantic configuration of validated values."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model rejecting unknown fields.

    Report entries and console configuration are built once and then only
    read while rendering.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
