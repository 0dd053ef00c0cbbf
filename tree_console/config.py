"""Configuration of console output."""

import sys
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from tree_console.models.base import Model
from tree_console.rendering.theme import Theme


class Details(Enum):
    """How much of the execution is written to the console."""

    NONE = "none"
    FLAT = "flat"
    TREE = "tree"


def default_theme() -> Theme:
    """Theme matching the encoding of standard output."""
    return Theme.for_encoding(getattr(sys.stdout, "encoding", None))


class ConsoleConfig(Model):
    """Console output options, fixed for a whole run."""

    details: Details = Details.TREE
    theme: Theme = Field(default_factory=default_theme)
    disable_ansi_colors: bool = False

    @field_validator("details", "theme", mode="before")
    @classmethod
    def lowercase_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value
