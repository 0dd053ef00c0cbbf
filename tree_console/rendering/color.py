"""ANSI colors and the strategy that applies them."""

from dataclasses import dataclass
from enum import Enum

from tree_console.models.identifier import IdentifierKind
from tree_console.models.result import Status


class Color(Enum):
    """ANSI SGR color codes, with aliases naming what they highlight."""

    NONE = 0
    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    PURPLE = 35
    CYAN = 36
    WHITE = 37

    SUCCESSFUL = 32
    ABORTED = 33
    FAILED = 31
    SKIPPED = 35
    CONTAINER = 36
    TEST = 34
    DYNAMIC = 35
    REPORTED = 37

    @property
    def ansi(self) -> str:
        """Escape sequence switching the terminal to this color."""
        return f"\x1b[{self.value}m"

    @classmethod
    def for_status(cls, status: Status) -> "Color":
        return {
            Status.SUCCESSFUL: cls.SUCCESSFUL,
            Status.ABORTED: cls.ABORTED,
            Status.FAILED: cls.FAILED,
        }[status]

    @classmethod
    def for_kind(cls, kind: IdentifierKind) -> "Color":
        return cls.TEST if kind is IdentifierKind.TEST else cls.CONTAINER


@dataclass(frozen=True)
class Colorizer:
    """Wraps text in color escapes unless coloring is disabled.

    Callers paint leaf text only; painted text is never painted again.
    """

    enabled: bool = True

    @classmethod
    def from_flag(cls, disable_ansi_colors: bool) -> "Colorizer":
        return cls(enabled=not disable_ansi_colors)

    def paint(self, color: Color, text: str) -> str:
        """Return ``text`` wrapped in ``color`` and a reset sequence."""
        if not self.enabled or color is Color.NONE:
            return text
        return color.ansi + text + Color.NONE.ansi
