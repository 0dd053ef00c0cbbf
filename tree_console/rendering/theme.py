"""Glyph sets used to draw the tree and status icons."""

from dataclasses import dataclass
from enum import Enum

from tree_console.models.result import Status


@dataclass(frozen=True, kw_only=True)
class Tiles:
    """Lookup table of the glyphs of one theme."""

    root: str
    vertical: str
    entry: str
    end: str
    successful: str
    aborted: str
    failed: str
    skipped: str


class Theme(Enum):
    """Built-in visual themes."""

    ASCII = "ascii"
    UNICODE = "unicode"

    @classmethod
    def for_encoding(cls, encoding: str | None) -> "Theme":
        """Pick UNICODE for UTF encodings and ASCII for anything else."""
        if encoding and encoding.lower().replace("-", "").startswith("utf"):
            return cls.UNICODE
        return cls.ASCII

    @property
    def tiles(self) -> Tiles:
        return _TILES[self]

    def root(self) -> str:
        return self.tiles.root

    def vertical(self) -> str:
        return self.tiles.vertical

    def blank(self) -> str:
        """Spaces as wide as the vertical tile."""
        return " " * len(self.tiles.vertical)

    def entry(self) -> str:
        """Bullet of a child that has further siblings."""
        return self.tiles.entry

    def end(self) -> str:
        """Bullet of the last child."""
        return self.tiles.end

    def status(self, status: Status) -> str:
        match status:
            case Status.SUCCESSFUL:
                return self.tiles.successful
            case Status.ABORTED:
                return self.tiles.aborted
            case Status.FAILED:
                return self.tiles.failed

    def skipped(self) -> str:
        return self.tiles.skipped


_TILES: dict[Theme, Tiles] = {
    Theme.ASCII: Tiles(
        root=".",
        vertical="| ",
        entry="+--",
        end="'--",
        successful="[OK]",
        aborted="[A]",
        failed="[X]",
        skipped="[S]",
    ),
    Theme.UNICODE: Tiles(
        root="╷",
        vertical="│  ",
        entry="├─",
        end="└─",
        successful="✔",
        aborted="■",
        failed="✘",
        skipped="↷",
    ),
}
