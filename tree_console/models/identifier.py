"""Identifiers of the engines, containers and tests of an execution."""

from dataclasses import dataclass
from enum import Enum


class IdentifierKind(Enum):
    """Rank of a node in the execution hierarchy."""

    ENGINE = "ENGINE"
    CONTAINER = "CONTAINER"
    TEST = "TEST"


@dataclass(frozen=True, kw_only=True)
class TestIdentifier:
    """Identity of a single unit reported by the execution."""

    __test__ = False

    unique_id: str
    display_name: str
    kind: IdentifierKind = IdentifierKind.TEST
    parent_id: str | None = None

    @property
    def is_test(self) -> bool:
        """Whether this identifier denotes a leaf test."""
        return self.kind is IdentifierKind.TEST

    @property
    def is_container(self) -> bool:
        """Whether this identifier denotes an engine or a container."""
        return not self.is_test
