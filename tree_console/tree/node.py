"""In-memory model of the execution hierarchy."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

from tree_console.models.identifier import IdentifierKind, TestIdentifier
from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import ExecutionResult


class LifecycleError(Exception):
    """Raised when execution events arrive in an impossible order."""


class NodeStateError(LifecycleError):
    """Raised when a node is mutated after it has been sealed."""


@dataclass(frozen=True)
class Running:
    """The node has started and has not yet finished."""


@dataclass(frozen=True)
class Skipped:
    """The node was skipped and will never finish."""

    reason: str


@dataclass(frozen=True)
class Finished:
    """The node finished with a terminal result."""

    result: ExecutionResult


NodeState: TypeAlias = Running | Skipped | Finished

RUNNING = Running()


@dataclass(eq=False, kw_only=True)
class TreeNode:
    """A container or test in the rendered tree.

    A node is created running and is sealed exactly once, either by
    :meth:`skip` or by :meth:`finish`. Sealed nodes are read-only.
    """

    caption: str
    kind: IdentifierKind = IdentifierKind.TEST
    visible: bool = True
    unique_id: str | None = None
    children: list["TreeNode"] = field(default_factory=list)
    duration: int = 0
    state: NodeState = RUNNING
    reports: list[ReportEntry] = field(default_factory=list)

    @classmethod
    def root(cls, caption: str = "") -> "TreeNode":
        """Create the synthetic node representing the whole run."""
        return cls(caption=caption, kind=IdentifierKind.ENGINE)

    @classmethod
    def for_identifier(cls, identifier: TestIdentifier) -> "TreeNode":
        """Create a running node for an executed identifier."""
        return cls(
            caption=identifier.display_name,
            kind=identifier.kind,
            unique_id=identifier.unique_id,
        )

    @property
    def result(self) -> ExecutionResult | None:
        """Terminal result, absent while running or when skipped."""
        if isinstance(self.state, Finished):
            return self.state.result
        return None

    @property
    def reason(self) -> str | None:
        """Skip reason, absent unless skipped."""
        if isinstance(self.state, Skipped):
            return self.state.reason
        return None

    @property
    def is_sealed(self) -> bool:
        """Whether the node has been skipped or finished."""
        return not isinstance(self.state, Running)

    def add_child(self, child: "TreeNode") -> "TreeNode":
        """Append ``child`` and return it."""
        self.children.append(child)
        return child

    def add_report(self, entry: ReportEntry) -> None:
        """Append a report entry published while the node is running."""
        self._ensure_running("report on")
        self.reports.append(entry)

    def skip(self, reason: str) -> None:
        """Seal the node as skipped."""
        self._ensure_running("skip")
        self.state = Skipped(reason)

    def finish(self, result: ExecutionResult, duration: int) -> None:
        """Seal the node with its terminal result and elapsed milliseconds."""
        self._ensure_running("finish")
        if duration < 0:
            raise NodeStateError(f"Negative duration {duration} for '{self.caption}'")
        self.duration = duration
        self.state = Finished(result)

    def walk(self) -> Iterator["TreeNode"]:
        """Iterate this node and its descendants in depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count_visible(self) -> int:
        """Number of visible nodes in this subtree, including this one."""
        return sum(1 for node in self.walk() if node.visible)

    def _ensure_running(self, action: str) -> None:
        if self.is_sealed:
            raise NodeStateError(
                f"Cannot {action} '{self.caption}': node is already "
                f"{type(self.state).__name__.lower()}"
            )
