"""Build the tree model incrementally from execution events."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from tree_console.listener import ExecutionListener
from tree_console.models.identifier import TestIdentifier
from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import ExecutionResult
from tree_console.tree.node import LifecycleError, TreeNode

log = logging.getLogger(__name__)


class DuplicateIdentifierError(LifecycleError):
    """Raised when an identifier is started twice."""


class UnknownIdentifierError(LifecycleError):
    """Raised when an event refers to an identifier that was never started."""


@dataclass(kw_only=True)
class TreeBuilder(ExecutionListener):
    """Execution listener that assembles a :class:`TreeNode` hierarchy.

    Nodes are attached below the node of their parent identifier, or below
    the synthetic root when the parent was never seen. Each node belongs to
    the builder until it is sealed by a skip or finish event.
    """

    clock: Callable[[], float] = time.monotonic
    root_caption: str = ""
    _root: TreeNode | None = field(default=None, init=False, repr=False)
    _nodes: dict[str, TreeNode] = field(default_factory=dict, init=False, repr=False)
    _started_at: dict[str, float] = field(
        default_factory=dict, init=False, repr=False
    )

    @property
    def root(self) -> TreeNode:
        """The synthetic root of the current run."""
        if self._root is None:
            raise LifecycleError("Execution has not started")
        return self._root

    def execution_started(self, test_count: int) -> None:
        log.debug("Building tree for %d static test(s)", test_count)
        self._root = TreeNode.root(self.root_caption)
        self._nodes.clear()
        self._started_at.clear()

    def on_start(self, identifier: TestIdentifier) -> None:
        if identifier.unique_id in self._nodes:
            raise DuplicateIdentifierError(
                f"Identifier '{identifier.unique_id}' was already started"
            )
        self._attach(identifier, TreeNode.for_identifier(identifier))
        self._started_at[identifier.unique_id] = self.clock()
        log.debug("Started %s", identifier.unique_id)

    def on_skip(self, identifier: TestIdentifier, reason: str) -> None:
        node = self._nodes.get(identifier.unique_id)
        if node is None:
            node = self._attach(identifier, TreeNode.for_identifier(identifier))
        node.skip(reason)
        log.debug("Skipped %s: %s", identifier.unique_id, reason)

    def on_report(self, identifier: TestIdentifier, entry: ReportEntry) -> None:
        self._lookup(identifier).add_report(entry)

    def on_finish(
        self,
        identifier: TestIdentifier,
        result: ExecutionResult,
        duration: int | None = None,
    ) -> None:
        node = self._lookup(identifier)
        if duration is None:
            now = self.clock()
            started_at = self._started_at.get(identifier.unique_id, now)
            duration = round((now - started_at) * 1000)
        node.finish(result, duration)
        log.debug(
            "Finished %s: status=%s duration=%dms",
            identifier.unique_id,
            result.status.value,
            duration,
        )

    def _attach(self, identifier: TestIdentifier, node: TreeNode) -> TreeNode:
        parent = self.root
        if identifier.parent_id is not None:
            parent = self._nodes.get(identifier.parent_id, parent)
        self._nodes[identifier.unique_id] = node
        return parent.add_child(node)

    def _lookup(self, identifier: TestIdentifier) -> TreeNode:
        if self._root is None:
            raise LifecycleError("Execution has not started")
        try:
            return self._nodes[identifier.unique_id]
        except KeyError:
            raise UnknownIdentifierError(
                f"Identifier '{identifier.unique_id}' was never started"
            ) from None
